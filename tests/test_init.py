# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__author__ = "Daniel Bauer"

import seqphylo


def test_version_number():
    assert hasattr(seqphylo, "__version__")
    assert isinstance(seqphylo.__version__, str)
