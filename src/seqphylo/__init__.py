# This source code is part of the Seqphylo package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This is the top-level package of *Seqphylo*.
Although it does not provide useful functionality for most users,
it does provide the base classes and error types used by the
:mod:`seqphylo.sequence` subpackages.
"""

__version__ = "0.1.0"
__name__ = "seqphylo"
__author__ = "Patrick Kunzmann"

from .copyable import *
from .error import *
