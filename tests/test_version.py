from importlib.metadata import version
import seqphylo


def test_version():
    """
    Check if the version in the package is equal to the version of the
    installed distribution.
    """
    assert seqphylo.__version__ == version("seqphylo")
