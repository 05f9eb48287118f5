# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

from importlib.metadata import version
import protcompare


def test_version():
    """
    Check if the package version matches the version of the
    distribution.
    """
    assert protcompare.__version__ == version("protcompare")
