"""
Pytest configuration and shared chains for the test suite.
"""

import sys
from pathlib import Path

import pytest

# tests/ sits inside the repository root, so parent is the import root
root_dir = Path(__file__).parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from primitives.expression_chain import ChainBuilder, Operation, Prefix  # noqa: E402


@pytest.fixture
def reuse_chain():
    """(v0 * 3) in segment one, then #0 + 1 and #0 / -v1 reuse it.

    Segments:
        v0 mul 3
        #0 add 1
        #2 div -v1
    """
    b = ChainBuilder()
    first = b.variable(0, Operation.mul)
    b.literal(3)
    second = b.link(first, Operation.add)
    b.literal(1)
    b.link(second, Operation.div)
    b.variable(1, prefix=Prefix.negated)
    return b.build()
