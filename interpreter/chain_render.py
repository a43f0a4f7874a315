"""Human-readable form of expression chains, for diagnostics only."""

from typing import List

from primitives.expression_chain.chain import Chain


def render_segment(chain: Chain, start: int, end: int) -> str:
    """Render records start..end (inclusive) separated by single spaces."""
    return " ".join(chain[pos].render() for pos in range(start, end + 1))


def render_segments(chain) -> List[str]:
    """One rendered line per segment, in chain order."""
    chain = Chain.of(chain)
    return [render_segment(chain, start, end) for start, end in chain.segments()]


def render_chain(chain) -> str:
    """Render a whole chain, one segment per line.

    A two-segment chain renders as:
        2 mul v0 add 1
        #0 div -v1
    """
    return "\n".join(render_segments(chain))
