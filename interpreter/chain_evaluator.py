"""Expression chain evaluator.

Reduces a chain segment by segment, strictly left to right inside each
segment (no operator precedence). Later segments may link back to values
finalized by earlier ones; only the final segment's value is returned.

Variables used throughout this module:
    i        -- start position of the segment being reduced
    c        -- position whose operation is being applied (c -> c + 1)
    working  -- per-call copy of the chain magnitudes; working[i] holds the
                running value of the current segment
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from interpreter.chain_render import render_segment
from primitives.expression_chain.chain import Chain, IndexOutOfRange
from primitives.expression_chain.instruction import Instruction, Kind, Operation, Prefix
from primitives.field import FLOAT64, Element, ElementDomain

# --- Constants ---

NROWS_PACK = 1 << 16  # Binding rows per batch in evaluate_rows


class ChainEvaluator:
    """Evaluates chains over one element domain.

    The evaluator holds no per-call state, so one instance may be shared
    between threads.
    """

    def __init__(self, domain: ElementDomain = FLOAT64, nrows_pack: int = NROWS_PACK,
                 debug: bool = False) -> None:
        if nrows_pack < 1:
            raise ValueError(f"nrows_pack must be positive, got {nrows_pack}")
        self.domain = domain
        self.nrows_pack = nrows_pack
        self.debug = debug

    # --- Entry Points ---

    def evaluate(self, chain, bindings: Sequence = ()) -> Element:
        """Evaluate chain against one set of variable bindings.

        Raises:
            InvalidChain: empty or unterminated chain
            ForwardOrSelfLink: link to the record's own or a later position
            IndexOutOfRange: variable slot not covered by bindings
        """
        chain = Chain.of(chain)
        self._check_bindings(chain, len(bindings))
        values = [self.domain.element(v) for v in bindings]
        return self._reduce(chain, values)

    def call(self, chain, *values) -> Element:
        """Evaluate with positional bindings: call(chain, v0, v1, ...)."""
        return self.evaluate(chain, values)

    def evaluate_rows(self, chain, rows) -> Element:
        """Evaluate chain once per row of a (n_rows, n_variables) binding matrix.

        Rows are processed in batches of nrows_pack; each batch is reduced in a
        single vectorized pass. Entry r of the result equals
        evaluate(chain, rows[r]).
        """
        chain = Chain.of(chain)
        rows = np.asarray(rows)
        if rows.ndim == 1 and rows.size == 0:
            rows = rows.reshape(0, 0)
        if rows.ndim != 2:
            raise ValueError(f"Binding rows must be 2-D, got shape {rows.shape}")
        n_rows, n_cols = rows.shape
        self._check_bindings(chain, n_cols)

        parts = []
        for row in range(0, n_rows, self.nrows_pack):
            batch = rows[row:row + self.nrows_pack]
            columns = [self.domain.array(batch[:, k]) for k in range(chain.n_variables)]
            result = self._reduce(chain, columns)
            parts.append(self.domain.broadcast(result, len(batch)))
        return self.domain.concatenate(parts)

    # --- Reduction ---

    def _check_bindings(self, chain: Chain, n_bindings: int) -> None:
        if chain.n_variables > n_bindings:
            for pos, record in enumerate(chain):
                if record.kind is Kind.variable and record.magnitude >= n_bindings:
                    raise IndexOutOfRange(
                        f"Variable at position {pos} reads v{record.magnitude}, "
                        f"only {n_bindings} bindings supplied"
                    )

    def _reduce(self, chain: Chain, bindings: list) -> Element:
        records = list(chain)
        working = [self._initial_value(r) for r in records]
        last = len(records) - 1

        with np.errstate(divide="ignore", over="ignore", invalid="ignore", under="ignore"):
            i = 0
            while True:
                working[i] = self._resolve(records[i], i, working, bindings)
                c = i
                # A terminator at the segment start closes a one-record segment;
                # it is not a no-op that folds the following run into working[i].
                while records[c].operation is not Operation.none:
                    right = self._resolve(records[c + 1], c + 1, working, bindings)
                    working[i] = self._apply_op(records[c].operation, working[i], right)
                    c += 1

                if self.debug:
                    print(f"segment [{i}..{c}] {render_segment(chain, i, c)} => {working[i]}")

                if c == last:
                    return working[i]
                i = c + 1

    def _initial_value(self, record: Instruction) -> Element:
        # link/variable records keep their slot index until resolved
        return self.domain.element(record.magnitude)

    def _resolve(self, record: Instruction, pos: int, working: list, bindings: list) -> Element:
        """Operand value of record: link target, binding, or literal; then its sign."""
        if record.kind is Kind.link:
            value = working[record.magnitude]
        elif record.kind is Kind.variable:
            value = bindings[record.magnitude]
        else:
            value = working[pos]

        if record.prefix is Prefix.negated:
            value = self.domain.negate(value)
        return value

    def _apply_op(self, op: Operation, a: Element, b: Element) -> Element:
        """Apply op to the running value a and operand b."""
        if op is Operation.add:
            return self.domain.add(a, b)
        if op is Operation.sub:
            return self.domain.sub(a, b)
        if op is Operation.mul:
            return self.domain.mul(a, b)
        if op is Operation.div:
            return self.domain.div(a, b)
        if op is Operation.pow:
            return self.domain.pow(a, b)
        raise ValueError(f"Invalid operation: {op}")


# --- Module-level Convenience ---

_DEFAULT = ChainEvaluator()


def evaluate(chain, bindings: Sequence = (), domain: ElementDomain | None = None) -> Element:
    """Evaluate chain against bindings (float64 unless a domain is given)."""
    evaluator = _DEFAULT if domain is None else ChainEvaluator(domain)
    return evaluator.evaluate(chain, bindings)


def call(chain, *values, domain: ElementDomain | None = None) -> Element:
    """Evaluate chain with positional bindings."""
    return evaluate(chain, values, domain=domain)


def evaluate_rows(chain, rows, domain: ElementDomain | None = None) -> Element:
    """Evaluate chain for every row of a 2-D binding matrix."""
    evaluator = _DEFAULT if domain is None else ChainEvaluator(domain)
    return evaluator.evaluate_rows(chain, rows)
