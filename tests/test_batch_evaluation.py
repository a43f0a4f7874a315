"""Tests for evaluating one chain against many binding rows.

Each test checks the vectorized result against per-row scalar evaluation.
"""

import numpy as np
import pytest

from interpreter.chain_evaluator import ChainEvaluator, evaluate, evaluate_rows
from primitives.expression_chain import Chain, IndexOutOfRange, Instruction, Operation
from primitives.field import FF, GOLDILOCKS, GOLDILOCKS_PRIME, INT64

L = Instruction.literal
V = Instruction.variable


class TestEvaluateRows:
    """Row-batched evaluation over float64."""

    def test_matches_scalar_evaluation(self, reuse_chain: Chain) -> None:
        rng = np.random.default_rng(7)
        rows = rng.integers(-5, 6, size=(40, 2)).astype(np.float64)
        result = evaluate_rows(reuse_chain, rows)
        expected = [evaluate(reuse_chain, row) for row in rows]
        assert result.shape == (40,)
        assert np.array_equal(result, expected)

    def test_division_by_zero_per_row(self) -> None:
        chain = [V(0, Operation.div), V(1)]
        result = evaluate_rows(chain, [[6, 3], [6, 0], [1, 4]])
        assert np.array_equal(result, [2.0, 0.0, 0.25])

    def test_constant_chain_is_broadcast(self) -> None:
        result = evaluate_rows([L(2, Operation.mul), L(21)], np.zeros((3, 0)))
        assert np.array_equal(result, [42.0, 42.0, 42.0])

    def test_nan_only_in_invalid_rows(self) -> None:
        result = evaluate_rows([V(0, Operation.pow), L(0.5)], [[4], [-4], [9]])
        assert result[0] == 2.0
        assert np.isnan(result[1])
        assert result[2] == 3.0

    @pytest.mark.parametrize("nrows_pack", [1, 3, 64])
    def test_batches(self, reuse_chain: Chain, nrows_pack: int) -> None:
        rows = np.arange(20, dtype=np.float64).reshape(10, 2) + 1
        evaluator = ChainEvaluator(nrows_pack=nrows_pack)
        expected = [evaluator.evaluate(reuse_chain, row) for row in rows]
        assert np.array_equal(evaluator.evaluate_rows(reuse_chain, rows), expected)

    def test_empty_rows(self) -> None:
        result = evaluate_rows([V(0)], np.zeros((0, 1)))
        assert result.shape == (0,)

    def test_too_few_columns(self) -> None:
        with pytest.raises(IndexOutOfRange):
            evaluate_rows([V(0, Operation.add), V(2)], np.zeros((4, 2)))

    def test_rows_must_be_2d(self) -> None:
        with pytest.raises(ValueError):
            evaluate_rows([V(0)], [1.0, 2.0])

    def test_invalid_pack_size(self) -> None:
        with pytest.raises(ValueError):
            ChainEvaluator(nrows_pack=0)


class TestEvaluateRowsDomains:
    """Row batches over integer and field domains."""

    def test_int64(self) -> None:
        chain = [V(0, Operation.div), V(1, Operation.sub), L(1)]
        result = evaluate_rows(chain, [[7, 2], [-7, 2], [5, 0]], domain=INT64)
        assert result.tolist() == [2, -4, -1]

    def test_goldilocks(self) -> None:
        chain = [V(0, Operation.mul), V(1, Operation.div), L(2)]
        rows = [[3, 4], [5, 6], [1, 1]]
        result = evaluate_rows(chain, rows, domain=GOLDILOCKS)
        assert isinstance(result, FF)
        expected = [int(evaluate(chain, row, domain=GOLDILOCKS)) for row in rows]
        assert [int(v) for v in result] == expected
        assert expected[:2] == [6, 15]
        # 1 / 2 is the field inverse of 2
        assert (2 * expected[2]) % GOLDILOCKS_PRIME == 1

    def test_goldilocks_rejects_fractional_rows(self) -> None:
        with pytest.raises(ValueError):
            evaluate_rows([V(0, Operation.add), L(1)], [[1.0], [2.5]], domain=GOLDILOCKS)

    def test_int64_power_overflow_rows(self) -> None:
        result = evaluate_rows([V(0, Operation.pow), V(1)], [[10, 18], [10, 19]], domain=INT64)
        assert result.tolist() == [10 ** 18, 0]
