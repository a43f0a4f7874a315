"""Interpreter - Chain evaluation and diagnostics rendering."""

from interpreter.chain_evaluator import (
    NROWS_PACK,
    ChainEvaluator,
    call,
    evaluate,
    evaluate_rows,
)
from interpreter.chain_render import render_chain, render_segment, render_segments

__all__ = [
    # Evaluation
    "ChainEvaluator",
    "NROWS_PACK",
    "evaluate",
    "evaluate_rows",
    "call",
    # Rendering
    "render_chain",
    "render_segment",
    "render_segments",
]
