"""Expression chain package.

Flat operand/operator records and the validated chains built from them.
Evaluation lives in interpreter.chain_evaluator; this package only
describes chains.
"""

from primitives.expression_chain.chain import (
    Chain,
    ChainBuilder,
    ChainError,
    ForwardOrSelfLink,
    IndexOutOfRange,
    InvalidChain,
)
from primitives.expression_chain.instruction import (
    Instruction,
    Kind,
    Operation,
    Prefix,
    format_number,
    operation_name,
)

__all__ = [
    'Chain',
    'ChainBuilder',
    'ChainError',
    'InvalidChain',
    'ForwardOrSelfLink',
    'IndexOutOfRange',
    'Instruction',
    'Kind',
    'Operation',
    'Prefix',
    'format_number',
    'operation_name',
]
