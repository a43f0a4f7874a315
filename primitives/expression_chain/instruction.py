"""Instruction records: one operand/operator cell of an expression chain.

A record carries four independent axes:
    magnitude  -- literal value, or slot index for link/variable records
    operation  -- operator applied between this record and the next one
    prefix     -- sign applied to the resolved operand
    kind       -- literal | link | variable (single discriminant)

operation == none marks the last record of a segment.
"""

from dataclasses import dataclass
from enum import Enum
from numbers import Integral, Real

import numpy as np


class Operation(Enum):
    """Operator between a record and its successor."""
    none = 0
    add = 1
    sub = 2
    mul = 3
    div = 4
    pow = 5


class Prefix(Enum):
    """Sign applied to a resolved operand."""
    none = 0
    positive = 1
    negated = 2


class Kind(Enum):
    """How the magnitude of a record is interpreted."""
    literal = 0   # magnitude is the value
    link = 1      # magnitude is the index of an earlier record
    variable = 2  # magnitude is a binding slot


def operation_name(op: Operation) -> str:
    """Textual operator name; empty for the terminator."""
    if op is Operation.none:
        return ""
    return op.name


_SIGNS = {
    Prefix.none: "",
    Prefix.positive: "+",
    Prefix.negated: "-",
}


def _as_index(value) -> int:
    """Validate a link/variable slot and return it as int."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TypeError(f"Slot index must be a number, got {type(value).__name__}")
    if not isinstance(value, Integral) and not float(value).is_integer():
        raise ValueError(f"Slot index must be integral, got {value}")
    index = int(value)
    if index < 0:
        raise ValueError(f"Slot index must be non-negative, got {index}")
    return index


def format_number(value) -> str:
    """Format a literal the way a C++ ostream does (%g for floats)."""
    if isinstance(value, (float, np.floating)):
        return f"{float(value):g}"
    return str(value)


@dataclass
class Instruction:
    """Operand/operator record.

    Attributes:
        magnitude: Literal value, or slot index when kind is link/variable
        operation: Operator between this record and the next
        prefix: Sign applied to the resolved operand
        kind: Discriminant for magnitude
    """
    magnitude: object = 0
    operation: Operation = Operation.none
    prefix: Prefix = Prefix.none
    kind: Kind = Kind.literal

    def __post_init__(self) -> None:
        if not isinstance(self.operation, Operation):
            raise TypeError(f"operation must be an Operation, got {self.operation!r}")
        if not isinstance(self.prefix, Prefix):
            raise TypeError(f"prefix must be a Prefix, got {self.prefix!r}")
        if not isinstance(self.kind, Kind):
            raise TypeError(f"kind must be a Kind, got {self.kind!r}")
        if self.kind is not Kind.literal:
            self.magnitude = _as_index(self.magnitude)

    # --- Constructors ---

    @classmethod
    def literal(cls, value, operation: Operation = Operation.none,
                prefix: Prefix = Prefix.none) -> 'Instruction':
        return cls(value, operation, prefix, Kind.literal)

    @classmethod
    def link(cls, index: int, operation: Operation = Operation.none,
             prefix: Prefix = Prefix.none) -> 'Instruction':
        return cls(index, operation, prefix, Kind.link)

    @classmethod
    def variable(cls, index: int, operation: Operation = Operation.none,
                 prefix: Prefix = Prefix.none) -> 'Instruction':
        return cls(index, operation, prefix, Kind.variable)

    # --- Accessors ---

    def get_operation(self) -> Operation:
        return self.operation

    def set_operation(self, operation: Operation) -> None:
        if not isinstance(operation, Operation):
            raise TypeError(f"operation must be an Operation, got {operation!r}")
        self.operation = operation

    def get_prefix(self) -> Prefix:
        return self.prefix

    def set_prefix(self, prefix: Prefix) -> None:
        if not isinstance(prefix, Prefix):
            raise TypeError(f"prefix must be a Prefix, got {prefix!r}")
        self.prefix = prefix

    def is_literal(self) -> bool:
        return self.kind is Kind.literal

    def is_link(self) -> bool:
        return self.kind is Kind.link

    def get_link(self) -> int:
        if self.kind is not Kind.link:
            raise ValueError(f"Record is a {self.kind.name}, not a link")
        return self.magnitude

    def set_link(self, index: int) -> None:
        self.magnitude = _as_index(index)
        self.kind = Kind.link

    def is_variable(self) -> bool:
        return self.kind is Kind.variable

    def get_variable(self) -> int:
        if self.kind is not Kind.variable:
            raise ValueError(f"Record is a {self.kind.name}, not a variable")
        return self.magnitude

    def set_variable(self, index: int) -> None:
        self.magnitude = _as_index(index)
        self.kind = Kind.variable

    def clear(self) -> None:
        """Reset to the literal 0 with no operator and no sign."""
        self.magnitude = 0
        self.operation = Operation.none
        self.prefix = Prefix.none
        self.kind = Kind.literal

    # --- Rendering ---

    def render(self) -> str:
        """Render as `<sign><token> <operator>`, e.g. `-v1 mul` or `#0`."""
        if self.kind is Kind.link:
            token = f"#{self.magnitude}"
        elif self.kind is Kind.variable:
            token = f"v{self.magnitude}"
        else:
            token = format_number(self.magnitude)

        text = _SIGNS[self.prefix] + token
        if self.operation is not Operation.none:
            text += " " + operation_name(self.operation)
        return text
