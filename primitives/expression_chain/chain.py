"""Expression chains: validated, immutable sequences of instruction records.

A chain is a concatenation of segments. Each segment is a maximal run of
records ending in a record whose operation is none. Link records refer
backwards to positions of the same chain; variable records refer to slots
of the bindings supplied at evaluation time.
"""

from dataclasses import replace
from typing import Iterable, Iterator, List, Tuple

from primitives.expression_chain.instruction import Instruction, Kind, Operation, Prefix


# --- Errors ---

class ChainError(ValueError):
    """Base class for malformed chains and bad references."""


class InvalidChain(ChainError):
    """Chain is empty or its last record is not a terminator."""


class ForwardOrSelfLink(ChainError):
    """A link record points at its own position or a later one."""


class IndexOutOfRange(ChainError, IndexError):
    """A link or variable index is outside the chain or the bindings."""


# --- Chain ---

class Chain:
    """Immutable sequence of instruction records.

    Records are copied on construction and copied again when handed out,
    so a built chain can be shared between threads and evaluated any
    number of times.
    """

    def __init__(self, records: Iterable[Instruction]) -> None:
        self._records: Tuple[Instruction, ...] = tuple(replace(r) for r in records)
        self._validate()
        self.n_variables = max(
            (r.magnitude + 1 for r in self._records if r.kind is Kind.variable),
            default=0,
        )

    @classmethod
    def of(cls, records) -> 'Chain':
        """Return records as a Chain, validating when it is not one already."""
        if isinstance(records, Chain):
            return records
        return cls(records)

    def _validate(self) -> None:
        n = len(self._records)
        if n == 0:
            raise InvalidChain("Chain is empty")
        if self._records[-1].operation is not Operation.none:
            raise InvalidChain(
                f"Chain is not terminated: last record has operation "
                f"'{self._records[-1].operation.name}'"
            )
        for pos, record in enumerate(self._records):
            if record.kind is not Kind.link:
                continue
            target = record.magnitude
            if target >= n:
                raise IndexOutOfRange(
                    f"Link at position {pos} points to #{target}, chain has {n} records"
                )
            if target >= pos:
                raise ForwardOrSelfLink(
                    f"Link at position {pos} points to #{target}; links must point backwards"
                )

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> Instruction:
        return replace(self._records[index])

    def __iter__(self) -> Iterator[Instruction]:
        return (replace(r) for r in self._records)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Chain):
            return NotImplemented
        return self._records == other._records

    def __hash__(self) -> int:
        return hash(tuple((r.magnitude, r.operation, r.prefix, r.kind)
                          for r in self._records))

    def __repr__(self) -> str:
        return f"Chain({' '.join(r.render() for r in self._records)!r})"

    def segments(self) -> List[Tuple[int, int]]:
        """Inclusive (start, end) positions of each segment, in chain order."""
        result = []
        start = 0
        for pos, record in enumerate(self._records):
            if record.operation is Operation.none:
                result.append((start, pos))
                start = pos + 1
        return result


# --- Builder ---

class ChainBuilder:
    """Append-only construction of a Chain.

    Each append returns the position of the new record, which later
    records can pass to link().
    """

    def __init__(self) -> None:
        self._records: List[Instruction] = []

    def __len__(self) -> int:
        return len(self._records)

    def append(self, record: Instruction) -> int:
        self._records.append(replace(record))
        return len(self._records) - 1

    def literal(self, value, operation: Operation = Operation.none,
                prefix: Prefix = Prefix.none) -> int:
        return self.append(Instruction.literal(value, operation, prefix))

    def link(self, index: int, operation: Operation = Operation.none,
             prefix: Prefix = Prefix.none) -> int:
        return self.append(Instruction.link(index, operation, prefix))

    def variable(self, index: int, operation: Operation = Operation.none,
                 prefix: Prefix = Prefix.none) -> int:
        return self.append(Instruction.variable(index, operation, prefix))

    def build(self) -> Chain:
        return Chain(self._records)
