"""Primitives - Element domains and expression chain records."""

from primitives.field import (
    DOMAINS,
    FF,
    FLOAT64,
    GOLDILOCKS,
    GOLDILOCKS_PRIME,
    INT64,
    ElementDomain,
    Float64Domain,
    GoldilocksDomain,
    Int64Domain,
    get_domain,
)
from primitives.expression_chain import (
    Chain,
    ChainBuilder,
    ChainError,
    ForwardOrSelfLink,
    IndexOutOfRange,
    Instruction,
    InvalidChain,
    Kind,
    Operation,
    Prefix,
)

__all__ = [
    # Field
    "FF",
    "GOLDILOCKS_PRIME",
    "ElementDomain",
    "Float64Domain",
    "Int64Domain",
    "GoldilocksDomain",
    "FLOAT64",
    "INT64",
    "GOLDILOCKS",
    "DOMAINS",
    "get_domain",
    # Expression chain
    "Instruction",
    "Operation",
    "Prefix",
    "Kind",
    "Chain",
    "ChainBuilder",
    "ChainError",
    "InvalidChain",
    "ForwardOrSelfLink",
    "IndexOutOfRange",
]
