"""Numeric element domains for expression chain evaluation.

A domain fixes the element type a chain is reduced over and owns the
arithmetic the evaluator applies to it. Every operation accepts scalars or
1-D row vectors (one entry per binding row) and broadcasts between them.

Domains:
    FLOAT64     -- numpy float64, IEEE semantics (nan/inf propagate)
    INT64       -- numpy int64, division truncates toward zero
    GOLDILOCKS  -- prime field GF(p), p = 2^64 - 2^32 + 1 (via galois)

Division by zero yields zero in every domain.
"""

from numbers import Integral
from typing import Any, List, Sequence

import galois
import numpy as np

# --- Field Construction ---

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001

FF = galois.GF(GOLDILOCKS_PRIME)
"""Base field GF(p) - Goldilocks prime field."""

# --- Type Aliases ---

Element = Any  # np.float64 | np.int64 | FF, scalar or 1-D row vector


# --- Base Domain ---

class ElementDomain:
    """Arithmetic over one element type."""

    name = ""

    def element(self, value) -> Element:
        """Coerce a single number into the domain."""
        raise NotImplementedError

    def array(self, values: Sequence) -> Element:
        """Coerce a 1-D sequence of numbers into a row vector."""
        raise NotImplementedError

    def negate(self, a: Element) -> Element:
        return -a

    def add(self, a: Element, b: Element) -> Element:
        return a + b

    def sub(self, a: Element, b: Element) -> Element:
        return a - b

    def mul(self, a: Element, b: Element) -> Element:
        return a * b

    def div(self, a: Element, b: Element) -> Element:
        raise NotImplementedError

    def pow(self, a: Element, b: Element) -> Element:
        raise NotImplementedError

    def broadcast(self, value: Element, n_rows: int) -> Element:
        """Expand a scalar result to a row vector of length n_rows."""
        raise NotImplementedError

    def concatenate(self, parts: List[Element]) -> Element:
        """Join row vectors produced by consecutive row batches."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


# --- numpy Domains ---

class _NumpyDomain(ElementDomain):
    """Shared coercion for fixed-width numpy dtypes."""

    dtype: type = np.float64

    def element(self, value) -> Element:
        return self.dtype(value)

    def array(self, values: Sequence) -> Element:
        return np.asarray(values, dtype=self.dtype)

    def _pair(self, a: Element, b: Element):
        return np.broadcast_arrays(np.asarray(a, dtype=self.dtype),
                                   np.asarray(b, dtype=self.dtype))

    def broadcast(self, value: Element, n_rows: int) -> Element:
        if np.ndim(value) == 1:
            return value
        return np.full(n_rows, value, dtype=self.dtype)

    def concatenate(self, parts: List[Element]) -> Element:
        if not parts:
            return np.zeros(0, dtype=self.dtype)
        return np.concatenate(parts)


class Float64Domain(_NumpyDomain):
    """IEEE double precision.

    Follows numpy float64 semantics throughout: overflow gives inf, and a
    negative base raised to a fractional exponent gives nan. Both propagate
    through the rest of the chain. Division by zero (including -0.0) gives
    zero instead of inf.
    """

    name = "float64"
    dtype = np.float64

    def div(self, a: Element, b: Element) -> Element:
        a, b = self._pair(a, b)
        out = np.zeros(a.shape, dtype=self.dtype)
        np.divide(a, b, out=out, where=(b != 0))
        return out[()]

    def pow(self, a: Element, b: Element) -> Element:
        # np.power returns nan for a negative base with a fractional exponent
        return np.power(a, b)


# Real powers at or beyond this magnitude do not fit in int64
_INT64_LIMIT = float(2 ** 63)


class Int64Domain(_NumpyDomain):
    """Signed 64-bit integers with C-style truncating division.

    Division truncates toward zero and division by zero gives zero. Powers
    are computed as real powers and truncated; results that are not finite
    or do not fit in int64 (0 ** -1, 10 ** 19) give zero. Addition,
    subtraction and multiplication wrap on overflow.
    """

    name = "int64"
    dtype = np.int64

    def div(self, a: Element, b: Element) -> Element:
        a, b = self._pair(a, b)
        safe = np.where(b == 0, 1, b)
        q = (np.abs(a) // np.abs(safe)) * (np.sign(a) * np.sign(safe))
        return np.where(b == 0, 0, q).astype(self.dtype)[()]

    def pow(self, a: Element, b: Element) -> Element:
        a, b = self._pair(a, b)
        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            real = np.power(a.astype(np.float64), b.astype(np.float64))
            in_range = np.isfinite(real) & (np.abs(real) < _INT64_LIMIT)
            return np.where(in_range, np.trunc(real), 0).astype(self.dtype)[()]


# --- Goldilocks Domain ---

class GoldilocksDomain(ElementDomain):
    """Goldilocks prime field GF(p).

    Literals and bindings must be integral; they are reduced modulo p, so
    negative values map to p - |v|. All arithmetic runs on FF arrays:
    division multiplies by the field inverse (zero divisors give zero) and
    exponents are taken as their canonical representative in [0, p).
    """

    name = "goldilocks"

    def element(self, value) -> Element:
        return self.array(value)

    def array(self, values) -> Element:
        if isinstance(values, FF):
            return values
        v = np.asarray(values)
        if v.dtype.kind == "f":
            if not np.all(np.isfinite(v) & (v == np.trunc(v))):
                raise ValueError(f"Goldilocks elements must be integral, got {values}")
            if np.any(np.abs(v) >= _INT64_LIMIT):
                raise ValueError(f"Float value out of exact integer range: {values}")
            v = v.astype(np.int64)
        elif v.dtype.kind == "O":
            if not all(isinstance(x, Integral) for x in v.ravel()):
                raise ValueError(f"Goldilocks elements must be integral, got {values}")
            return FF(np.mod(v, GOLDILOCKS_PRIME))
        elif v.dtype.kind not in "iub":
            raise ValueError(f"Goldilocks elements must be integral, got {values}")

        if v.dtype.kind == "i":
            # |v| < 2^63 < p, so the magnitude is already reduced
            magnitude = FF(np.abs(v).astype(np.uint64))
            return FF(np.where(v < 0, np.asarray(-magnitude), np.asarray(magnitude)))
        return FF(np.mod(v.astype(np.uint64), GOLDILOCKS_PRIME))

    def _pair(self, a: Element, b: Element):
        shape = np.broadcast_shapes(np.shape(a), np.shape(b))
        return FF(np.broadcast_to(a, shape)), FF(np.broadcast_to(b, shape))

    def div(self, a: Element, b: Element) -> Element:
        a, b = self._pair(a, b)
        is_zero = FF((b == 0).astype(np.uint64))
        # zero divisors are swapped for 1, then the quotient is masked to 0
        safe = b + is_zero
        return a * safe ** -1 * (FF.Ones(b.shape) - is_zero)

    def pow(self, a: Element, b: Element) -> Element:
        a, b = self._pair(a, b)
        # split e = hi * 2^32 + lo so both halves are valid int64 exponents
        e = np.asarray(b, dtype=np.uint64)
        hi = (e >> np.uint64(32)).astype(np.int64)
        lo = (e & np.uint64(0xFFFFFFFF)).astype(np.int64)
        return (a ** (1 << 32)) ** hi * a ** lo

    def broadcast(self, value: Element, n_rows: int) -> Element:
        if np.ndim(value) == 1:
            return value
        return FF.Ones(n_rows) * value

    def concatenate(self, parts: List[Element]) -> Element:
        if not parts:
            return FF.Zeros(0)
        return FF(np.concatenate([np.asarray(part) for part in parts]))



FLOAT64 = Float64Domain()
INT64 = Int64Domain()
GOLDILOCKS = GoldilocksDomain()

DOMAINS = {d.name: d for d in (FLOAT64, INT64, GOLDILOCKS)}


def get_domain(name: str) -> ElementDomain:
    """Look up a domain by name ("float64", "int64", "goldilocks")."""
    if name not in DOMAINS:
        raise KeyError(f"Unknown element domain '{name}'")
    return DOMAINS[name]
