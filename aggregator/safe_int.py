"""Checked integer wrapper for token balance arithmetic.

Every pool price and swap in this package computes on balances that must
stay inside the ledger's 128-bit unsigned width. SafeInt makes that the
default instead of something each formula has to remember:
- Division by zero raises DivisionByZero
- Subtraction below zero raises Underflow
- Any result above BALANCE_MAX raises BalanceOverflow

Usage pattern:
    from aggregator.safe_int import S

    def target_amount(supply: int, reserve_in: int, reserve_out: int) -> int:
        numerator = S(supply) * S(reserve_out)
        denominator = S(reserve_in) + S(supply)
        return (numerator // denominator).value

Intermediate products are allowed to exceed BALANCE_MAX only when
created through ``SafeInt.wide()``; the constant-product formulas multiply
three balances together and need that headroom before dividing back down.
"""

from __future__ import annotations

BALANCE_MAX = 2**128 - 1


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce a negative balance."""

    pass


class BalanceOverflow(SafeIntError):
    """Value exceeds the balance width."""

    pass


class SafeInt:
    """Non-negative integer with checked arithmetic.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value", "_bound")
    _value: int
    _bound: int | None

    def __init__(self, value: int | SafeInt, *, bound: int | None = BALANCE_MAX) -> None:
        """Wrap an integer, checking it against the bound.

        Args:
            value: Integer value to wrap, or SafeInt to copy
            bound: Largest allowed value. None disables the upper check
                   (see ``wide``).

        Raises:
            TypeError: If value is not an int or SafeInt
            Underflow: If value is negative
            BalanceOverflow: If value exceeds the bound
        """
        if isinstance(value, SafeInt):
            value = value._value
        elif isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        if value < 0:
            raise Underflow(f"Negative balance: {value}")
        if bound is not None and value > bound:
            raise BalanceOverflow(f"Value exceeds balance max: {value}")
        self._value = value
        self._bound = bound

    @classmethod
    def wide(cls, value: int | SafeInt) -> SafeInt:
        """Wrap a value for intermediate products with no upper bound."""
        return cls(value, bound=None)

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    def _make(self, result: int, other: SafeInt | int) -> SafeInt:
        # The result is as wide as the widest operand.
        bound = self._bound
        if isinstance(other, SafeInt) and other._bound is None:
            bound = None
        return SafeInt(result, bound=bound)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return self._make(self._value + _extract_value(other), other)

    def __radd__(self, other: int) -> SafeInt:
        return self.__add__(other)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        if other_val > self._value:
            raise Underflow(f"Underflow: {self._value} - {other_val}")
        return self._make(self._value - other_val, other)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return self._make(self._value * _extract_value(other), other)

    def __rmul__(self, other: int) -> SafeInt:
        return self.__mul__(other)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division, rounding down.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return self._make(self._value // other_val, other)

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Integer division, rounding up.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        return self._make(-(-self._value // other_val), other)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def to_balance(self) -> int:
        """Narrow back to a balance.

        Raises:
            BalanceOverflow: If the value does not fit the balance width
        """
        if self._value > BALANCE_MAX:
            raise BalanceOverflow(f"Value exceeds balance max: {self._value}")
        return self._value

    def checked_sub(self, other: SafeInt | int) -> SafeInt | None:
        """Subtract, returning None on underflow instead of raising."""
        other_val = _extract_value(other)
        if other_val > self._value:
            return None
        return self._make(self._value - other_val, other)


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


def is_balance(value: object) -> bool:
    """Check whether a value is an int inside the balance range."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= BALANCE_MAX


# Convenience alias for concise code
S = SafeInt
