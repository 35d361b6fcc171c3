"""
Money Value Object

DESIGN DECISION: Every amount that flows through the ledger is a Money,
never a float. Chained postings (HT = TTC - TVA, sums per document, trial
balances) must never drift by a cent.

Money is deliberately opaque: it exposes only the operations the ledger
needs (add, subtract, multiply, compare, fixed-scale format).
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Union

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema


MoneyLike = Union["Money", Decimal, int, float, str]


class Money:
    """
    Immutable arbitrary-precision amount in major units (e.g. euros).

    Usage:
        ht = Money("120") - Money("20")
        ht.to_fixed(decimal_separator=",")  # "100,00"
    """

    __slots__ = ("_amount",)

    def __init__(self, amount: MoneyLike = 0):
        self._amount = self._to_decimal(amount)

    @staticmethod
    def _to_decimal(value: MoneyLike) -> Decimal:
        if isinstance(value, Money):
            return value._amount
        if isinstance(value, bool):
            raise TypeError("Money cannot be built from a boolean")
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, (int, float, str)):
            # str() first so 1200.6 becomes Decimal("1200.6"), not its binary expansion
            try:
                amount = Decimal(str(value).strip())
            except InvalidOperation:
                raise ValueError(f"Invalid monetary amount: {value!r}")
        else:
            raise TypeError(f"Cannot build Money from {type(value).__name__}")
        # NaN and Infinity parse as Decimals but cannot be posted or formatted
        if not amount.is_finite():
            raise ValueError(f"Monetary amount must be finite: {value!r}")
        return amount

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def zero(cls) -> "Money":
        return cls(Decimal("0"))

    @classmethod
    def sum(cls, amounts: Iterable["Money"]) -> "Money":
        """Sum an iterable of Money values (empty iterable -> zero)."""
        total = Decimal("0")
        for amount in amounts:
            total += cls._to_decimal(amount)
        return cls(total)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other: MoneyLike) -> "Money":
        return Money(self._amount + self._to_decimal(other))

    __radd__ = __add__

    def __sub__(self, other: MoneyLike) -> "Money":
        return Money(self._amount - self._to_decimal(other))

    def __rsub__(self, other: MoneyLike) -> "Money":
        return Money(self._to_decimal(other) - self._amount)

    def __mul__(self, multiplier: Union[Decimal, int, float, str]) -> "Money":
        if isinstance(multiplier, Money):
            raise TypeError("Cannot multiply Money by Money")
        return Money(self._amount * self._to_decimal(multiplier))

    __rmul__ = __mul__

    def __neg__(self) -> "Money":
        return Money(-self._amount)

    def __abs__(self) -> "Money":
        return Money(abs(self._amount))

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Money, Decimal, int)):
            return self._amount == self._to_decimal(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._amount)

    def __lt__(self, other: MoneyLike) -> bool:
        return self._amount < self._to_decimal(other)

    def __le__(self, other: MoneyLike) -> bool:
        return self._amount <= self._to_decimal(other)

    def __gt__(self, other: MoneyLike) -> bool:
        return self._amount > self._to_decimal(other)

    def __ge__(self, other: MoneyLike) -> bool:
        return self._amount >= self._to_decimal(other)

    def is_zero(self) -> bool:
        return self._amount == 0

    def is_positive(self) -> bool:
        return self._amount > 0

    def is_negative(self) -> bool:
        return self._amount < 0

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def as_decimal(self) -> Decimal:
        return self._amount

    def to_fixed(self, places: int = 2, decimal_separator: str = ".") -> str:
        """
        Render with exactly `places` decimals, rounding half up.

        The separator is substituted after formatting so the output never
        depends on locale or on Decimal's own repr.
        """
        quantum = Decimal(1).scaleb(-places)
        rounded = self._amount.quantize(quantum, rounding=ROUND_HALF_UP)
        if rounded == 0:
            rounded = abs(rounded)  # no "-0.00"
        text = f"{rounded:.{places}f}"
        if decimal_separator != ".":
            text = text.replace(".", decimal_separator)
        return text

    def __str__(self) -> str:
        return self.to_fixed()

    def __repr__(self) -> str:
        return f"Money('{self._amount}')"

    # ------------------------------------------------------------------
    # Pydantic integration
    # ------------------------------------------------------------------

    @classmethod
    def _validate(cls, value: Any) -> "Money":
        # pydantic only turns ValueError into a ValidationError
        try:
            return cls(value)
        except TypeError as e:
            raise ValueError(str(e))

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: str(value.as_decimal()),
            ),
        )
