from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, getcontext
from typing import Any, Tuple

getcontext().prec = 28
CENTS = Decimal("0.01")
TOLERANCE = Decimal("0.01")
ZERO = Decimal("0")

def qround(d : Decimal) -> Decimal:
    return d.quantize(CENTS, rounding=ROUND_HALF_UP)

def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a numeric amount: {value!r}")
    try:
        d = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not a numeric amount: {value!r}")
    if not d.is_finite():
        raise ValueError(f"Not a finite amount: {value!r}")
    return d

def within_tolerance(actual: Decimal, expected: Decimal) -> bool:
    # fixed absolute epsilon, never relative
    return abs(actual - expected) < TOLERANCE

def is_settled(amount: Decimal) -> bool:
    return abs(amount) < TOLERANCE

def money(d: Decimal) -> str:
    return str(qround(d))

def month_key(value: Any) -> str:
    """Normalize a date-like value to a ``YYYY-MM`` key.

    Accepts ``date``/``datetime`` objects, ISO-8601 strings (a trailing ``Z``
    is read as UTC) and epoch seconds. Raises ``ValueError`` for anything else.
    """
    d = to_date(value)
    return f"{d.year:04d}-{d.month:02d}"

def to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            raise ValueError(f"Unrecognized date: {value!r}")
    if isinstance(value, str):
        s = value.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            if len(s) == 10:
                return date.fromisoformat(s)
            return datetime.fromisoformat(s).date()
        except ValueError:
            raise ValueError(f"Unrecognized date: {value!r}")
    raise ValueError(f"Unrecognized date: {value!r}")


class BalanceMap(dict):
    """Signed amount per counterparty; missing entries read as zero."""

    def get_or_zero(self, key: str) -> Decimal:
        return self.get(key, ZERO)

    def add(self, key: str, amount: Decimal) -> None:
        self[key] = self.get_or_zero(key) + amount

    def totals(self) -> Tuple[Decimal, Decimal]:
        owed = ZERO
        owes = ZERO

        for amt in self.values():
            if amt > 0:
                owed += amt
            elif amt < 0:
                owes += -amt

        return owed, owes
