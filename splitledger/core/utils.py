from decimal import Decimal, ROUND_HALF_UP, getcontext
from splitledger.core.config import settings

getcontext().prec = 28
CENTS = Decimal("0.01")
ZERO = Decimal("0")

# balances within this distance of zero count as settled
SETTLED_THRESHOLD = Decimal(settings.SETTLEMENT_THRESHOLD)


def qround(d) -> Decimal:
    return to_decimal(d).quantize(CENTS, rounding=ROUND_HALF_UP)


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    # str() keeps 0.1 as 0.1 instead of its binary float expansion
    return Decimal(str(value))


def is_settlement_record(record) -> bool:
    """
    Tells a settlement transaction apart from a normal shared expense.
    Records without the flag are normal expenses.
    """
    return bool(getattr(record, "is_settlement", False))


def share_per_participant(record) -> Decimal:
    """
    Amount each participant owes for a normal expense.
    An empty participant list yields a zero share instead of failing.
    """
    participants = record.participants or []
    if not participants:
        return ZERO
    return to_decimal(record.amount) / len(participants)
