import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from splitledger.core.utils import (
    SETTLED_THRESHOLD,
    ZERO,
    is_settlement_record,
    qround,
    share_per_participant,
    to_decimal,
)
from splitledger.schemas.balances import SpendingSummary

logger = logging.getLogger("splitledger.services.ledger")


def _apply_settlement(balances: Dict[str, Decimal], record, amount: Decimal):
    # payer's debt shrinks, the recipient is owed that much less
    if record.payer in balances:
        balances[record.payer] += amount

    participants = record.participants or []
    if len(participants) == 1 and participants[0] in balances:
        balances[participants[0]] -= amount


def _apply_expense(balances: Dict[str, Decimal], record, amount: Decimal):
    if record.payer in balances:
        balances[record.payer] += amount

    # a payer listed in participants is debited their own share here too
    share = share_per_participant(record)
    for member_id in record.participants or []:
        if member_id in balances:
            balances[member_id] -= share


# working fine
def compute_balances(records: Iterable, roster: Iterable[str]) -> Dict[str, Decimal]:
    """
    Folds expense and settlement records into a signed net balance per member.

    Returns:
        {
            member_id: net_balance (Decimal)
        }

    positive = is owed money, negative = owes money.
    Only roster members get an entry; anyone else in the records is ignored.
    Values are not rounded, use rounded_balances() for display.
    """
    balances: Dict[str, Decimal] = {member_id: ZERO for member_id in roster}

    count = 0
    for record in records:
        amount = to_decimal(record.amount)
        if is_settlement_record(record):
            _apply_settlement(balances, record, amount)
        else:
            _apply_expense(balances, record, amount)
        count += 1

    logger.debug("Folded %s records into %s balances", count, len(balances))
    return balances


def compute_member_balance(records: Iterable, member_id: str) -> Decimal:
    """Balance of a single member, without needing the group roster."""
    return compute_balances(records, [member_id])[member_id]


def rounded_balances(balances: Dict[str, Decimal]) -> Dict[str, Decimal]:
    return {member_id: qround(amount) for member_id, amount in balances.items()}


def is_group_settled(
    balances: Dict[str, Decimal],
    tolerance: Decimal = SETTLED_THRESHOLD,
) -> bool:
    """
    A group is settled if:
        abs(qround(net_balance)) <= tolerance
        for every member

    Matches compute_settlements, which never suggests a payment that rounds
    to a cent or less, so sub 1.5 cent remainders count as settled.
    """
    for amount in balances.values():
        if abs(qround(amount)) > tolerance:
            return False

    return True


def partition_by_group(records: Iterable) -> Dict[Optional[str], List]:
    """Splits a mixed snapshot so each group's ledger is folded on its own."""
    groups: Dict[Optional[str], List] = defaultdict(list)
    for record in records:
        groups[getattr(record, "group_id", None)].append(record)
    return dict(groups)


def compute_spending_summary(records: Iterable) -> SpendingSummary:
    # settlements move money around, they are not spending
    expenses = [r for r in records if not is_settlement_record(r)]

    total = ZERO
    paid_by_member: Dict[str, Decimal] = {}
    for record in expenses:
        amount = to_decimal(record.amount)
        total += amount
        paid_by_member[record.payer] = paid_by_member.get(record.payer, ZERO) + amount

    average = total / len(expenses) if expenses else ZERO

    return SpendingSummary(
        total_spend=qround(total),
        expense_count=len(expenses),
        average_per_expense=qround(average),
        paid_by_member={k: qround(v) for k, v in paid_by_member.items()},
    )
