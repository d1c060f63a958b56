import logging
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from splitledger.core.utils import SETTLED_THRESHOLD, ZERO, qround
from splitledger.models.expense import Expense
from splitledger.schemas.balances import GroupBalanceOut, GroupSummaryOut, NetBalance
from splitledger.schemas.expense import ExpenseRecord
from splitledger.schemas.settlements import Settlement, SettlementConfirm, SettlementRecordOut
from splitledger.services.activity_services import record_activity
from splitledger.services.expense_services import get_group_records, store_record
from splitledger.services.group_services import get_group_or_404, get_group_roster
from splitledger.services.ledger import (
    compute_balances,
    compute_spending_summary,
    is_group_settled,
    rounded_balances,
)

logger = logging.getLogger("splitledger.services.settlement")


def compute_settlements(
    balances: Dict[str, Decimal],
    roster: Iterable,
    group_id: str | None = None,
) -> List[Settlement]:
    """
    Greedy matching of debtors against creditors.

    Debtors are visited in roster order and each one scans the creditors in
    roster order, so suggestions come out debtor-major, creditor-minor.
    The result zeroes every balance but is not guaranteed to use the
    fewest possible payments.
    """
    roster = list(roster)
    creditors = [m for m in roster if balances.get(m.id, ZERO) > SETTLED_THRESHOLD]
    debtors = [m for m in roster if balances.get(m.id, ZERO) < -SETTLED_THRESHOLD]

    # working copy, the caller's mapping is left untouched
    remaining = {m.id: balances.get(m.id, ZERO) for m in roster}

    generated_at = datetime.now(timezone.utc)
    stamp = int(time.time() * 1000)
    settlements: List[Settlement] = []

    for debtor in debtors:
        for creditor in creditors:
            if not (
                remaining[creditor.id] > SETTLED_THRESHOLD
                and remaining[debtor.id] < -SETTLED_THRESHOLD
            ):
                continue

            transfer = min(abs(remaining[debtor.id]), remaining[creditor.id])
            amount = qround(transfer)
            if amount <= SETTLED_THRESHOLD:
                continue

            settlements.append(Settlement(
                generated_id=f"{debtor.id}-{creditor.id}-{group_id}-{stamp}",
                from_id=debtor.id,
                from_name=debtor.name,
                to_id=creditor.id,
                to_name=creditor.name,
                amount=amount,
                group_id=group_id,
                generated_at=generated_at,
            ))

            remaining[debtor.id] += transfer
            remaining[creditor.id] -= transfer

    logger.debug(
        "Matched %s debtors against %s creditors -> %s suggestions",
        len(debtors), len(creditors), len(settlements),
    )
    return settlements


def settlement_to_record(suggestion: Settlement) -> ExpenseRecord:
    """Turns a confirmed suggestion into the settlement record fed back to the ledger."""
    return ExpenseRecord(
        payer=suggestion.from_id,
        amount=suggestion.amount,
        participants=[suggestion.to_id],
        is_settlement=True,
        group_id=suggestion.group_id,
        timestamp=datetime.now(timezone.utc),
    )


def settlement_description(from_name: str | None, to_name: str | None) -> str:
    return f"Settlement: {from_name} paid {to_name}"


async def compute_group_settlements(db: AsyncSession, group_id: str) -> GroupBalanceOut:
    await get_group_or_404(db, group_id)

    roster = await get_group_roster(db, group_id)
    records = await get_group_records(db, group_id)

    balances = compute_balances(records, [m.id for m in roster])
    settlements = compute_settlements(balances, roster, group_id)

    return GroupBalanceOut(
        group_id=group_id,
        net=rounded_balances(balances),
        settled=is_group_settled(balances),
        settlements=settlements,
    )


async def group_summary(db: AsyncSession, group_id: str) -> GroupSummaryOut:
    await get_group_or_404(db, group_id)

    roster = await get_group_roster(db, group_id)
    records = await get_group_records(db, group_id)

    summary = compute_spending_summary(records)
    balances = compute_balances(records, [m.id for m in roster])

    return GroupSummaryOut(
        group_id=group_id,
        balances=[
            NetBalance(member_id=m.id, name=m.name, amount=qround(balances[m.id]))
            for m in roster
        ],
        **summary.model_dump(),
    )


async def confirm_settlement(db: AsyncSession, group_id: str, data: SettlementConfirm):
    await get_group_or_404(db, group_id)

    roster = {m.id: m for m in await get_group_roster(db, group_id)}

    if data.from_id not in roster:
        raise HTTPException(400, "Payer is not a member of the group")
    if data.to_id not in roster:
        raise HTTPException(400, "Receiver is not in this group")
    if data.from_id == data.to_id:
        raise HTTPException(400, "Cannot settle with yourself")

    payer, receiver = roster[data.from_id], roster[data.to_id]
    record = settlement_to_record(Settlement(
        generated_id=f"{payer.id}-{receiver.id}-{group_id}-{int(time.time() * 1000)}",
        from_id=payer.id,
        from_name=payer.name,
        to_id=receiver.id,
        to_name=receiver.name,
        amount=qround(data.amount),
        group_id=group_id,
        generated_at=datetime.now(timezone.utc),
    ))

    expense = await store_record(
        db,
        record,
        description=settlement_description(payer.name, receiver.name),
    )

    out = to_settlement_out(expense)

    logger.info(
        "Settlement confirmed in group %s: %s paid %s %s",
        group_id, payer.id, receiver.id, record.amount,
    )

    await record_activity(
        db,
        action="settle",
        details=f"Settled payment: {payer.name} paid {record.amount} to {receiver.name}",
        group_id=group_id,
        member_id=payer.id,
        changes={"expense_id": expense.id, "amount": str(record.amount)},
    )

    return out


def to_settlement_out(expense: Expense) -> SettlementRecordOut:
    return SettlementRecordOut(
        id=expense.id,
        group_id=expense.group_id,
        from_id=expense.paid_by,
        to_id=expense.participants[0] if expense.participants else "",
        amount=expense.amount,
        description=expense.description,
        date=expense.date,
    )


async def get_settlement_history(db: AsyncSession, group_id: str):
    await get_group_or_404(db, group_id)

    q = (
        select(Expense)
        .where(
            Expense.group_id == group_id,
            Expense.is_settlement == True,
            Expense.is_deleted == False,
        )
        .order_by(Expense.date.desc(), Expense.created_at.desc())
    )

    result = await db.execute(q)
    return [to_settlement_out(e) for e in result.scalars().all()]
