import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fastapi import HTTPException
from splitledger.models.expense import Expense
from splitledger.schemas.expense import ExpenseCreate, ExpenseOut, ExpenseRecord
from splitledger.services.activity_services import record_activity
from splitledger.services.group_services import get_group_or_404, get_group_roster

logger = logging.getLogger("splitledger.services.expense")


def to_record(expense: Expense) -> ExpenseRecord:
    return ExpenseRecord(
        payer=expense.paid_by,
        amount=expense.amount,
        participants=list(expense.participants or []),
        is_settlement=bool(expense.is_settlement),
        group_id=expense.group_id,
        timestamp=expense.date,
    )


async def store_record(db: AsyncSession, record: ExpenseRecord, description: str | None = None):
    """Persists an already validated record and returns the stored row."""
    expense = Expense(
        group_id=record.group_id,
        paid_by=record.payer,
        amount=record.amount,
        description=description,
        participants=list(record.participants),
        is_settlement=record.is_settlement,
    )
    if record.timestamp:
        expense.date = record.timestamp

    db.add(expense)
    await db.commit()
    await db.refresh(expense)

    return expense


# working fine
async def create_expense(db: AsyncSession, data: ExpenseCreate, group_id: str):
    await get_group_or_404(db, group_id)

    roster_ids = {m.id for m in await get_group_roster(db, group_id)}

    if data.paid_by not in roster_ids:
        raise HTTPException(400, "Payer is not a member of the group")

    # -----------------------------------
    # 1. Validate participants
    # -----------------------------------
    if not data.participants:
        raise HTTPException(400, "Expense must be split with at least one member")

    if len(data.participants) != len(set(data.participants)):
        raise HTTPException(400, "Duplicate members found in participants")

    if not set(data.participants) <= roster_ids:
        raise HTTPException(
            400,
            "One or more participants are not members of the group"
        )

    # -----------------------------------
    # 2. Settlement shape
    # -----------------------------------
    if data.is_settlement:
        if len(data.participants) != 1:
            raise HTTPException(400, "A settlement must have exactly one recipient")
        if data.participants[0] == data.paid_by:
            raise HTTPException(400, "Cannot settle with yourself")

    # -----------------------------------
    # 3. Store
    # -----------------------------------
    record = ExpenseRecord(
        payer=data.paid_by,
        amount=data.amount,
        participants=data.participants,
        is_settlement=data.is_settlement,
        group_id=group_id,
        timestamp=data.date,
    )
    expense = await store_record(db, record, description=data.description)

    # built before the audit write, a failed log entry rolls back and expires the session
    out = ExpenseOut.model_validate(expense)

    logger.info("Expense %s added to group %s by %s", expense.id, group_id, data.paid_by)

    await record_activity(
        db,
        action="add_expense",
        details=f"Added expense: {data.description} ({expense.amount})",
        group_id=group_id,
        member_id=data.paid_by,
        changes={
            "expense_id": expense.id,
            "amount": str(expense.amount),
            "participants": list(data.participants),
        },
    )

    return out


async def delete_expense(db: AsyncSession, expense_id: str):
    q = select(Expense).where(Expense.id == expense_id, Expense.is_deleted == False)
    res = await db.execute(q)
    expense = res.scalar_one_or_none()

    if not expense:
        raise HTTPException(404, "Expense not found")

    expense.is_deleted = True
    await db.commit()

    logger.info("Expense %s deleted from group %s", expense_id, expense.group_id)

    await record_activity(
        db,
        action="delete_expense",
        details=f"Deleted expense: {expense.description} ({expense.amount})",
        group_id=expense.group_id,
        member_id=expense.paid_by,
        changes={
            "deleted_amount": str(expense.amount),
            "deleted_description": expense.description,
            "deleted_paid_by": expense.paid_by,
            "deleted_participants": list(expense.participants or []),
        },
    )

    return {"status": "deleted"}


async def get_expenses_by_group(db: AsyncSession, group_id: str):
    await get_group_or_404(db, group_id)

    q = (
        select(Expense)
        .where(
            Expense.group_id == group_id,
            Expense.is_deleted == False,
        )
        .order_by(
            Expense.date.desc(),
            Expense.created_at.desc(),
        )
    )

    res = await db.execute(q)
    return res.scalars().all()


async def get_group_records(db: AsyncSession, group_id: str):
    """Snapshot of the group's live records, ready for the ledger."""
    q = select(Expense).where(
        Expense.group_id == group_id,
        Expense.is_deleted == False,
    )

    res = await db.execute(q)
    return [to_record(e) for e in res.scalars().all()]
