from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.core.dependencies import valid_group
from splitledger.schemas.activity import ActivityLogOut
from splitledger.schemas.balances import GroupBalanceOut, GroupSummaryOut, LedgerSnapshot
from splitledger.schemas.settlements import SettlementConfirm, SettlementRecordOut
from splitledger.services.activity_services import get_group_logs
from splitledger.services.ledger import compute_balances, is_group_settled, rounded_balances
from splitledger.services.settlement_service import (
    compute_group_settlements,
    compute_settlements,
    confirm_settlement,
    get_settlement_history,
    group_summary,
)

router = APIRouter()


@router.post("/compute", response_model=GroupBalanceOut)
async def compute_snapshot(data: LedgerSnapshot):
    balances = compute_balances(data.records, [m.id for m in data.roster])
    return GroupBalanceOut(
        group_id=data.group_id,
        net=rounded_balances(balances),
        settled=is_group_settled(balances),
        settlements=compute_settlements(balances, data.roster, data.group_id),
    )


@router.get("/{group_id}/balances", response_model=GroupBalanceOut)
async def group_balances(group_id: str, db: AsyncSession = Depends(get_db)):
    return await compute_group_settlements(db, group_id)


@router.get("/{group_id}/summary", response_model=GroupSummaryOut)
async def spending_summary(group_id: str, db: AsyncSession = Depends(get_db)):
    return await group_summary(db, group_id)


@router.post("/{group_id}/confirm", response_model=SettlementRecordOut, status_code=201)
async def settle(group_id: str, data: SettlementConfirm, db: AsyncSession = Depends(get_db)):
    return await confirm_settlement(db, group_id, data)


@router.get("/{group_id}/history", response_model=list[SettlementRecordOut])
async def settlement_history(group_id: str, db: AsyncSession = Depends(get_db)):
    return await get_settlement_history(db, group_id)


@router.get("/{group_id}/logs", response_model=list[ActivityLogOut])
async def activity_logs(
    limit: int = 100,
    group=Depends(valid_group),
    db: AsyncSession = Depends(get_db),
):
    return await get_group_logs(db, group.id, limit)
