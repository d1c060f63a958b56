from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Dict, List
from splitledger.schemas.expense import ExpenseRecord
from splitledger.schemas.member import Member
from splitledger.schemas.settlements import Settlement

class NetBalance(BaseModel):
    member_id: str
    name: str | None = None
    amount: Decimal

class GroupBalanceOut(BaseModel):
    group_id: str | None = None
    net: Dict[str, Decimal]
    settled: bool
    settlements: List[Settlement]

class SpendingSummary(BaseModel):
    total_spend: Decimal
    expense_count: int
    average_per_expense: Decimal
    paid_by_member: Dict[str, Decimal] = Field(default_factory=dict)

class GroupSummaryOut(SpendingSummary):
    group_id: str
    balances: List[NetBalance]

class LedgerSnapshot(BaseModel):
    records: List[ExpenseRecord]
    roster: List[Member]
    group_id: str | None = None
