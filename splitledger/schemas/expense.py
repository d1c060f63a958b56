from pydantic import BaseModel, Field, condecimal
from decimal import Decimal
from datetime import datetime
from typing import List

class ExpenseRecord(BaseModel):
    """
    Snapshot of one stored record as the ledger sees it.
    No shape checks here: the ledger degrades on bad input, ingestion validates.
    """
    payer: str
    amount: Decimal
    participants: List[str] = Field(default_factory=list)
    is_settlement: bool = False
    group_id: str | None = None
    timestamp: datetime | None = None

class ExpenseCreate(BaseModel):
    description: str = ""
    amount: condecimal(gt=0, max_digits=12, decimal_places=2)
    paid_by: str
    participants: List[str]
    is_settlement: bool = False
    date: datetime | None = None

class ExpenseOut(BaseModel):
    id: str
    group_id: str | None = None
    amount: Decimal
    description: str | None = None
    paid_by: str
    participants: List[str]
    is_settlement: bool
    date: datetime | None = None

    class Config:
        from_attributes = True
