from pydantic import BaseModel, condecimal
from decimal import Decimal
from datetime import datetime

class Settlement(BaseModel):
    """A suggested, not yet confirmed, payment from a debtor to a creditor."""
    generated_id: str
    from_id: str
    from_name: str | None = None
    to_id: str
    to_name: str | None = None
    amount: Decimal
    group_id: str | None = None
    generated_at: datetime

class SettlementConfirm(BaseModel):
    from_id: str
    to_id: str
    amount: condecimal(gt=0, max_digits=12, decimal_places=2)

class SettlementRecordOut(BaseModel):
    id: str
    group_id: str | None
    from_id: str
    to_id: str
    amount: Decimal
    description: str | None = None
    date: datetime | None = None
