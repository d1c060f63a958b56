from pydantic import BaseModel
from datetime import datetime
from typing import Any, Dict

class ActivityLogOut(BaseModel):
    id: int
    group_id: str | None
    member_id: str | None
    action: str
    details: str
    changes: Dict[str, Any] | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
