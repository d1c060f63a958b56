from pydantic import BaseModel
from datetime import datetime

class Member(BaseModel):
    id: str
    name: str

class MemberCreate(BaseModel):
    name: str
    email: str | None = None
    id: str | None = None

class MemberOut(Member):
    email: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
