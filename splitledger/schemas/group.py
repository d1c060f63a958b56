from pydantic import BaseModel
from typing import List
from splitledger.schemas.member import Member

class GroupCreate(BaseModel):
    name: str
    created_by: str
    members: List[str] = []

class GroupOut(BaseModel):
    id: str
    name: str
    created_by: str | None

    class Config:
        from_attributes = True

class GroupMemberOut(BaseModel):
    member_id: str
    group_id: str

    class Config:
        from_attributes = True

class GroupRosterOut(BaseModel):
    group_id: str
    members: List[Member]
