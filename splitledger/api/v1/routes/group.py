from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.core.dependencies import valid_group
from splitledger.services.group_services import create_group, add_member, list_groups, get_group_roster
from splitledger.schemas.group import GroupCreate, GroupMemberOut, GroupOut, GroupRosterOut

router = APIRouter()

@router.post("/", response_model=GroupOut, status_code=201)
async def create_new_group(
    data: GroupCreate,
    db: AsyncSession = Depends(get_db),
):
    return await create_group(db, data.name, data.created_by, data.members)

@router.get("/", response_model=list[GroupOut])
async def all_groups(member_id: str | None = None, db: AsyncSession = Depends(get_db)):
    return await list_groups(db, member_id)

@router.post("/{group_id}/members/{member_id}", response_model=GroupMemberOut, status_code=201)
async def add_member_to_group(group_id: str, member_id: str, db: AsyncSession = Depends(get_db)):
    return await add_member(db, group_id, member_id)

@router.get("/{group_id}/members", response_model=GroupRosterOut)
async def group_roster(
    group=Depends(valid_group),
    db: AsyncSession = Depends(get_db),
):
    return GroupRosterOut(group_id=group.id, members=await get_group_roster(db, group.id))
