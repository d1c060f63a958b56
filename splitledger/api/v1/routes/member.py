from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.schemas.member import MemberCreate, MemberOut
from splitledger.services.member_service import create_member, get_all_members, get_member_or_404

router = APIRouter()

@router.post("/", response_model=MemberOut, status_code=201)
async def new_member(data: MemberCreate, db: AsyncSession = Depends(get_db)):
    return await create_member(db, data)

@router.get("/", response_model=list[MemberOut])
async def all_members(db: AsyncSession = Depends(get_db)):
    return await get_all_members(db)

@router.get("/{member_id}", response_model=MemberOut)
async def get_member(member_id: str, db: AsyncSession = Depends(get_db)):
    return await get_member_or_404(db, member_id)
