import logging
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from splitledger.models.member import Member
from splitledger.schemas.member import MemberCreate

logger = logging.getLogger("splitledger.services.member")


async def get_member_by_id(db: AsyncSession, member_id: str):
    res = await db.execute(select(Member).where(Member.id == member_id))
    return res.scalar_one_or_none()


async def get_member_by_email(db: AsyncSession, email: str):
    res = await db.execute(select(Member).where(Member.email == email))
    return res.scalar_one_or_none()


async def get_member_or_404(db: AsyncSession, member_id: str):
    member = await get_member_by_id(db, member_id)
    if member is None:
        raise HTTPException(404, f"Member {member_id} does not exist")
    return member


async def get_all_members(db: AsyncSession):
    res = await db.execute(select(Member).order_by(Member.name))
    return res.scalars().all()


async def create_member(db: AsyncSession, data: MemberCreate):
    if data.email and await get_member_by_email(db, data.email):
        raise HTTPException(400, "Member already exists")

    if data.id and await get_member_by_id(db, data.id):
        raise HTTPException(400, "Member already exists")

    member = Member(name=data.name, email=data.email)
    if data.id:
        member.id = data.id

    db.add(member)
    await db.commit()
    await db.refresh(member)

    logger.info("Member %s created", member.id)
    return member
