import logging
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from splitledger.models.group import Group
from splitledger.models.group_member import GroupMember
from splitledger.models.member import Member
from splitledger.schemas.member import Member as RosterMember
from splitledger.services.member_service import get_member_or_404

logger = logging.getLogger("splitledger.services.group")


async def get_group_or_404(db: AsyncSession, group_id: str):
    res = await db.execute(
        select(Group).where(Group.id == group_id, Group.is_deleted == False)
    )
    group = res.scalar_one_or_none()

    if not group:
        raise HTTPException(404, "Group does not exist")

    return group


async def is_group_member(db: AsyncSession, group_id: str, member_id: str) -> bool:
    q = select(GroupMember.id).where(
        GroupMember.group_id == group_id,
        GroupMember.member_id == member_id
    )
    return (await db.scalar(q)) is not None


async def create_group(db: AsyncSession, name: str, creator_id: str, member_ids=()):
    await get_member_or_404(db, creator_id)

    group = Group(name=name, created_by=creator_id)
    db.add(group)
    await db.flush()

    # creator first, the roster keeps join order
    seen = set()
    for member_id in [creator_id, *member_ids]:
        if member_id in seen:
            continue
        await get_member_or_404(db, member_id)
        db.add(GroupMember(group_id=group.id, member_id=member_id))
        await db.flush()
        seen.add(member_id)

    await db.commit()
    await db.refresh(group)

    logger.info("Group %s created by %s with %s members", group.id, creator_id, len(seen))
    return group


async def add_member(db: AsyncSession, group_id: str, member_id: str):
    await get_group_or_404(db, group_id)
    await get_member_or_404(db, member_id)

    if await is_group_member(db, group_id, member_id):
        raise HTTPException(400, "Member already in group")

    member = GroupMember(group_id=group_id, member_id=member_id)
    db.add(member)
    await db.commit()
    await db.refresh(member)

    logger.info("Member %s joined group %s", member_id, group_id)
    return member


async def list_groups(db: AsyncSession, member_id: str | None = None):
    q = select(Group).where(Group.is_deleted == False)
    if member_id:
        q = q.join(GroupMember).where(GroupMember.member_id == member_id)

    result = await db.execute(q.order_by(Group.created_at))
    return result.scalars().all()


async def get_group_roster(db: AsyncSession, group_id: str):
    """Current members of the group, in join order."""
    q = (
        select(Member.id, Member.name)
        .join(GroupMember, GroupMember.member_id == Member.id)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.id)
    )

    res = await db.execute(q)
    return [RosterMember(id=row.id, name=row.name) for row in res.all()]
