import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from splitledger.models.activity_log import ActivityLog

logger = logging.getLogger("splitledger.services.activity")


async def record_activity(
    db: AsyncSession,
    action: str,
    details: str,
    group_id: str | None = None,
    member_id: str | None = None,
    changes: dict | None = None,
):
    """
    Appends an audit entry. Runs after the change itself is committed,
    so a failure here is logged and never undoes the change.
    The rollback on failure expires everything loaded in the session,
    callers build their response before calling this.
    """
    entry = ActivityLog(
        group_id=group_id,
        member_id=member_id,
        action=action,
        details=details,
        changes=changes,
    )

    try:
        db.add(entry)
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Error logging action %s for group %s", action, group_id)
        await db.rollback()
        return None

    return entry


async def get_group_logs(db: AsyncSession, group_id: str, limit: int = 100):
    q = (
        select(ActivityLog)
        .where(ActivityLog.group_id == group_id)
        .order_by(ActivityLog.id.desc())
        .limit(limit)
    )

    res = await db.execute(q)
    return res.scalars().all()
