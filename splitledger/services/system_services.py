import logging
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.core.config import settings
from splitledger.db.session import engine
from splitledger.models.member import Member
from splitledger.models.group import Group
from splitledger.models.expense import Expense

logger = logging.getLogger("splitledger.services.system")


async def check_db_service():
    try:
        async with engine.connect() as conn:
            await conn.exec_driver_sql("SELECT 1")
        return {"db": True, "message": "Database is connected"}
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        return {"db": False, "error": str(e)}


async def system_health():
    return {"status": "ok", "app": settings.APP_NAME}


async def _count(db: AsyncSession, q):
    return (await db.execute(q)).scalar() or 0


async def system_metrics(db: AsyncSession):
    live = Expense.is_deleted == False

    return {
        "members": await _count(db, select(func.count(Member.id))),
        "groups": await _count(db, select(func.count(Group.id)).where(Group.is_deleted == False)),
        "expenses": await _count(db, select(func.count(Expense.id)).where(live, Expense.is_settlement == False)),
        "settlements": await _count(db, select(func.count(Expense.id)).where(live, Expense.is_settlement == True)),
    }
