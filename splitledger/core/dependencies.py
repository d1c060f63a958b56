from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.services.group_services import get_group_or_404


async def valid_group(group_id: str, db: AsyncSession = Depends(get_db)):
    return await get_group_or_404(db, group_id)
