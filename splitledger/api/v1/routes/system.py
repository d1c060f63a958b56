from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.services.system_services import check_db_service, system_health, system_metrics

router = APIRouter()


@router.get("/health")
async def health():
    return await system_health()


@router.get("/health/db")
async def check_db():
    result = await check_db_service()
    if not result["db"]:
        return JSONResponse(status_code=503, content=result)
    return result


@router.get("/metrics")
async def metrics(db: AsyncSession = Depends(get_db)):
    return await system_metrics(db)
