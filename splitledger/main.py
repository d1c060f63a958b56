from contextlib import asynccontextmanager
from fastapi import FastAPI
from splitledger.core.config import settings
from splitledger.core.db_check import wait_for_db
from splitledger.core.logging_config import configure_logging
from splitledger.db.session import init_models
from splitledger.api.v1.routes.system import router as system_router
from splitledger.api.v1.routes.member import router as member_router
from splitledger.api.v1.routes.group import router as group_router
from splitledger.api.v1.routes.expense import router as expense_router
from splitledger.api.v1.routes.settlement import router as settlement_router

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await wait_for_db()
    await init_models()
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

@app.get("/")
async def root():
    return {"message": f"{settings.APP_NAME} is live"}

app.include_router(system_router, prefix="/api/v1/system")
app.include_router(member_router, prefix="/api/v1/members")
app.include_router(group_router, prefix="/api/v1/groups")
app.include_router(expense_router, prefix="/api/v1/expenses")
app.include_router(settlement_router, prefix="/api/v1/settlements")
