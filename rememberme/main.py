# rememberme/main.py
import logging

from fastapi import FastAPI
from contextlib import asynccontextmanager

from rememberme.api.remember import router as remember_router

from rememberme.core.config import settings
from rememberme.db.session import engine
from rememberme.db.models import Base

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # === STARTUP ===
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    # === SHUTDOWN ===
    await engine.dispose()

app = FastAPI(title="Remember-me cookies", lifespan=lifespan)

app.include_router(remember_router, prefix="/remember", tags=["remember"])

@app.get("/")
def root():
    return {"ok": True}
