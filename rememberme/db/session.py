# rememberme/db/session.py
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from rememberme.core.config import settings


def make_session_factory(db_url: str) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Engine + fábrica de sesiones cortas (una por operación del almacén)."""
    engine = create_async_engine(db_url, echo=False, pool_pre_ping=True)
    return engine, async_sessionmaker(engine, expire_on_commit=False)


# Instancia de la aplicación, a partir de DB_URL
engine, SessionLocal = make_session_factory(settings.db_url)
