# rememberme/db/models.py
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import String, DateTime
from datetime import datetime

from rememberme.core.config import settings


class Base(DeclarativeBase):
    pass


class RememberMeToken(Base):
    # Nombre de tabla configurable (REMEMBERME_TABLE); se fija al importar
    __tablename__ = settings.table_name

    # Sólo el hash del valor de la cookie, nunca el valor
    cookiehash: Mapped[str] = mapped_column(String(128), primary_key=True)
    userid: Mapped[str] = mapped_column(String(128), index=True)

    # UTC sin zona horaria, precisión de segundos
    createdat: Mapped[datetime] = mapped_column(DateTime(timezone=False))
    expiresat: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
