# rememberme/db/schema.py
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.schema import CreateTable

from rememberme.db.models import RememberMeToken

_DIALECTS = {
    "sqlite": sqlite.dialect,
    "mysql": mysql.dialect,
    "postgresql": postgresql.dialect,
}


def render_schema(dialect: str = "sqlite") -> str:
    """
    CREATE TABLE de la tabla rememberme para aprovisionarla a mano:
        render_schema("postgresql")
    """
    try:
        d = _DIALECTS[dialect.lower()]()
    except KeyError:
        raise ValueError(f"unsupported dialect {dialect!r}; use one of {sorted(_DIALECTS)}") from None
    ddl = str(CreateTable(RememberMeToken.__table__).compile(dialect=d)).strip()
    return ddl + ";"
