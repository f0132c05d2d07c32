# tests/conftest.py
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# --- Asegurar que podemos importar 'rememberme' desde la raíz del repo ---
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _prepare_test_env() -> None:
    tmp = (ROOT / ".pytest_tmp").absolute()
    tmp.mkdir(exist_ok=True)

    # BD SQLite temporal para pruebas (se recrea en cada ejecución)
    db_file = tmp / "test.sqlite3"
    if db_file.exists():
        db_file.unlink()
    os.environ["DB_URL"] = f"sqlite+aiosqlite:///{db_file.as_posix()}"

    # Valores por defecto explícitos para no depender de un .env local
    os.environ["REMEMBERME_COOKIE_NAME"] = "remembermecookie"
    os.environ["REMEMBERME_TABLE"] = "rememberme"
    os.environ["REMEMBERME_HASH_ALGO"] = "sha256"
    os.environ.pop("REMEMBERME_EXPIRES_AT", None)


# Antes de que cualquier test importe rememberme.core.config
_prepare_test_env()

from rememberme.core.errors import StorageError  # noqa: E402
from rememberme.core.ledger import CredentialRecord  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="session")
def client():
    """
    Cliente de pruebas con BD sqlite en .pytest_tmp/test.sqlite3.
    Con 'with' forzamos lifespan: crea tablas en startup y cierra engine en shutdown.
    """
    from rememberme.main import app
    with TestClient(app) as c:
        yield c


@pytest.fixture
def browser(client):
    """El mismo cliente pero sin cookies de tests anteriores."""
    client.cookies.clear()
    yield client
    client.cookies.clear()


class FakeStore:
    """CredentialStore en memoria; fail_* simula caídas del almacén."""

    def __init__(self):
        self.rows: dict[str, CredentialRecord] = {}
        self.fail_insert = False
        self.fail_delete = False
        self.deleted: list[str] = []

    async def insert(self, record):
        if self.fail_insert:
            raise StorageError("insert failed")
        if record.hash in self.rows:
            raise StorageError("duplicate hash")
        self.rows[record.hash] = record

    async def find_by_hash(self, digest):
        return self.rows.get(digest)

    async def delete_by_hash(self, digest):
        if self.fail_delete:
            raise StorageError("delete failed")
        self.deleted.append(digest)
        self.rows.pop(digest, None)


class FakeTransport:
    """Tarro de cookies de una petición, sin HTTP."""

    def __init__(self, cookies=None):
        self.cookies: dict[str, str] = dict(cookies or {})
        self.set_calls: list[dict] = []
        self.cleared: list[str] = []

    def set(self, name, value, *, expires_at, path, domain, secure, http_only):
        self.set_calls.append(
            {
                "name": name,
                "value": value,
                "expires_at": expires_at,
                "path": path,
                "domain": domain,
                "secure": secure,
                "http_only": http_only,
            }
        )
        self.cookies[name] = value

    def get(self, name):
        return self.cookies.get(name)

    def clear(self, name, *, path="/", domain="", secure=False, http_only=False):
        self.cleared.append(name)
        self.cookies.pop(name, None)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc))
