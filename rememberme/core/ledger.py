# rememberme/core/ledger.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol

from rememberme.core.config import LedgerConfig
from rememberme.core.crypto import generate_secret, hash_secret
from rememberme.core.errors import ConfigurationError
from rememberme.core.transport import CookieTransport

logger = logging.getLogger(__name__)

# Horizonte por defecto cuando no hay caducidad configurada
DEFAULT_HORIZON = timedelta(days=10 * 365)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive se interpreta como UTC; aware se pasa a UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class CredentialRecord:
    hash: str
    user_id: str
    created_at: datetime
    expires_at: datetime | None

    def __post_init__(self):
        # Los almacenes pueden devolver UTC naive (TIMESTAMP WITHOUT TIME ZONE)
        object.__setattr__(self, "created_at", as_utc(self.created_at))
        if self.expires_at is not None:
            object.__setattr__(self, "expires_at", as_utc(self.expires_at))

    def is_expired(self, now: datetime) -> bool:
        # Inclusivo: en el instante exacto de expires_at ya no es válido
        return self.expires_at is not None and now >= self.expires_at


@dataclass(frozen=True)
class IssuedToken:
    secret: str = field(repr=False)
    digest: str
    record: CredentialRecord


class CredentialStore(Protocol):
    async def insert(self, record: CredentialRecord) -> None: ...

    async def find_by_hash(self, digest: str) -> CredentialRecord | None: ...

    async def delete_by_hash(self, digest: str) -> None: ...


class DeleteHooks:
    """Observador de Revoke. Por defecto no hace nada; se inyecta uno propio para auditoría."""

    async def before_delete(self, record: CredentialRecord) -> None:
        pass

    async def after_delete(self, record: CredentialRecord) -> None:
        pass


class TokenLedger:
    def __init__(
        self,
        store: CredentialStore | None,
        config: LedgerConfig | None = None,
        hooks: DeleteHooks | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        if store is None:
            raise ConfigurationError("TokenLedger requires a CredentialStore")
        self.store = store
        self.config = config or LedgerConfig()
        self.hooks = hooks or DeleteHooks()
        self._clock = clock

    def now(self) -> datetime:
        return as_utc(self._clock())

    def _cookie_attrs(self) -> dict:
        return {
            "path": self.config.cookie_path,
            "domain": self.config.cookie_domain,
            "secure": self.config.cookie_secure,
            "http_only": self.config.cookie_http_only,
        }

    async def issue(
        self,
        user_id: str,
        transport: CookieTransport | None = None,
        *,
        secret: str | None = None,
        expires_at: datetime | None = None,
    ) -> IssuedToken:
        """
        Crea un registro nuevo para user_id y entrega el secreto al transporte.
        Sólo el digest es seguro para logs; el secreto no se guarda en ningún sitio.
        """
        if not user_id or not user_id.strip():
            raise ValueError("user_id is required")

        secret = secret or generate_secret(self.config.secret_length)
        digest = hash_secret(secret, self.config.hash_algorithm)

        created_at = self.now().replace(microsecond=0)
        expiry = expires_at or self.config.expires_at
        if expiry is None:
            expiry = created_at + DEFAULT_HORIZON
        else:
            # misma precisión de segundos que la fila y la cookie
            expiry = as_utc(expiry).replace(microsecond=0)

        record = CredentialRecord(
            hash=digest, user_id=user_id, created_at=created_at, expires_at=expiry
        )
        await self.store.insert(record)

        if transport is not None:
            transport.set(
                self.config.cookie_name, secret, expires_at=expiry, **self._cookie_attrs()
            )
        logger.info("remember-me token issued user_id=%s digest=%s", user_id, digest)
        return IssuedToken(secret=secret, digest=digest, record=record)

    async def verify(
        self, transport: CookieTransport | None = None, *, secret: str | None = None
    ) -> CredentialRecord | None:
        """Devuelve el registro vigente o None (ausente, desconocido o caducado)."""
        if not secret and transport is not None:
            secret = transport.get(self.config.cookie_name)
        if not secret:
            return None

        digest = hash_secret(secret, self.config.hash_algorithm)
        record = await self.store.find_by_hash(digest)
        if record is None:
            logger.debug("remember-me token unknown digest=%s", digest)
            return None
        if record.is_expired(self.now()):
            logger.debug("remember-me token expired digest=%s", digest)
            return None
        return record

    async def revoke(
        self, transport: CookieTransport | None = None, *, secret: str | None = None
    ) -> None:
        """
        Logout: borra el registro del secreto (explícito o de la cookie actual) si es válido
        y limpia la cookie siempre, aunque no hubiera registro o el borrado falle.
        Sin transporte sólo se borra el registro.
        """
        try:
            record = await self.verify(transport, secret=secret)
            if record is not None:
                await self.hooks.before_delete(record)
                await self.store.delete_by_hash(record.hash)
                await self.hooks.after_delete(record)
                logger.info(
                    "remember-me token revoked user_id=%s digest=%s", record.user_id, record.hash
                )
        finally:
            if transport is not None:
                transport.clear(self.config.cookie_name, **self._cookie_attrs())
