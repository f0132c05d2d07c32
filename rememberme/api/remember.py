# rememberme/api/remember.py
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from rememberme.core.config import settings
from rememberme.core.errors import StorageError
from rememberme.core.ledger import CredentialRecord, TokenLedger
from rememberme.core.transport import StarletteCookieTransport
from rememberme.db.session import SessionLocal
from rememberme.db.store import SqlCredentialStore

logger = logging.getLogger(__name__)

router = APIRouter()

_ledger = TokenLedger(SqlCredentialStore(SessionLocal), settings.ledger_config())


def get_ledger() -> TokenLedger:
    return _ledger


def _record_out(r: CredentialRecord) -> dict:
    return {
        "user_id": r.user_id,
        "digest": r.hash,
        "created_at": r.created_at.isoformat(),
        "expires_at": r.expires_at.isoformat() if r.expires_at else None,
    }


class IssueInput(BaseModel):
    user_id: str = Field(min_length=1, max_length=128)
    expires_at: datetime | None = None


@router.post("/issue")
async def issue_cookie(
    body: IssueInput,
    request: Request,
    response: Response,
    ledger: TokenLedger = Depends(get_ledger),
):
    transport = StarletteCookieTransport(request, response)
    try:
        issued = await ledger.issue(body.user_id, transport, expires_at=body.expires_at)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    # El secreto sólo viaja en la cookie, nunca en el cuerpo
    return _record_out(issued.record)


@router.get("/verify")
async def verify_cookie(
    request: Request,
    response: Response,
    ledger: TokenLedger = Depends(get_ledger),
):
    try:
        record = await ledger.verify(StarletteCookieTransport(request, response))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if record is None:
        return {"valid": False}
    return {"valid": True, **_record_out(record)}


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    ledger: TokenLedger = Depends(get_ledger),
):
    try:
        await ledger.revoke(StarletteCookieTransport(request, response))
    except StorageError as e:
        # La cookie ya se ha borrado en `response`; se conserva el Set-Cookie en el 503
        out = JSONResponse(status_code=503, content={"detail": str(e)})
        for value in response.headers.getlist("set-cookie"):
            out.headers.append("set-cookie", value)
        return out
    return {"ok": True}
