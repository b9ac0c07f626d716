from __future__ import annotations

import hashlib
import hmac

from fastapi import Header, HTTPException
from sqlalchemy import text

from picks.core.config import settings
from picks.data.db import read_session_scope, write_session_scope


def _digest(api_key: str) -> str:
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()


def provision_user(user_id: str, name: str, api_key: str) -> None:
    with write_session_scope() as db:
        db.execute(text("DELETE FROM api_user WHERE id=:id"), {"id": user_id})
        db.execute(
            text("INSERT INTO api_user (id, name, api_key_sha256) VALUES (:id, :n, :k)"),
            {"id": user_id, "n": name, "k": _digest(api_key)},
        )


def require_user(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> str:
    if not x_user_id or not x_api_key:
        raise HTTPException(401, "Missing X-User-Id or X-API-Key")

    with read_session_scope() as db:
        row = db.execute(
            text("SELECT api_key_sha256 FROM api_user WHERE id=:u"),
            {"u": x_user_id},
        ).first()

    if not row or not hmac.compare_digest(row[0], _digest(x_api_key)):
        raise HTTPException(403, "Invalid user credentials")
    return x_user_id


def require_admin(x_admin_token: str | None = Header(default=None, alias="X-Admin-Token")) -> None:
    """Guard for catalog maintenance. Disabled while settings.admin_token is empty."""
    if not settings.admin_token:
        return
    if not x_admin_token or not hmac.compare_digest(x_admin_token, settings.admin_token):
        raise HTTPException(403, "Invalid admin token")
