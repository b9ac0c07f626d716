from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import text

from picks.core.errors import NotFound
from picks.data.db import read_session_scope, write_session_scope
from picks.schemas import ConfigurationIn, ConfigurationOut

log = structlog.get_logger(__name__)

# Teleport appliances of these kinds carry no local storage.
STORAGELESS_TELEPORT_TYPES = ("xport", "inport")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _body(payload: ConfigurationIn) -> dict[str, Any]:
    body = payload.model_dump(exclude={"hardware", "application"})
    if payload.application == "Teleport" and payload.teleport_type in STORAGELESS_TELEPORT_TYPES:
        body["storage"] = None
    return body


def _row_to_out(row: Any) -> ConfigurationOut:
    body = json.loads(row["body"]) if row["body"] else {}
    return ConfigurationOut(
        id=row["id"],
        user_id=row["user_id"],
        hardware=row["hardware"],
        application=row["application"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        **body,
    )


def create_configuration(user_id: str, payload: ConfigurationIn) -> ConfigurationOut:
    config_id = str(uuid.uuid4())
    ts = _now()
    with write_session_scope() as db:
        db.execute(
            text(
                """
                INSERT INTO configuration (id, user_id, hardware, application, body, created_at, updated_at)
                VALUES (:id, :u, :h, :a, :b, :c, :c)
                """
            ),
            {
                "id": config_id,
                "u": user_id,
                "h": payload.hardware,
                "a": payload.application,
                "b": json.dumps(_body(payload)),
                "c": ts,
            },
        )
    log.info("configuration_saved", config_id=config_id, user_id=user_id, application=payload.application)
    return get_configuration(user_id, config_id)


def list_configurations(user_id: str) -> list[ConfigurationOut]:
    with read_session_scope() as db:
        rows = db.execute(
            text("SELECT * FROM configuration WHERE user_id=:u ORDER BY created_at DESC"),
            {"u": user_id},
        ).mappings().all()
    return [_row_to_out(r) for r in rows]


def get_configuration(user_id: str, config_id: str) -> ConfigurationOut:
    """Only the owner can read a configuration; anyone else gets NotFound."""
    with read_session_scope() as db:
        row = db.execute(
            text("SELECT * FROM configuration WHERE id=:id AND user_id=:u"),
            {"id": config_id, "u": user_id},
        ).mappings().first()
    if row is None:
        raise NotFound("configuration", config_id)
    return _row_to_out(row)


def update_configuration(user_id: str, config_id: str, payload: ConfigurationIn) -> ConfigurationOut:
    with write_session_scope() as db:
        res = db.execute(
            text(
                """
                UPDATE configuration SET hardware=:h, application=:a, body=:b, updated_at=:t
                WHERE id=:id AND user_id=:u
                """
            ),
            {
                "id": config_id,
                "u": user_id,
                "h": payload.hardware,
                "a": payload.application,
                "b": json.dumps(_body(payload)),
                "t": _now(),
            },
        )
        updated = res.rowcount
    if not updated:
        raise NotFound("configuration", config_id)
    log.info("configuration_updated", config_id=config_id, user_id=user_id)
    return get_configuration(user_id, config_id)


def delete_configuration(user_id: str, config_id: str) -> None:
    with write_session_scope() as db:
        res = db.execute(
            text("DELETE FROM configuration WHERE id=:id AND user_id=:u"),
            {"id": config_id, "u": user_id},
        )
        deleted = res.rowcount
    if not deleted:
        raise NotFound("configuration", config_id)
    log.info("configuration_deleted", config_id=config_id, user_id=user_id)
