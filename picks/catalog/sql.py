from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional

import structlog
from sqlalchemy import bindparam, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from picks.core.errors import CatalogUnavailable, InvalidCatalogEntry, NotFound
from picks.core.observability import CATALOG_FAILURES
from picks.data.db import read_session_scope, write_session_scope
from picks.estimation.types import HardwareModel, UnitResourceProfile

log = structlog.get_logger(__name__)

_MODEL_COLUMNS = ("model", "pm", "g4_pm", "max_support", "ip", "pci", "u1", "u2")
_PRODUCT_COLUMNS = ("model", "product_type", "resolution", "bitrate", "framerate", "rm", "mem", "cpu")


@contextmanager
def _catalog_errors(source: str) -> Iterator[None]:
    try:
        yield
    except IntegrityError as e:
        log.warning("catalog_write_rejected", source=source, error=str(e.orig))
        raise InvalidCatalogEntry(f"{source} row violates a constraint: {e.orig}") from e
    except SQLAlchemyError as e:
        CATALOG_FAILURES.labels(source=source).inc()
        log.error("catalog_read_failed", source=source, error=str(e))
        raise CatalogUnavailable(f"catalog read failed ({source})") from e


def _row_to_model(row: Any) -> HardwareModel:
    return HardwareModel(
        id=row["id"],
        model=row["model"],
        pm=row["pm"],
        g4_pm=row["g4_pm"],
        max_support=row["max_support"],
        ip=row["ip"],
        pci=row["pci"],
        u1=row["u1"],
        u2=row["u2"],
    )


class SqlCatalog:
    """Catalog backed by the picks_table / picks_model tables."""

    def __init__(self, database_url: str | None = None) -> None:
        self.database_url = database_url

    # ----------------- Catalog protocol -----------------

    def unit_profiles(self, product_types: Iterable[str]) -> dict[str, UnitResourceProfile]:
        wanted = list(product_types)
        stmt = text(
            "SELECT id, model, product_type, rm, mem, cpu FROM picks_table "
            "WHERE product_type IN :types ORDER BY id"
        ).bindparams(bindparam("types", expanding=True))

        with _catalog_errors("picks_table"), read_session_scope(self.database_url) as db:
            rows = db.execute(stmt, {"types": wanted}).mappings().all()

        out: dict[str, UnitResourceProfile] = {}
        for row in rows:
            out.setdefault(
                row["product_type"],
                UnitResourceProfile(
                    product_type=row["product_type"],
                    rm=row["rm"],
                    mem=row["mem"],
                    cpu=row["cpu"],
                    model=row["model"],
                ),
            )
        for product_type in wanted:
            if product_type not in out:
                out[product_type] = UnitResourceProfile.zero(product_type)
        return out

    def hardware_models(self) -> list[HardwareModel]:
        with _catalog_errors("picks_model"), read_session_scope(self.database_url) as db:
            rows = db.execute(text("SELECT * FROM picks_model ORDER BY id")).mappings().all()
        return [_row_to_model(r) for r in rows]

    # ----------------- maintenance -----------------

    def get_model(self, model_id: int) -> HardwareModel:
        with _catalog_errors("picks_model"), read_session_scope(self.database_url) as db:
            row = db.execute(text("SELECT * FROM picks_model WHERE id=:id"), {"id": model_id}).mappings().first()
        if row is None:
            raise NotFound("model", str(model_id))
        return _row_to_model(row)

    def create_model(self, fields: dict[str, Any]) -> HardwareModel:
        values = {c: fields.get(c) for c in _MODEL_COLUMNS}
        with _catalog_errors("picks_model"), write_session_scope(self.database_url) as db:
            res = db.execute(
                text(
                    """
                    INSERT INTO picks_model (model, pm, g4_pm, max_support, ip, pci, u1, u2)
                    VALUES (:model, :pm, :g4_pm, :max_support, :ip, :pci, :u1, :u2)
                    """
                ),
                values,
            )
            new_id = res.lastrowid
        log.info("model_created", id=new_id, model=values["model"])
        return self.get_model(new_id)

    def update_model(self, model_id: int, fields: dict[str, Any]) -> HardwareModel:
        updates = {c: fields[c] for c in _MODEL_COLUMNS if c in fields}
        if not updates:
            return self.get_model(model_id)
        assignments = ", ".join(f"{c}=:{c}" for c in updates)
        with _catalog_errors("picks_model"), write_session_scope(self.database_url) as db:
            res = db.execute(
                text(f"UPDATE picks_model SET {assignments} WHERE id=:id"),
                {**updates, "id": model_id},
            )
            changed = res.rowcount
        if not changed:
            raise NotFound("model", str(model_id))
        return self.get_model(model_id)

    def delete_model(self, model_id: int) -> None:
        with _catalog_errors("picks_model"), write_session_scope(self.database_url) as db:
            res = db.execute(text("DELETE FROM picks_model WHERE id=:id"), {"id": model_id})
            deleted = res.rowcount
        if not deleted:
            raise NotFound("model", str(model_id))
        log.info("model_deleted", id=model_id)

    def list_products(self, product_type: Optional[str] = None) -> list[dict[str, Any]]:
        sql = "SELECT * FROM picks_table"
        params: dict[str, Any] = {}
        if product_type:
            sql += " WHERE product_type=:t"
            params["t"] = product_type
        sql += " ORDER BY id"
        with _catalog_errors("picks_table"), read_session_scope(self.database_url) as db:
            rows = db.execute(text(sql), params).mappings().all()
        return [dict(r) for r in rows]

    def create_product(self, fields: dict[str, Any]) -> dict[str, Any]:
        values = {c: fields.get(c) for c in _PRODUCT_COLUMNS}
        with _catalog_errors("picks_table"), write_session_scope(self.database_url) as db:
            res = db.execute(
                text(
                    """
                    INSERT INTO picks_table (model, product_type, resolution, bitrate, framerate, rm, mem, cpu)
                    VALUES (:model, :product_type, :resolution, :bitrate, :framerate, :rm, :mem, :cpu)
                    """
                ),
                values,
            )
            new_id = res.lastrowid
        log.info("product_created", id=new_id, product_type=values["product_type"])
        return {"id": new_id, **values}
