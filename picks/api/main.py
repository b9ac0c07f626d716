from __future__ import annotations

import time
import uuid
from typing import Literal, Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from picks.auth import require_admin, require_user
from picks.catalog.base import Catalog
from picks.catalog.sql import SqlCatalog
from picks.configurations import store
from picks.core.config import settings
from picks.core.errors import CatalogUnavailable, InvalidCatalogEntry, NotFound
from picks.core.logging import configure_logging
from picks.core.observability import HTTP_LATENCY, HTTP_REQUESTS, emit_event
from picks.data.db import init_schema
from picks.estimation.matcher import match_capacity
from picks.estimation.service import estimate_and_match
from picks.schemas import (
    CalculateIn,
    CalculateOut,
    ClosestOut,
    ConfigurationCreated,
    ConfigurationIn,
    ConfigurationOut,
    HardwareModelIn,
    HardwareModelOut,
    HardwareModelUpdate,
    ProductIn,
)

configure_logging()
log = structlog.get_logger(__name__)

app = FastAPI(title="Picks hardware sizer")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_allowed_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "X-User-Id", "X-API-Key", "X-Admin-Token"],
)


@app.on_event("startup")
def _startup():
    init_schema()
    log.info("startup", service=settings.service_name, match_rule=settings.calculate_match_rule)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    method = request.method
    t0 = time.perf_counter()
    resp = await call_next(request)
    # Templated path keeps label cardinality bounded for /models/{model_id} etc.
    route = request.scope.get("route")
    path = getattr(route, "path", request.url.path)
    HTTP_LATENCY.labels(route=path, method=method).observe(time.perf_counter() - t0)
    HTTP_REQUESTS.labels(route=path, method=method, status=str(resp.status_code)).inc()
    return resp


@app.exception_handler(CatalogUnavailable)
async def _catalog_unavailable(request: Request, exc: CatalogUnavailable):
    return JSONResponse(
        status_code=503,
        content={"error": "An error occurred during the calculation. Please try again later."},
    )


@app.exception_handler(NotFound)
async def _not_found(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidCatalogEntry)
async def _invalid_catalog_entry(request: Request, exc: InvalidCatalogEntry):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def get_catalog() -> Catalog:
    return SqlCatalog()


def get_sql_catalog() -> SqlCatalog:
    return SqlCatalog()


def _config_id(config_id: str) -> str:
    try:
        uuid.UUID(config_id)
    except ValueError:
        raise HTTPException(400, "Invalid configuration ID")
    return config_id


@app.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
def health():
    return {"ok": True}


# --- Sizing


@app.post("/calculate", response_model=CalculateOut)
def calculate(
    payload: CalculateIn,
    rule: Optional[Literal["exact", "closest"]] = Query(default=None),
    catalog: Catalog = Depends(get_catalog),
):
    result = estimate_and_match(payload.to_channel_mix(), catalog, rule=rule)
    return result.to_response()


@app.get("/models/closest", response_model=ClosestOut)
def closest_model(total_rm: float = Query(alias="totalRM"), catalog: Catalog = Depends(get_catalog)):
    match = match_capacity(total_rm, catalog.hardware_models())
    if not match.found and match.overflow is None:
        raise HTTPException(404, "No suitable model found")
    return {"model": match.as_dict()}


# --- Catalog maintenance


@app.get("/models", response_model=list[HardwareModelOut])
def list_models(catalog: Catalog = Depends(get_catalog)):
    return [m.as_dict() for m in catalog.hardware_models()]


@app.get("/models/{model_id}", response_model=HardwareModelOut)
def get_model(model_id: int, catalog: SqlCatalog = Depends(get_sql_catalog)):
    return catalog.get_model(model_id).as_dict()


@app.post("/models", response_model=HardwareModelOut, status_code=201, dependencies=[Depends(require_admin)])
def create_model(payload: HardwareModelIn, catalog: SqlCatalog = Depends(get_sql_catalog)):
    created = catalog.create_model(payload.model_dump())
    emit_event("model_created", {"id": created.id, "model": created.model})
    return created.as_dict()


@app.put("/models/{model_id}", response_model=HardwareModelOut, dependencies=[Depends(require_admin)])
def update_model(model_id: int, payload: HardwareModelUpdate, catalog: SqlCatalog = Depends(get_sql_catalog)):
    return catalog.update_model(model_id, payload.model_dump(exclude_unset=True)).as_dict()


@app.delete("/models/{model_id}", dependencies=[Depends(require_admin)])
def delete_model(model_id: int, catalog: SqlCatalog = Depends(get_sql_catalog)):
    catalog.delete_model(model_id)
    return {"message": "Model deleted successfully"}


@app.get("/catalog/products")
def list_products(product_type: Optional[str] = None, catalog: SqlCatalog = Depends(get_sql_catalog)):
    return catalog.list_products(product_type)


@app.post("/catalog/products", status_code=201, dependencies=[Depends(require_admin)])
def create_product(payload: ProductIn, catalog: SqlCatalog = Depends(get_sql_catalog)):
    return catalog.create_product(payload.model_dump())


# --- Saved configurations


@app.post("/configurations", response_model=ConfigurationCreated, status_code=201)
def create_configuration(payload: ConfigurationIn, user_id: str = Depends(require_user)):
    config = store.create_configuration(user_id, payload)
    return {"message": "Configuration saved successfully", "config_id": config.id, "configuration": config}


@app.get("/configurations", response_model=list[ConfigurationOut])
def list_configurations(user_id: str = Depends(require_user)):
    return store.list_configurations(user_id)


@app.get("/configurations/{config_id}", response_model=ConfigurationOut)
def get_configuration(config_id: str, user_id: str = Depends(require_user)):
    return store.get_configuration(user_id, _config_id(config_id))


@app.put("/configurations/{config_id}", response_model=ConfigurationOut)
def update_configuration(config_id: str, payload: ConfigurationIn, user_id: str = Depends(require_user)):
    return store.update_configuration(user_id, _config_id(config_id), payload)


@app.delete("/configurations/{config_id}")
def delete_configuration(config_id: str, user_id: str = Depends(require_user)):
    store.delete_configuration(user_id, _config_id(config_id))
    return {"message": "Configuration deleted successfully"}
