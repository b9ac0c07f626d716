from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from picks.catalog.memory import InMemoryCatalog
from picks.core.config import settings
from picks.data.db import dispose_engines, init_schema
from picks.estimation.types import HardwareModel, UnitResourceProfile


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'picks-test.db'}"
    monkeypatch.setattr(settings, "database_url", url)
    init_schema()
    yield url
    dispose_engines()


@pytest.fixture
def client(database_url):
    from picks.api.main import app

    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def profiles():
    return [
        UnitResourceProfile(product_type="Encoder-SD", rm=10, mem="4 GB", cpu=2),
        UnitResourceProfile(product_type="Encoder-HD", rm=25, mem="8 GB", cpu=4),
        UnitResourceProfile(product_type="Encoder-FHD", rm=40, mem="12 GB", cpu=6),
        UnitResourceProfile(product_type="Encoder-4k", rm=120, mem="32 GB", cpu=16),
        UnitResourceProfile(product_type="Passthrough", rm=3, mem="1 GB", cpu=0.5),
        UnitResourceProfile(product_type="Decoder", rm=15, mem="6 GB", cpu=3),
    ]


@pytest.fixture
def models():
    return [
        HardwareModel(id=1, model="PX-100", pm="1000", pci="x8", u1="Y", u2="NA", max_support="L1", ip="Y"),
        HardwareModel(id=2, model="PX-200", pm="5000", pci="x16", u1="Y", u2="Y", max_support="L2", ip="Y"),
        HardwareModel(id=3, model="PX-400", pm="20000", pci="x16", u1="NA", u2="Y", max_support="L3", ip="Y"),
        HardwareModel(id=4, model="PX-800", pm="40000", pci="2x16", u1="NA", u2="Y", max_support="L3", ip="Y"),
        HardwareModel(id=5, model="PX-800 G4", pm="42000", g4_pm=50000, pci="2x16", u1="NA", u2="Y"),
        HardwareModel(id=6, model="PX-1600 G4", pm="60000", g4_pm=None, pci="4x16", u1="NA", u2="Y"),
    ]


@pytest.fixture
def catalog(profiles, models):
    return InMemoryCatalog(profiles, models)
