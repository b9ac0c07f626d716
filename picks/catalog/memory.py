from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Sequence

from picks.estimation.types import HardwareModel, UnitResourceProfile


class InMemoryCatalog:
    """Catalog over plain Python lists. Used by tests and offline scripts."""

    def __init__(
        self,
        profiles: Sequence[UnitResourceProfile] = (),
        models: Sequence[HardwareModel] = (),
    ) -> None:
        self._profiles = list(profiles)
        self._models = list(models)

    def unit_profiles(self, product_types: Iterable[str]) -> dict[str, UnitResourceProfile]:
        out: dict[str, UnitResourceProfile] = {}
        for product_type in product_types:
            # First row of a type wins, as with the SQL catalog.
            match = next((p for p in self._profiles if p.product_type == product_type), None)
            out[product_type] = match or UnitResourceProfile.zero(product_type)
        return out

    def hardware_models(self) -> list[HardwareModel]:
        return list(self._models)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InMemoryCatalog":
        """Build from {"products": [...], "models": [...]} using the store's field names."""
        profiles = [
            UnitResourceProfile(
                product_type=p["product_type"],
                rm=p.get("rm", 0),
                mem=p.get("mem"),
                cpu=p.get("cpu", 0),
                model=p.get("model"),
            )
            for p in data.get("products", [])
        ]
        models = [
            HardwareModel(
                model=m["model"],
                pm=m.get("pm"),
                g4_pm=m.get("g4_pm"),
                max_support=m.get("max_support"),
                ip=m.get("ip"),
                pci=m.get("pci"),
                u1=m.get("u1"),
                u2=m.get("u2"),
                id=i + 1,
            )
            for i, m in enumerate(data.get("models", []))
        ]
        return cls(profiles, models)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryCatalog":
        return cls.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))
