from __future__ import annotations

from typing import Iterable, Protocol

from picks.estimation.types import HardwareModel, UnitResourceProfile


class Catalog(Protocol):
    """Read-only catalog access used by the sizing core.

    Implementations raise CatalogUnavailable when the backing store cannot be
    read. An empty result is only ever returned for a readable, empty store.
    """

    def unit_profiles(self, product_types: Iterable[str]) -> dict[str, UnitResourceProfile]:
        """Profiles keyed by product type; absent types resolve to the zero profile."""
        ...

    def hardware_models(self) -> list[HardwareModel]:
        """All hardware models, in catalog order."""
        ...
