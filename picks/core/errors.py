from __future__ import annotations


class CatalogUnavailable(RuntimeError):
    """The reference catalog could not be read.

    Fatal to the request. Never treat it as an empty catalog: that would be
    indistinguishable from "no model is large enough".
    """


class NotFound(LookupError):
    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"{kind} not found: {key}")
        self.kind = kind
        self.key = key


class InvalidCatalogEntry(ValueError):
    """A catalog write was rejected by the store's constraints."""
