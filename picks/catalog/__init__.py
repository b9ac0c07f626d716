"""Catalog access: the read-only protocol the sizing core depends on, plus implementations."""

from .base import Catalog
from .memory import InMemoryCatalog
from .sql import SqlCatalog
