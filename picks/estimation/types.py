from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Union

RawNumber = Union[int, float, str, None]


@dataclass(frozen=True)
class UnitResourceProfile:
    """Per-unit cost of one product type, as stored in the catalog.

    Values are kept raw (the store is loosely typed); the aggregator parses
    them explicitly.
    """

    product_type: str
    rm: RawNumber = 0
    mem: RawNumber = 0
    cpu: RawNumber = 0
    model: Optional[str] = None

    @classmethod
    def zero(cls, product_type: str) -> "UnitResourceProfile":
        return cls(product_type=product_type, rm=0, mem=0, cpu=0)


@dataclass(frozen=True)
class HardwareModel:
    model: str
    pm: RawNumber
    g4_pm: RawNumber = None
    max_support: Optional[str] = None
    ip: Optional[str] = None
    pci: Optional[str] = None
    u1: Optional[str] = None
    u2: Optional[str] = None
    id: Optional[int] = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "model": self.model,
            "pm": self.pm,
            "g4_pm": self.g4_pm,
            "max_support": self.max_support,
            "ip": self.ip,
            "pci": self.pci,
            "u1": self.u1,
            "u2": self.u2,
        }


@dataclass(frozen=True)
class ProtocolEntry:
    quantity: int = 0
    name: Optional[str] = None


@dataclass(frozen=True)
class ChannelMix:
    sd: int = 0
    hd: int = 0
    fhd: int = 0
    uhd: int = 0
    passthrough: int = 0
    decoder: int = 0
    protocols: Sequence[ProtocolEntry] = field(default_factory=tuple)

    @property
    def total_protocols(self) -> int:
        return sum(int(p.quantity or 0) for p in self.protocols)


@dataclass(frozen=True)
class DemandTotals:
    total_rm: float
    total_memory_before_rounding: float
    total_memory_after_rounding: float
    total_cpu: float


@dataclass(frozen=True)
class MatchResult:
    """Outcome of the least-sufficient-capacity search.

    `base` is None when no standard model is large enough (the "no model
    found" sentinel). Overflow fields are only set when the overflow search
    ran and found a model.
    """

    base: Optional[HardwareModel] = None
    base_pm: Optional[float] = None
    overflow: Optional[HardwareModel] = None
    overflow_pm: Optional[float] = None

    @property
    def found(self) -> bool:
        return self.base is not None

    def as_dict(self) -> dict[str, Any]:
        return {
            "model": self.base.model if self.base else None,
            "pm": self.base_pm,
            "pci": str(self.base.pci) if self.base and self.base.pci is not None else None,
            "g4Model": self.overflow.model if self.overflow else None,
            "g4PM": self.overflow_pm,
        }
