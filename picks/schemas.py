from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from picks.estimation.parsing import coerce_numeric
from picks.estimation.types import ChannelMix, ProtocolEntry


# --- Sizing


class ProtocolIn(BaseModel):
    name: Optional[str] = None
    quantity: Optional[int] = Field(default=0, ge=0)


class CalculateIn(BaseModel):
    sd: Optional[int] = Field(default=0, ge=0)
    hd: Optional[int] = Field(default=0, ge=0)
    fhd: Optional[int] = Field(default=0, ge=0)
    uhd: Optional[int] = Field(default=0, ge=0)
    passthrough: Optional[int] = Field(default=0, ge=0)
    decoder: Optional[int] = Field(default=0, ge=0)
    protocols: list[ProtocolIn] = Field(default_factory=list)

    def to_channel_mix(self) -> ChannelMix:
        return ChannelMix(
            sd=self.sd or 0,
            hd=self.hd or 0,
            fhd=self.fhd or 0,
            uhd=self.uhd or 0,
            passthrough=self.passthrough or 0,
            decoder=self.decoder or 0,
            protocols=tuple(ProtocolEntry(quantity=p.quantity or 0, name=p.name) for p in self.protocols),
        )


class ModelInfo(BaseModel):
    modelName: str
    pm: Union[float, str, None] = None
    maxSupport: Optional[str] = None
    ip: Optional[str] = None
    pci: Optional[str] = None
    u1: Optional[str] = None
    u2: Optional[str] = None
    g4Model: Optional[str] = None
    g4PM: Optional[float] = None


class CalculateOut(BaseModel):
    """Totals are two-decimal strings."""

    totalRM: str
    totalMemoryBeforeRounding: str
    totalMemoryAfterRounding: str
    totalCPU: str
    modelInfo: ModelInfo


class ClosestModel(BaseModel):
    model: Optional[str] = None
    pm: Optional[float] = None
    pci: Optional[str] = None
    g4Model: Optional[str] = None
    g4PM: Optional[float] = None


class ClosestOut(BaseModel):
    model: ClosestModel


# --- Catalog


def _trim_numeric_string(v: Any) -> Any:
    if isinstance(v, str):
        v = v.strip()
        return float(v) if v else None
    return v


class HardwareModelIn(BaseModel):
    model: str = Field(min_length=1)
    pm: str = Field(pattern=r"^\d+$", description="Rated capacity as a digit string.")
    g4_pm: Optional[float] = None
    max_support: Optional[str] = None
    ip: Optional[str] = None
    pci: str
    u1: Literal["Y", "NA"]
    u2: Literal["Y", "NA"]

    @field_validator("g4_pm", mode="before")
    @classmethod
    def _trim_g4_pm(cls, v: Any) -> Any:
        return _trim_numeric_string(v)


class HardwareModelUpdate(BaseModel):
    model: Optional[str] = Field(default=None, min_length=1)
    pm: Optional[str] = Field(default=None, pattern=r"^\d+$")
    g4_pm: Optional[float] = None
    max_support: Optional[str] = None
    ip: Optional[str] = None
    pci: Optional[str] = None
    u1: Optional[Literal["Y", "NA"]] = None
    u2: Optional[Literal["Y", "NA"]] = None

    @field_validator("g4_pm", mode="before")
    @classmethod
    def _trim_g4_pm(cls, v: Any) -> Any:
        return _trim_numeric_string(v)

    # Omitted fields keep their stored value; these columns cannot be cleared.
    @field_validator("model", "pm", "pci", "u1", "u2")
    @classmethod
    def _not_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("field is required and cannot be null")
        return v


class HardwareModelOut(BaseModel):
    id: Optional[int] = None
    model: str
    pm: Optional[str] = None
    g4_pm: Optional[float] = None
    max_support: Optional[str] = None
    ip: Optional[str] = None
    pci: Optional[str] = None
    u1: Optional[str] = None
    u2: Optional[str] = None

    @field_validator("pm", mode="before")
    @classmethod
    def _pm_as_text(cls, v: Any) -> Any:
        if isinstance(v, float) and v.is_integer():
            v = int(v)
        return str(v) if isinstance(v, (int, float)) and not isinstance(v, bool) else v

    @field_validator("g4_pm", mode="before")
    @classmethod
    def _g4_pm_as_number(cls, v: Any) -> Any:
        return coerce_numeric(v, field="g4_pm")


class ProductIn(BaseModel):
    model: str = Field(min_length=1)
    product_type: str = Field(min_length=1)
    resolution: Optional[str] = None
    bitrate: Optional[float] = Field(default=None, ge=0)
    framerate: Optional[float] = Field(default=None, ge=0)
    rm: Optional[float] = Field(default=None, ge=0)
    mem: Optional[str] = Field(default=None, description="Memory with unit suffix, e.g. '16 GB'.")
    cpu: Optional[float] = Field(default=None, ge=0)


# --- Saved configurations


class StorageSpec(BaseModel):
    type: Optional[Literal["HDD", "SSD"]] = None
    capacity: Optional[str] = None


class NetworkSpec(BaseModel):
    ports: Optional[int] = Field(default=None, ge=0)
    throughput: Optional[float] = Field(default=None, ge=0)


class TotalsSpec(BaseModel):
    rm: Optional[float] = None
    memory: Optional[float] = None
    cpu: Optional[float] = None


class ModelDetails(BaseModel):
    name: Optional[str] = None
    g4_model: Optional[str] = None
    pm: Optional[float] = None
    g4_pm: Optional[float] = None
    pci: Optional[str] = None


class ConfigurationIn(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    hardware: str = Field(min_length=1)
    application: str = Field(min_length=1)
    model: Optional[str] = None
    part_code: Optional[str] = None
    teleport_type: Optional[str] = None
    channels: list[dict[str, Any]] = Field(default_factory=list)
    totals: Optional[TotalsSpec] = None
    model_details: Optional[ModelDetails] = None
    network: Optional[NetworkSpec] = None
    storage: Optional[StorageSpec] = None


class ConfigurationOut(ConfigurationIn):
    id: str
    user_id: str
    created_at: str
    updated_at: str


class ConfigurationCreated(BaseModel):
    message: str
    config_id: str
    configuration: ConfigurationOut
