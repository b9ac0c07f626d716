from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    service_name: str = Field(default="picks-sizer")
    log_level: str = Field(default="INFO")

    # --- Database
    database_url: str = Field(
        default="sqlite:///./picks.db",
        description="SQLAlchemy URL holding the catalog, users and saved configurations.",
    )

    # --- Sizing
    calculate_match_rule: str = Field(
        default="closest",
        description=(
            "closest | exact. Rule used to fill modelInfo on POST /calculate. "
            "'closest' is the least-sufficient-capacity search served by /models/closest; "
            "'exact' looks up a model whose capacity equals totalRM."
        ),
    )

    # --- HTTP
    cors_allowed_origins: str = Field(
        default="*",
        description="Comma-separated list of origins allowed by CORS.",
    )

    # --- Admin / ops
    admin_token: str = Field(
        default="",
        description="Shared secret for catalog maintenance endpoints. Empty disables the check.",
    )


settings = Settings()
