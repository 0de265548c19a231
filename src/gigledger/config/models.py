"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, gigledger.toml only holds overrides.
Each model is one section of the file and one nested field of GigSettings.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    url: str | None = None  # None → SQLite file under {root}/.gigledger/
    lock_timeout: float = Field(default=5.0, gt=0)
    echo: bool = False


class PaymentsConfig(BaseModel):
    """[payments] section."""

    model_config = {"frozen": True}

    currency: str = "USD"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
