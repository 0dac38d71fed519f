"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, tscycles.toml only contains
overrides. Most projects need no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- tscycles.toml sections ---


class ScanConfig(BaseModel):
    """[scan] section."""

    model_config = {"frozen": True}

    config_names: list[str] = Field(default_factory=lambda: ["tsconfig.json"])
    skip_dirs: list[str] = Field(default_factory=lambda: ["node_modules", ".git"])


class ResolveConfig(BaseModel):
    """[resolve] section — the built-in package-lookup resolver."""

    model_config = {"frozen": True}

    extensions: list[str] = Field(
        default_factory=lambda: [
            ".ts",
            ".tsx",
            ".mts",
            ".cts",
            ".js",
            ".jsx",
            ".mjs",
            ".cjs",
            ".json",
        ]
    )
    conditions: list[str] = Field(default_factory=lambda: ["import", "module", "default", "require"])
    main_fields: list[str] = Field(default_factory=lambda: ["module", "main"])


class WatchConfig(BaseModel):
    """[watch] section."""

    model_config = {"frozen": True}

    debounce_ms: int = 50
    truncate: bool = True


class TscyclesConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    scan: ScanConfig = Field(default_factory=ScanConfig)
    resolve: ResolveConfig = Field(default_factory=ResolveConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
