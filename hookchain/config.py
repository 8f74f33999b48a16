"""Manifest models and loading for declaratively built chains."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from hookchain.errors import ManifestError


class ListenerSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str
    target: str
    receiver: str | None = None
    index: int | None = None
    after: str | None = None
    before: str | None = None

    @model_validator(mode="after")
    def _check_position(self) -> ListenerSpec:
        if self.index is not None and (self.after is not None or self.before is not None):
            raise ValueError(f"listener {self.key!r}: index cannot be combined with after/before")
        return self

    @property
    def positioned(self) -> bool:
        return self.index is not None or self.after is not None or self.before is not None


class ChainManifest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = "default"
    log_level: str = "INFO"
    listeners: list[ListenerSpec] = Field(default_factory=list)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must decode to a mapping")
    return data


def load_manifest(
    path: str | Path,
    defaults: dict[str, Any] | None = None,
    runtime_override: dict[str, Any] | None = None,
) -> ChainManifest:
    """Load a manifest with precedence runtime override > manifest file > defaults.

    Lists are replaced wholesale, so an override that names ``listeners``
    supersedes the file's listener list.
    """
    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise ManifestError(f"manifest not found: {manifest_path}")

    merged: dict[str, Any] = {}
    if defaults:
        merged = _deep_merge(merged, defaults)
    file_data = _load_yaml(manifest_path)
    if file_data:
        merged = _deep_merge(merged, file_data)
    if runtime_override:
        merged = _deep_merge(merged, runtime_override)

    return ChainManifest.model_validate(merged)
