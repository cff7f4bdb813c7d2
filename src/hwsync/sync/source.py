"""Update specs - the reconcile targets, declared in YAML.

Example YAML:
```yaml
updates:
  - name: update-eu-de-1
    clusters:
      - name: ""
        region: eu-de-1
        type: kvm
```

The file is read on every access, so edits are picked up by the next pass
without a restart.
"""

import logging
from pathlib import Path
from typing import Protocol

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from hwsync.core.errors import ConfigError
from hwsync.sync.models import UpdateSpec

logger = logging.getLogger(__name__)


class UpdateSpecFile(BaseModel):
    """Top-level schema of the updates file."""

    updates: list[UpdateSpec] = Field(default_factory=list)

    @field_validator("updates")
    @classmethod
    def validate_unique_names(cls, v: list[UpdateSpec]) -> list[UpdateSpec]:
        seen: set[str] = set()
        for spec in v:
            if spec.name in seen:
                raise ValueError(f"duplicate update name: {spec.name}")
            seen.add(spec.name)
        return v


class UpdateSource(Protocol):
    """Supplies update specs by key."""

    def keys(self) -> list[str]: ...

    def get(self, key: str) -> UpdateSpec | None: ...


def load_update_specs(path: Path) -> list[UpdateSpec]:
    """Parse an updates file.

    Raises:
        ConfigError: file missing, unreadable or invalid
    """
    if not path.exists():
        raise ConfigError(f"updates file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"unable to parse {path}: {e}") from e

    try:
        return UpdateSpecFile.model_validate(data).updates
    except ValidationError as e:
        raise ConfigError(f"invalid updates file {path}: {e}") from e


class FileUpdateSource:
    """Update specs read fresh from a YAML file on each call."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def keys(self) -> list[str]:
        return [spec.name for spec in load_update_specs(self.path)]

    def get(self, key: str) -> UpdateSpec | None:
        for spec in load_update_specs(self.path):
            if spec.name == key:
                return spec
        logger.debug(f"update {key} not found in {self.path}")
        return None


class StaticUpdateSource:
    """In-memory update specs, for one-shot runs and tests."""

    def __init__(self, specs: list[UpdateSpec]) -> None:
        self._specs = {spec.name: spec for spec in specs}

    def keys(self) -> list[str]:
        return list(self._specs)

    def get(self, key: str) -> UpdateSpec | None:
        return self._specs.get(key)
