from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class JobConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    type: str
    name: str | None = None
    # Test bodies are validated by the tests themselves so that every
    # problem is reported as a diagnostic rather than a parse error.
    tests: list[dict[str, Any]] = []

    @field_validator("type")
    @classmethod
    def type_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("job type must not be empty")
        return v

    @property
    def display_name(self) -> str:
        return self.name or self.type


class PlanConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    stats: str | None = None
    messages: str | None = None
    jobs: list[JobConfig]

    @model_validator(mode="after")
    def jobs_must_be_valid(self) -> PlanConfig:
        if not self.jobs:
            raise ValueError("jobs must not be empty")
        seen: set[str] = set()
        for job in self.jobs:
            if job.display_name in seen:
                raise ValueError(f"Duplicate job name '{job.display_name}'")
            seen.add(job.display_name)
        return self

    def test_count(self) -> int:
        return sum(len(job.tests) for job in self.jobs)


def load_config(path: Path) -> PlanConfig:
    """Load and validate an automation plan from a YAML file.

    ``${VAR}`` and ``${VAR:-default}`` references are expanded from the
    environment before parsing.
    """
    config_dir = path.parent.resolve()

    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(expandvars(f.read()))

    if not isinstance(raw, dict):
        raise ValueError(f"Plan file {path} must contain a mapping")

    config = PlanConfig(**raw)

    # Resolve relative file references against the plan file location
    if config.stats is not None and not Path(config.stats).is_absolute():
        config.stats = str((config_dir / config.stats).resolve())
    if config.messages is not None and not Path(config.messages).is_absolute():
        config.messages = str((config_dir / config.messages).resolve())

    return config
