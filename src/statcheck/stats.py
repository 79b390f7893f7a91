"""Read-only counter snapshots consumed by statistic tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml


class InMemoryStats(Mapping[str, int]):
    """A snapshot of named counters.

    Instances are callable so they can be handed straight to a test as its
    counter lookup: ``stats("requests.count")`` returns the value or None.
    """

    def __init__(self, counters: Mapping[str, int] | None = None):
        self._counters = dict(counters or {})

    def get_stat(self, key: str) -> int | None:
        return self._counters.get(key)

    def __call__(self, key: str) -> int | None:
        return self.get_stat(key)

    def __getitem__(self, key: str) -> int:
        return self._counters[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._counters)

    def __len__(self) -> int:
        return len(self._counters)

    def __repr__(self) -> str:
        return f"InMemoryStats({self._counters!r})"


def _flatten(raw: Mapping[Any, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    for key, value in raw.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            yield from _flatten(value, full_key)
        else:
            yield full_key, value


def load_stats(path: Path) -> InMemoryStats:
    """Load counters from a YAML or JSON file.

    Nested mappings are flattened into dotted keys, so ``{"stats": {"auth":
    3}}`` yields the counter ``stats.auth``.
    """
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return InMemoryStats()
    if not isinstance(raw, Mapping):
        raise ValueError(f"Stats file {path} must contain a mapping of counters")

    counters: dict[str, int] = {}
    for key, value in _flatten(raw):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Counter '{key}' in {path} is not an integer: {value!r}")
        if key in counters:
            raise ValueError(f"Counter '{key}' in {path} is defined more than once")
        counters[key] = value
    return InMemoryStats(counters)
