"""Message catalog for user-facing test output and diagnostics.

Templates use positional placeholders (``{0}``, ``{1}``, ...) so that a
localized catalog can reorder arguments freely.
"""

from __future__ import annotations

import string
from pathlib import Path

import yaml

DEFAULT_MESSAGES: dict[str, str] = {
    "tests.pass": "Job {0} test of type {1} passed: {2} [{3}]",
    "tests.fail": "Job {0} test of type {1} failed: {2} [{3}]",
    "tests.error.badonfail": "Job {0} test {1} has an invalid or missing onFail value",
    "tests.error.badtype": "Job {0} has a test with an invalid or missing type: {1}",
    "tests.stats.error.nooperator": "Job {0} statistic test {1} has no operator",
    "tests.stats.error.badoperator": "Job {0} statistic test {1} has an invalid operator: {2}",
    "tests.stats.error.nostatistic": "Job {0} statistic test {1} has no statistic",
    "tests.stats.error.novalue": "Job {0} statistic test {1} has no value",
    "options.error.badint": "Job {0} test {1} option {2} is not an integer: {3}",
    "options.error.unknown": "Job {0} test {1} has an unknown option: {2}",
}


class Messages:
    """Lookup of message templates by key."""

    def __init__(self, overrides: dict[str, str] | None = None):
        self._templates = {**DEFAULT_MESSAGES, **(overrides or {})}

    def get(self, key: str, *args: object) -> str:
        return self._templates[key].format(*args)

    def __contains__(self, key: str) -> bool:
        return key in self._templates


def _arg_count(template: str) -> int:
    """Number of positional arguments a template is formatted with."""
    indexes = [
        int(field)
        for _, field, _, _ in string.Formatter().parse(template)
        if field is not None and field.isdigit()
    ]
    return max(indexes, default=-1) + 1


def load_messages(path: Path) -> Messages:
    """Load a YAML file of ``key: template`` overrides on top of the defaults.

    Each override must format with the same arguments as the default it
    replaces, so a broken template is rejected here rather than mid-run.
    """
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Message file {path} must contain a mapping")

    overrides = {str(k): str(v) for k, v in raw.items()}

    unknown = sorted(k for k in overrides if k not in DEFAULT_MESSAGES)
    if unknown:
        raise ValueError(f"Message file {path} has unknown keys: {', '.join(unknown)}")

    for key, template in overrides.items():
        args = ["x"] * _arg_count(DEFAULT_MESSAGES[key])
        try:
            template.format(*args)
        except (IndexError, KeyError, ValueError) as e:
            raise ValueError(
                f"Message file {path} has an invalid template for '{key}': {e}"
            ) from e

    return Messages(overrides)


messages = Messages()
