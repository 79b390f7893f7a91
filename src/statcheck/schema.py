"""Generate JSON Schema and docs for the plan YAML format."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from statcheck.config import PlanConfig


class StatisticTestSpec(BaseModel):
    """Shape of a ``stats`` test entry, for editor tooling only.

    Plans are not parsed through this model: test entries are bound by the
    tests themselves so that problems surface as diagnostics.
    """

    model_config = ConfigDict(extra="forbid")
    type: Literal["stats"]
    statistic: str = Field(description="Key of the counter to read")
    name: str | None = Field(None, description="Display name for reports")
    operator: Literal["<", ">", "<=", ">=", "==", "!="]
    value: int = Field(description="Threshold compared against the counter")
    onFail: Literal["warn", "error", "info", "ignore"]


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _collect_refs(obj: object) -> set[str]:
    """Return all ``$defs`` names referenced via ``$ref`` inside *obj*."""
    refs: set[str] = set()
    if isinstance(obj, dict):
        if "$ref" in obj:
            ref = obj["$ref"]
            if ref.startswith("#/$defs/"):
                refs.add(ref.removeprefix("#/$defs/"))
        for v in obj.values():
            refs |= _collect_refs(v)
    elif isinstance(obj, list):
        for v in obj:
            refs |= _collect_refs(v)
    return refs


def _order_defs(defs: dict) -> dict:
    """Topologically sort ``$defs`` so referenced types precede referencing types."""
    ordered: dict[str, dict] = {}
    visited: set[str] = set()

    def _visit(name: str) -> None:
        if name in visited or name not in defs:
            return
        visited.add(name)
        for dep in _collect_refs(defs[name]):
            _visit(dep)
        ordered[name] = defs[name]

    for name in defs:
        _visit(name)
    return ordered


def generate_json_schema() -> dict:
    schema = PlanConfig.model_json_schema()
    defs = schema.setdefault("$defs", {})
    defs["StatisticTestSpec"] = StatisticTestSpec.model_json_schema()
    defs["JobConfig"]["properties"]["tests"]["items"] = {
        "$ref": "#/$defs/StatisticTestSpec"
    }
    schema["$defs"] = _order_defs(defs)
    return schema


def write_json_schema(path: Path) -> None:
    _ensure_parent(path)
    schema = generate_json_schema()
    path.write_text(json.dumps(schema, indent=2) + "\n")


def generate_schema_doc() -> str:
    schema = generate_json_schema()
    defs = schema.get("$defs", {})
    test_props = defs.get("StatisticTestSpec", {}).get("properties", {})
    required = set(defs.get("StatisticTestSpec", {}).get("required", []))

    lines: list[str] = []
    lines.append("# statcheck plan schema")
    lines.append("")
    lines.append("This doc is generated from the Pydantic models.")
    lines.append("")
    lines.append("## Top-level keys")
    lines.append("- `stats`: string (optional) - counter snapshot file (YAML or JSON)")
    lines.append("- `messages`: string (optional) - message catalog overrides (YAML)")
    lines.append("- `jobs`: array (required) - list of job definitions")
    lines.append("")
    lines.append("## Job")
    job_props = defs.get("JobConfig", {}).get("properties", {})
    lines.append(f"- fields: {', '.join(job_props)}")
    lines.append("")
    lines.append("## Tests")
    lines.append("### `stats`")
    for field_name, prop in test_props.items():
        kind = "required" if field_name in required else "optional"
        choices = prop.get("enum")
        if choices is None and "const" in prop:
            choices = [prop["const"]]
        detail = f" - one of: {', '.join(str(c) for c in choices)}" if choices else ""
        lines.append(f"- `{field_name}` ({kind}){detail}")

    lines.append("")
    return "\n".join(lines)


def write_schema_doc(path: Path) -> None:
    _ensure_parent(path)
    path.write_text(generate_schema_doc())
