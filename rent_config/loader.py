"""
Configuration Loader (``rent_config.loader``).

Responsibility
--------------
Loads the YAML configuration file and parses it into the typed
``rent_config.schema`` dataclasses.  Callers obtain settings through
``rent_config.get_active_config()``.

Invariants enforced
-------------------
* Unknown keys raise ``ValueError``; a typo never silently falls back to
  a default.
* Every parsed object is a frozen dataclass from ``schema.py``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or bad values  -> ``ValueError``.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any

import yaml

from rent_config.schema import LedgerSection, RentLedgerSettings, ReportingSection


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data


def _parse_section(cls: type, data: dict[str, Any] | None, where: str) -> Any:
    data = data or {}
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown {where} setting(s): {', '.join(unknown)}")
    return cls(**data)


def parse_settings(data: dict[str, Any]) -> RentLedgerSettings:
    """Build ``RentLedgerSettings`` from a parsed YAML mapping."""
    top_level = {"database_url", "log_level", "ledger", "reporting"}
    unknown = sorted(set(data) - top_level)
    if unknown:
        raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")

    kwargs: dict[str, Any] = {
        "ledger": _parse_section(LedgerSection, data.get("ledger"), "ledger"),
        "reporting": _parse_section(ReportingSection, data.get("reporting"), "reporting"),
    }
    if "database_url" in data:
        kwargs["database_url"] = str(data["database_url"])
    if "log_level" in data:
        kwargs["log_level"] = str(data["log_level"]).upper()
    return RentLedgerSettings(**kwargs)


def load_settings(path: Path | str) -> RentLedgerSettings:
    """Load and parse a settings file."""
    return parse_settings(load_yaml_file(Path(path)))
