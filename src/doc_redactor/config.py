"""YAML/dict config loader for doc-redactor.

Supports loading from a YAML file or a plain dict (for embedding in a
larger host config).

Example YAML:

    doc_redactor:
      add_header: true
      header_text: CONFIDENTIAL DOCUMENT
      markers:
        email: "[EMAIL REMOVED]"
      skip_types:
        - phone
      allow_list:
        - support@example.com
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

from .redactor import DEFAULT_HEADER, Redactor, RedactorConfig
from .types import SensitiveType


def _parse_type(name: str) -> SensitiveType:
    try:
        return SensitiveType(name)
    except ValueError:
        valid = ", ".join(t.value for t in SensitiveType)
        raise ValueError(f"unknown sensitive type {name!r} (expected one of: {valid})") from None


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    # Support nested under "doc_redactor" key or flat
    if "doc_redactor" in data:
        data = data["doc_redactor"] or {}

    return {
        "add_header": bool(data.get("add_header", True)),
        "header_text": data.get("header_text", DEFAULT_HEADER),
        "markers": {
            _parse_type(name): str(marker)
            for name, marker in (data.get("markers") or {}).items()
        },
        "skip_types": {_parse_type(name) for name in data.get("skip_types") or []},
        "allow_list": set(data.get("allow_list") or []),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml  # optional dependency
    with open(path) as f:
        return load_config(yaml.safe_load(f))


def create_redactor(config: dict[str, Any] | None = None) -> Redactor:
    """Create a fully configured Redactor from a raw or normalized config dict."""
    # load_config is idempotent: SensitiveType members parse as themselves
    cfg = load_config(config)

    return Redactor(RedactorConfig(
        add_header=cfg["add_header"],
        header_text=cfg["header_text"],
        markers=cfg["markers"],
        skip_types=cfg["skip_types"],
        allow_list=cfg["allow_list"],
    ))
