"""Request file loading for harness-layout.

Layout requests are plain mappings and can be written either as JSON (the
wire format of the HTTP service) or as YAML (handier for hand-written
coordinate systems and test scenes).  Both load into the same dict shape:

    vehicleSignature: demo-sedan
    coordinateSystem:
      zones:
        engine: {center: [1.8, 0, 0.3], size: [0.8, 1.6, 0.6]}
    nodes:
      - id: battery
        zone: engine
    edges:
      - id: w1
        from: battery
        to: fuse_box
        properties: {wireColor: red, wireGauge: 6mm²}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml


def parse_yaml(yaml_str: str) -> dict:
    """Parse a YAML (or JSON, which is valid YAML) string into a request dict."""
    data = yaml.safe_load(yaml_str)
    if not data:
        raise ValueError("Empty layout request")
    if not isinstance(data, dict):
        raise ValueError(f"Layout request must be a mapping, got {type(data).__name__}")
    return data


def parse_file(path: str) -> dict:
    """Load a request from a ``.json``, ``.yaml`` or ``.yml`` file."""
    file_path = Path(path)
    content = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(f"Layout request must be a mapping, got {type(data).__name__}")
        return data
    return parse_yaml(content)


def dump_yaml(data: Any) -> str:
    """Serialize a response or request back to YAML, keeping key order."""
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
