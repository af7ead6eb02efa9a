from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

SUPPORTED_FORMATS = {"text", "dot", "json"}


@dataclass
class MapperConfig:
    format: str = "text"
    graph_name: str = "G"
    font_name: str = "Bitstream Vera Sans"
    node_font_size: int = 10
    edge_font_size: int = 8

    def __post_init__(self) -> None:
        self.format = self.format.lower()
        if self.format not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format '{self.format}'. Choose from {sorted(SUPPORTED_FORMATS)}."
            )

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> MapperConfig:
        dot = payload.get("dot") or {}
        if not isinstance(dot, dict):
            raise ValueError("Config key 'dot' must be a mapping.")
        return MapperConfig(
            format=str(payload.get("format", "text")),
            graph_name=str(dot.get("graph_name", "G")),
            font_name=str(dot.get("font_name", "Bitstream Vera Sans")),
            node_font_size=int(dot.get("node_font_size", 10)),
            edge_font_size=int(dot.get("edge_font_size", 8)),
        )


def load_config(path: Path) -> MapperConfig:
    """Read a YAML or JSON config; malformed content raises ``ValueError``."""
    if path.suffix.lower() in {".yml", ".yaml"}:
        try:
            payload = yaml.safe_load(path.read_text())
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    else:
        payload = json.loads(path.read_text())
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValueError(f"Config {path} must contain a mapping, got {type(payload).__name__}.")
    return MapperConfig.from_mapping(payload)


def sample_config() -> dict[str, Any]:
    return {
        "format": "dot",
        "dot": {
            "graph_name": "G",
            "font_name": "Bitstream Vera Sans",
            "node_font_size": 10,
            "edge_font_size": 8,
        },
    }
