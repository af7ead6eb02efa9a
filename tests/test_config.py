import json
from pathlib import Path

import pytest
import yaml

from cobmap.config import MapperConfig, load_config, sample_config


def test_load_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / "cobmap.yaml"
    path.write_text(yaml.safe_dump(sample_config()))
    cfg = load_config(path)
    assert cfg.format == "dot"
    assert cfg.font_name == "Bitstream Vera Sans"
    assert cfg.edge_font_size == 8


def test_load_json_config_with_defaults(tmp_path: Path) -> None:
    path = tmp_path / "cobmap.json"
    path.write_text(json.dumps({"format": "JSON", "dot": {"graph_name": "Layout"}}))
    cfg = load_config(path)
    assert cfg.format == "json"
    assert cfg.graph_name == "Layout"
    assert cfg.node_font_size == 10


def test_empty_yaml_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_config(path) == MapperConfig()


def test_unknown_format_is_rejected():
    with pytest.raises(ValueError, match="Unsupported format"):
        MapperConfig(format="svg")


def test_invalid_yaml_is_a_value_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("format: [dot\n")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_config(path)


def test_non_mapping_config_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- dot\n- json\n")
    with pytest.raises(ValueError, match="must contain a mapping"):
        load_config(path)
    nested = tmp_path / "nested.json"
    nested.write_text(json.dumps({"dot": "Courier"}))
    with pytest.raises(ValueError, match="'dot' must be a mapping"):
        load_config(nested)
