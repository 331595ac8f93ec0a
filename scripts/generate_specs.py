#!/usr/bin/env python3
"""
Generate the LayoutConfig JSON Schema, its YAML variant, and OpenAPI for the
card endpoint.

Outputs under src/specs/:
 - schemas/layout.config.schema.json (and .yaml)
 - openapi.yaml and openapi.json
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

try:
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    print("PyYAML is required: pip install pyyaml", file=sys.stderr)
    raise


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SPECS = SRC / "specs"
SCHEMAS_DIR = SPECS / "schemas"

sys.path.insert(0, str(ROOT))

from src.card.params import (  # noqa: E402
    COLOR_DEFAULTS,
    DEFAULT_FONT_FAMILY,
    FALLBACK_CANVAS_SIZE,
    LABEL_DEFAULTS,
    NUMERIC_DEFAULTS,
    VALUE_FALLBACKS,
)
from src.specs.functions.generate_card_spec import LayoutConfig  # noqa: E402


def write_json_yaml(obj: dict, json_path: Path) -> None:
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)
    yaml_path = json_path.with_suffix(".yaml")
    with yaml_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def _param(name: str, schema: dict, description: str | None = None) -> dict:
    param = {"in": "query", "name": name, "required": False, "schema": schema}
    if description:
        param["description"] = description
    return param


def query_parameters() -> list[dict]:
    params = [
        _param("bg", {"type": "string"}, "Background image URL or path; bundled image when absent"),
        _param("w", {"type": "number", "default": FALLBACK_CANVAS_SIZE[0]}, "Canvas width; background width when absent"),
        _param("h", {"type": "number", "default": FALLBACK_CANVAS_SIZE[1]}, "Canvas height; background height when absent"),
    ]
    params += [_param(k, {"type": "number", "default": v}) for k, v in NUMERIC_DEFAULTS.items()]
    params += [_param(k, {"type": "string", "default": v}, "Hex color, '#' optional") for k, v in COLOR_DEFAULTS.items()]
    params.append(_param("font", {"type": "string", "default": DEFAULT_FONT_FAMILY}))
    for index, label in enumerate(LABEL_DEFAULTS):
        params.append(_param(f"l{index + 1}", {"type": "string", "default": label}))
    for primary, alias, literal in VALUE_FALLBACKS:
        params.append(_param(primary, {"type": "string", "default": literal}, f"Falls back to '{alias}'"))
        params.append(_param(alias, {"type": "string"}, f"Used when '{primary}' is absent"))
    params += [
        _param("circleUrl", {"type": "string"}, "Image clipped into the circle"),
        _param("squareUrl", {"type": "string"}, "Image stretched into the square"),
        _param("download", {"type": "string", "enum": ["0", "1"]}, "'1' serves the PNG as an attachment"),
    ]
    return params


def build_openapi() -> dict:
    spec = {
        "openapi": "3.0.3",
        "info": {
            "title": "Stat Card Functions API",
            "version": "0.1.0",
            "description": "HTTP endpoint rendering parameterized stat card PNGs.",
        },
        "servers": [
            {"url": "http://localhost:7071/api", "description": "Local Functions host"}
        ],
        "paths": {
            "/generate": {
                "get": {
                    "summary": "Render a stat card",
                    "operationId": "generateCard",
                    "parameters": query_parameters(),
                    "responses": {
                        "200": {
                            "description": "Rendered card",
                            "content": {
                                "image/png": {"schema": {"type": "string", "format": "binary"}}
                            },
                        },
                        "500": {
                            "description": "Rendering failed",
                            "content": {
                                "text/plain": {"schema": {"type": "string"}}
                            },
                        },
                    },
                }
            }
        },
        "components": {"schemas": {"LayoutConfig": LayoutConfig.model_json_schema()}},
    }
    return spec


def main() -> None:
    write_json_yaml(LayoutConfig.model_json_schema(), SCHEMAS_DIR / "layout.config.schema.json")
    write_json_yaml(build_openapi(), SPECS / "openapi.json")
    print("Specs generated under src/specs/")


if __name__ == "__main__":
    main()
