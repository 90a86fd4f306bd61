"""
Write the OpenAPI schema of the TODO service to interfaces/openapi.json.

Clients and documentation tools can consume the schema without running the
server.

Usage:
    python -m src.todos_api.generate_openapi
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, List

from .main import app, openapi_tags


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Add any tag from openapi_tags missing in the schema; existing tag
    definitions are kept.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


def _output_path() -> str:
    # <container_root>/interfaces/openapi.json, container_root being the parent of src/
    src_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(os.path.dirname(src_dir), "interfaces", "openapi.json")


# PUBLIC_INTERFACE
def generate_openapi(out_path: str = "") -> str:
    """Write the OpenAPI schema and return the path of the written file."""
    schema = app.openapi()
    _ensure_tags(schema)

    out_path = out_path or _output_path()
    os.makedirs(os.path.dirname(out_path), exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    return out_path


def main() -> None:
    print(f"Wrote OpenAPI schema to: {generate_openapi()}")


if __name__ == "__main__":
    main()
