"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

Builds the application with default in-memory settings and serializes its
OpenAPI schema so that API clients and documentation tools can consume a
stable schema without running the server.

Usage:
    python -m todo_service.generate_openapi [OUTPUT_PATH]

Notes:
- The default output path is interfaces/openapi.json under the current directory.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from typing import Optional

from .main import create_app
from .settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = os.path.join("interfaces", "openapi.json")


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """Write the OpenAPI schema file and return the written file path."""
    # memory backend: no database file is created
    app = create_app(Settings(persistence_backend="memory"))
    schema = app.openapi()

    path = out_path or DEFAULT_OUTPUT
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    logger.info("Wrote OpenAPI schema to %s", path)
    return path


def main() -> None:
    """Console entry point."""
    out = generate_openapi(sys.argv[1] if len(sys.argv) > 1 else None)
    print(f"Wrote OpenAPI schema to: {out}")


if __name__ == "__main__":
    main()
