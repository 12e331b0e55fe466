#!/usr/bin/env python
"""Export the OpenAPI schema of the thunderdome API to a JSON file."""

import argparse
import json
import sys
from pathlib import Path

# Add the src directory to the path so we can import the app without installing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from thunderdome.entrypoints.api.app import app


def main() -> None:
    """Export OpenAPI schema to JSON file."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path(__file__).parent.parent / "openapi.json",
        help="Where to write the schema (default: openapi.json at the repo root)",
    )
    args = parser.parse_args()

    schema = app.openapi()
    with open(args.output, "w") as f:
        json.dump(schema, f, indent=2)

    print(f"OpenAPI schema exported to {args.output}")


if __name__ == "__main__":
    main()
