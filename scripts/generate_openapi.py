"""Export the store API OpenAPI document."""

from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from company_store.main import create_application


def main(destination: str = "docs/openapi.json") -> None:
    spec = create_application().openapi()
    target = Path(destination)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(spec, indent=2), encoding="utf-8")
    print(f"OpenAPI document written to {target}")


if __name__ == "__main__":
    main(*sys.argv[1:2])
