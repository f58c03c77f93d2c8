"""Export JSON schemas for the chat API models."""

import json
from pathlib import Path

from backend.app.models import ChatRequest, ChatResponse, Itinerary, TripChecklist

SCHEMAS = {
    "ChatRequest": ChatRequest,
    "ChatResponse": ChatResponse,
    "TripChecklist": TripChecklist,
    "Itinerary": Itinerary,
}


def main(schemas_dir: Path = Path("docs/schemas")) -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for name, model in SCHEMAS.items():
        schema = model.model_json_schema(by_alias=True)
        path = schemas_dir / f"{name}.schema.json"
        with open(path, "w") as f:
            json.dump(schema, f, indent=2)
        print(f"Exported {name} schema to {path}")


if __name__ == "__main__":
    main()
