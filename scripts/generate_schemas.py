"""Generate JSON schemas from Pydantic models and save to schemas/ directory."""

import json
from pathlib import Path

from migraflow.api import json_schemas


def _file_name(model_name: str) -> str:
    """``SankeyProjection`` -> ``sankey_projection.schema.json``."""
    snake = "".join(f"_{ch.lower()}" if ch.isupper() else ch for ch in model_name).lstrip("_")
    return f"{snake}.schema.json"


def generate_schemas(schemas_dir: Path = Path(__file__).parent.parent / "schemas") -> list[Path]:
    """Write one schema file per public record."""
    schemas_dir.mkdir(exist_ok=True)

    written = []
    for model_name, schema in sorted(json_schemas().items()):
        schema_path = schemas_dir / _file_name(model_name)
        with open(schema_path, 'w', encoding='utf-8') as f:
            json.dump(schema, f, indent=2, ensure_ascii=False)
        print(f"Generated: {schema_path}")
        written.append(schema_path)

    print("\nSchema generation complete!")
    return written


if __name__ == "__main__":
    generate_schemas()
