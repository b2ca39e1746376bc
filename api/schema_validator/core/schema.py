import json
from pathlib import Path
from typing import Dict, Any, List

def load_schema(schema_path: str) -> Dict[str, Any]:
    p = Path(schema_path)
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)

def list_schemas(schemas_dir: str) -> List[str]:
    directory = Path(schemas_dir)
    if not directory.is_dir():
        return []
    return sorted(p.stem for p in directory.glob("*.json"))
