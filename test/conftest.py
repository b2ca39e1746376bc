import json
from pathlib import Path
from typing import Any, Dict

import pytest

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


def _load_fixture(name: str) -> Dict[str, Any]:
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


@pytest.fixture
def openapi_document() -> Dict[str, Any]:
    return _load_fixture("openapi-users.json")


@pytest.fixture
def swagger_document() -> Dict[str, Any]:
    return _load_fixture("swagger-users.json")


@pytest.fixture(params=["openapi-users.json", "swagger-users.json"], ids=["openapi", "swagger"])
def api_document(request) -> Dict[str, Any]:
    return _load_fixture(request.param)
