import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any

from fastapi import FastAPI, Body, HTTPException
from fastapi.responses import JSONResponse

from .core.config import CONFIG
from .core.errors import (
    InvalidApiResponseError,
    InvalidSchemaError,
    MissingParameterError,
    MissingSchemaError,
    ResponseDefinitionNotFoundError,
    ResponseSchemaMismatchError,
    SchemaDefinitionNotFoundError,
)
from .core.schema import load_schema, list_schemas
from .services.commands import extract_body, validate_data

app = FastAPI(title="API Schema Validator", version=CONFIG.version)


def _load_named_schema(schema_name: str) -> Dict[str, Any]:
    safe_name = Path(schema_name).stem
    schema_path = Path(CONFIG.schemas_dir) / f"{safe_name}.json"

    if not schema_path.exists():
        raise HTTPException(status_code=404, detail=f"Schema '{safe_name}' not found")

    try:
        return load_schema(str(schema_path))
    except json.JSONDecodeError as exc:
        logging.exception("Invalid JSON content in %s", schema_path)
        raise HTTPException(status_code=500, detail="Invalid JSON content") from exc


def _schema_from_payload(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    schema = payload.get("schema")
    schema_name = payload.get("schema_name")

    if schema is None and schema_name:
        if not isinstance(schema_name, str):
            raise HTTPException(status_code=400, detail="'schema_name' must be a string")
        return _load_named_schema(schema_name)

    if schema is not None and not isinstance(schema, dict):
        raise HTTPException(status_code=400, detail="'schema' must be an object")
    return schema


def _path_from_payload(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    path = payload.get("path")
    if path is not None and not isinstance(path, dict):
        raise HTTPException(status_code=400, detail="'path' must be an object")
    return path


def _run_validation(data: Any, schema: Optional[Dict[str, Any]], path: Optional[Dict[str, Any]]):
    try:
        result = validate_data(data, schema, path)
    except ResponseSchemaMismatchError as exc:
        content = {"ok": False, **exc.result.to_payload()}
        if not CONFIG.enable_mismatches_on_ui:
            content.pop("dataMismatches")
        return JSONResponse(status_code=422, content=content)
    except (MissingSchemaError, MissingParameterError, InvalidSchemaError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (ResponseDefinitionNotFoundError, SchemaDefinitionNotFoundError) as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:  # pragma: no cover - defensive safeguard
        logging.exception("Unhandled error during schema validation")
        raise HTTPException(status_code=500, detail="Internal validation error") from exc

    if result is None:
        return {"ok": True, "skipped": True}

    return {"ok": True, **result.to_payload()}


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


@app.get("/schemas")
def get_schemas():
    return {"schemas": list_schemas(CONFIG.schemas_dir)}


@app.post("/validate")
def validate(payload: Dict[str, Any] = Body(...)):
    if "data" not in payload:
        raise HTTPException(status_code=400, detail="Provide the 'data' to validate")

    schema = _schema_from_payload(payload)
    path = _path_from_payload(payload)
    return _run_validation(payload["data"], schema, path)


@app.post("/validate/response")
def validate_api_response(payload: Dict[str, Any] = Body(...)):
    response = payload.get("response")
    if not isinstance(response, dict):
        raise HTTPException(status_code=400, detail="Provide the API 'response' object")

    try:
        data = extract_body(response)
    except InvalidApiResponseError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    schema = _schema_from_payload(payload)
    path = _path_from_payload(payload)
    if path is not None and path.get("status") is None and response.get("status") is not None:
        path = {**path, "status": response["status"]}
    return _run_validation(data, schema, path)
