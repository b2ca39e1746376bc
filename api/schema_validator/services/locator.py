"""Locates the response schema of one endpoint inside a Swagger or OpenAPI document."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from schema_validator.core.errors import (
    InvalidSchemaError,
    MissingParameterError,
    ResponseDefinitionNotFoundError,
    SchemaDefinitionNotFoundError,
)

logger = logging.getLogger(__name__)

DEFAULT_METHOD = "GET"
DEFAULT_STATUS = 200


class SchemaDialect(Enum):
    PLAIN = "plain"
    SWAGGER = "swagger"
    OPENAPI = "openapi"

    @property
    def schema_location(self) -> Tuple[str, ...]:
        if self is SchemaDialect.SWAGGER:
            return ("schema",)
        if self is SchemaDialect.OPENAPI:
            return ("content", "application/json", "schema")
        return ()

    @property
    def shared_table_key(self) -> Optional[str]:
        if self is SchemaDialect.SWAGGER:
            return "definitions"
        if self is SchemaDialect.OPENAPI:
            return "components"
        return None


def classify_schema(schema: Mapping[str, Any]) -> SchemaDialect:
    if not isinstance(schema, Mapping):
        return SchemaDialect.PLAIN
    if schema.get("swagger"):
        return SchemaDialect.SWAGGER
    if schema.get("openapi"):
        return SchemaDialect.OPENAPI
    return SchemaDialect.PLAIN


@dataclass(frozen=True)
class PathDescriptor:
    endpoint: Optional[str] = None
    method: Optional[str] = None
    status: Optional[Union[int, str]] = None

    @staticmethod
    def from_value(value: Union["PathDescriptor", Mapping[str, Any], None]) -> "PathDescriptor":
        if value is None:
            return PathDescriptor()
        if isinstance(value, PathDescriptor):
            return value
        if not isinstance(value, Mapping):
            raise TypeError(f"Unsupported path descriptor: {value!r}")
        return PathDescriptor(
            endpoint=value.get("endpoint"),
            method=value.get("method"),
            status=value.get("status"),
        )

    def with_defaults(self) -> "PathDescriptor":
        return replace(
            self,
            method=self.method or DEFAULT_METHOD,
            status=self.status if self.status is not None else DEFAULT_STATUS,
        )


def _lookup(container: Any, keys: Tuple[Any, ...]) -> Any:
    current = container
    for key in keys:
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    return current


def _find_response(responses: Any, status: Union[int, str]) -> Tuple[Any, str]:
    # YAML loaders may produce integer status keys
    candidates = [str(status)]
    if str(status).isdigit():
        candidates.append(int(status))
    for key in candidates:
        response = _lookup(responses, (key,))
        if response is not None:
            return response, str(key)
    return _lookup(responses, ("default",)), "default"


def locate_schema(
    document: Mapping[str, Any],
    path: Union[PathDescriptor, Mapping[str, Any]],
    dialect: Optional[SchemaDialect] = None,
) -> Dict[str, Any]:
    """Build a self-contained schema for ``path`` out of a Swagger/OpenAPI document.

    The response schema found at the dialect-specific location is merged with
    the document's shared table (``definitions`` or ``components``) so that
    internal ``$ref`` pointers keep resolving. Falls back to the ``default``
    response when the requested status is not declared.
    """

    descriptor = PathDescriptor.from_value(path)
    missing = [
        name
        for name in ("endpoint", "method", "status")
        if getattr(descriptor, name) in (None, "")
    ]
    if missing:
        raise MissingParameterError(missing)

    dialect = dialect or classify_schema(document)
    if dialect is SchemaDialect.PLAIN:
        raise ValueError("Only Swagger and OpenAPI documents can be searched for a response schema")

    endpoint = descriptor.endpoint
    method = str(descriptor.method).lower()
    status = descriptor.status

    responses = _lookup(document, ("paths", endpoint, method, "responses"))
    response, status_key = _find_response(responses, status)
    if response is None:
        raise ResponseDefinitionNotFoundError(
            [
                f"paths.{endpoint}.{method}.responses.{status}",
                f"paths.{endpoint}.{method}.responses.default",
            ]
        )

    fragment = _lookup(response, dialect.schema_location)
    if fragment is None:
        raise SchemaDefinitionNotFoundError(
            f"paths.{endpoint}.{method}.responses.{status_key}." + ".".join(dialect.schema_location)
        )

    if isinstance(fragment, bool):
        # boolean schemas cannot be merged, keep them as a subschema
        fragment = {"allOf": [fragment]}
    elif not isinstance(fragment, Mapping):
        raise InvalidSchemaError(
            f"The schema at paths.{endpoint}.{method}.responses.{status_key}."
            + ".".join(dialect.schema_location)
            + f" must be an object or a boolean, got {type(fragment).__name__}"
        )

    shared_key = dialect.shared_table_key
    logger.debug(
        "Resolved %s schema for %s %s (%s) using response '%s'",
        dialect.value, method.upper(), endpoint, status, status_key,
    )
    return {
        "id": f"{uuid.uuid4().hex}:{endpoint}:{method}:{status}",
        **fragment,
        shared_key: document.get(shared_key) or {},
    }
