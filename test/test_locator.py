from typing import Any, Dict

import pytest

from schema_validator.core.errors import (
    InvalidSchemaError,
    MissingParameterError,
    ResponseDefinitionNotFoundError,
    SchemaDefinitionNotFoundError,
)
from schema_validator.services.locator import (
    PathDescriptor,
    SchemaDialect,
    classify_schema,
    locate_schema,
)


def test_classify_schema_detects_dialects(openapi_document, swagger_document) -> None:
    assert classify_schema(openapi_document) is SchemaDialect.OPENAPI
    assert classify_schema(swagger_document) is SchemaDialect.SWAGGER
    assert classify_schema({"type": "object"}) is SchemaDialect.PLAIN


def test_openapi_schema_carries_components(openapi_document) -> None:
    resolved = locate_schema(openapi_document, {"endpoint": "/users/{id}", "method": "GET", "status": 200})

    assert resolved["$ref"] == "#/components/schemas/User"
    assert resolved["components"] == openapi_document["components"]
    assert "definitions" not in resolved


def test_swagger_schema_carries_definitions(swagger_document) -> None:
    resolved = locate_schema(swagger_document, {"endpoint": "/users", "method": "get", "status": 200})

    assert resolved["type"] == "array"
    assert resolved["items"] == {"$ref": "#/definitions/User"}
    assert resolved["definitions"] == swagger_document["definitions"]
    assert "components" not in resolved


def test_identifier_is_unique_per_call(api_document) -> None:
    path = {"endpoint": "/users/{id}", "method": "get", "status": 200}

    first = locate_schema(api_document, path)
    second = locate_schema(api_document, path)

    assert first["id"] != second["id"]
    assert first["id"].endswith(":/users/{id}:get:200")


def test_status_can_be_given_as_string(api_document) -> None:
    resolved = locate_schema(api_document, {"endpoint": "/users/{id}", "method": "get", "status": "200"})
    assert "$ref" in resolved


def test_missing_status_falls_back_to_default(api_document) -> None:
    resolved = locate_schema(api_document, {"endpoint": "/users", "method": "post", "status": 201})
    assert resolved["$ref"].endswith("/User")


def test_unknown_response_lists_attempted_paths(api_document) -> None:
    with pytest.raises(ResponseDefinitionNotFoundError) as exc_info:
        locate_schema(api_document, {"endpoint": "/users/{id}", "method": "get", "status": 500})

    assert exc_info.value.attempted_paths == (
        "paths./users/{id}.get.responses.500",
        "paths./users/{id}.get.responses.default",
    )
    assert "paths./users/{id}.get.responses.default" in str(exc_info.value)


def test_unknown_endpoint_is_reported(api_document) -> None:
    with pytest.raises(ResponseDefinitionNotFoundError):
        locate_schema(api_document, {"endpoint": "/orders", "method": "get", "status": 200})


def test_response_without_schema_names_attempted_path(openapi_document, swagger_document) -> None:
    with pytest.raises(SchemaDefinitionNotFoundError) as exc_info:
        locate_schema(openapi_document, {"endpoint": "/users/{id}", "method": "get", "status": 404})
    assert exc_info.value.attempted_path == (
        "paths./users/{id}.get.responses.404.content.application/json.schema"
    )

    with pytest.raises(SchemaDefinitionNotFoundError) as exc_info:
        locate_schema(swagger_document, {"endpoint": "/users/{id}", "method": "get", "status": 404})
    assert exc_info.value.attempted_path == "paths./users/{id}.get.responses.404.schema"


@pytest.mark.parametrize(
    "path, missing",
    [
        ({"method": "get", "status": 200}, ("endpoint",)),
        ({"endpoint": "", "method": "get", "status": 200}, ("endpoint",)),
        ({"endpoint": "/users"}, ("method", "status")),
    ],
)
def test_missing_parameters_are_rejected(api_document, path: Dict[str, Any], missing) -> None:
    with pytest.raises(MissingParameterError) as exc_info:
        locate_schema(api_document, path)
    assert exc_info.value.missing == missing


def test_path_descriptor_defaults_leave_the_source_untouched() -> None:
    source = {"endpoint": "/users"}
    descriptor = PathDescriptor.from_value(source)

    completed = descriptor.with_defaults()

    assert completed == PathDescriptor(endpoint="/users", method="GET", status=200)
    assert descriptor.method is None
    assert source == {"endpoint": "/users"}


def test_fragment_keys_win_over_generated_identifier() -> None:
    document = {
        "swagger": "2.0",
        "paths": {"/x": {"get": {"responses": {"200": {"schema": {"id": "fixed", "type": "string"}}}}}},
    }

    resolved = locate_schema(document, {"endpoint": "/x", "method": "get", "status": 200})

    assert resolved["id"] == "fixed"
    assert resolved["definitions"] == {}


@pytest.mark.parametrize("fragment", [True, False])
def test_boolean_fragments_are_kept_as_subschemas(fragment: bool) -> None:
    document = {"swagger": "2.0", "paths": {"/x": {"get": {"responses": {"200": {"schema": fragment}}}}}}

    resolved = locate_schema(document, {"endpoint": "/x", "method": "get", "status": 200})

    assert resolved["allOf"] == [fragment]


def test_non_schema_fragment_is_rejected() -> None:
    document = {"swagger": "2.0", "paths": {"/x": {"get": {"responses": {"200": {"schema": "User"}}}}}}

    with pytest.raises(InvalidSchemaError) as exc_info:
        locate_schema(document, {"endpoint": "/x", "method": "get", "status": 200})
    assert "paths./x.get.responses.200.schema" in str(exc_info.value)
