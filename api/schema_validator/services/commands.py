"""Entry points used by tests and scripts to validate API responses.

``validate_response`` works on anything that looks like an API response (a
mapping or an object with ``body``/``status``/``headers``, including
``httpx.Response``) and ``validate_data`` on the payload itself. Both raise
:class:`ResponseSchemaMismatchError` when the data does not conform, which
test runners report as a regular assertion failure.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from schema_validator.core.config import CONFIG, AppConfig
from schema_validator.core.errors import InvalidApiResponseError, ResponseSchemaMismatchError
from .mismatch import IssueStyles
from .orchestrator import ValidationResult, validate_schema
from .report import log_validation_result

logger = logging.getLogger(__name__)

WARNING_DISABLED = "⚠️ API SCHEMA VALIDATION DISABLED ⚠️"
RESPONSE_FIELDS = ("body", "status", "headers")


def extract_body(response: Any) -> Any:
    if isinstance(response, httpx.Response):
        if not response.content:
            return None
        content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        if content_type == "application/json" or content_type.endswith("+json"):
            return response.json()
        return response.text

    if isinstance(response, Mapping):
        if not any(name in response for name in RESPONSE_FIELDS):
            raise InvalidApiResponseError()
        return response.get("body")

    if response is None or not any(hasattr(response, name) for name in RESPONSE_FIELDS):
        raise InvalidApiResponseError()
    return getattr(response, "body", None)


def _skip_disabled(config: AppConfig) -> bool:
    if config.disable_schema_validation:
        logger.warning(
            "%s - The environment variable DISABLE_SCHEMA_VALIDATION has been set to true.",
            WARNING_DISABLED,
        )
        return True
    return False


def validate_data(
    data: Any,
    schema: Mapping[str, Any],
    path: Optional[Mapping[str, Any]] = None,
    *,
    config: Optional[AppConfig] = None,
) -> Optional[ValidationResult]:
    config = config or CONFIG
    if _skip_disabled(config):
        return None

    styles = IssueStyles.from_config(config)
    result = validate_schema(data, schema, path, styles=styles)
    log_validation_result(result, max_errors_to_show=config.max_errors_to_show, styles=styles)
    if not result.valid:
        raise ResponseSchemaMismatchError(result)
    return result


def validate_response(
    response: Any,
    schema: Mapping[str, Any],
    path: Optional[Mapping[str, Any]] = None,
    *,
    config: Optional[AppConfig] = None,
) -> Any:
    config = config or CONFIG
    if _skip_disabled(config):
        return response

    try:
        data = extract_body(response)
    except InvalidApiResponseError:
        logger.error("The object passed for validation is not an API response: %r", response)
        raise
    validate_data(data, schema, path, config=config)
    return response
