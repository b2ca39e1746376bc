import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from jsonschema import Draft7Validator, FormatChecker, ValidationError
from jsonschema.exceptions import SchemaError
from jsonschema.validators import extend
from referencing.exceptions import Unresolvable

from .errors import InvalidSchemaError

_draft7_type = Draft7Validator.VALIDATORS["type"]


def _nullable_type(validator, types, instance, schema):
    # OpenAPI 3.0 spells "or null" as a sibling keyword instead of a type list
    if instance is None and schema.get("nullable") is True:
        return
    yield from _draft7_type(validator, types, instance, schema)


OpenApiDraft7Validator = extend(Draft7Validator, {"type": _nullable_type})


def json_pointer(parts: Iterable[Any]) -> str:
    return "".join(
        "/" + str(part).replace("~", "~0").replace("/", "~1") for part in parts
    )


@dataclass(frozen=True)
class EngineOutcome:
    valid: bool
    errors: Optional[List[Dict[str, Any]]]


class SchemaValidator:
    """Compiles a schema and validates data against it, collecting every error.

    A new validator is built for each call, nothing is registered between
    calls, so two schemas that share an identifier never see each other.
    """

    def __init__(
        self,
        validator_cls=OpenApiDraft7Validator,
        format_checker: Optional[FormatChecker] = None,
    ):
        self.validator_cls = validator_cls
        # every registered format, Draft 7 alone leaves out uuid
        self.format_checker = format_checker or FormatChecker()

    def compile(self, schema: Dict[str, Any]):
        try:
            self.validator_cls.check_schema(schema)
        except SchemaError as exc:
            raise InvalidSchemaError(f"The provided schema is not valid: {exc.message}") from exc
        return self.validator_cls(schema, format_checker=self.format_checker)

    def validate(self, schema: Dict[str, Any], data: Any) -> List[Dict[str, Any]]:
        validator = self.compile(schema)
        try:
            errors = list(validator.iter_errors(data))
        except Unresolvable as exc:
            raise InvalidSchemaError(f"Unable to resolve a reference in the schema: {exc}") from exc
        return [self._to_record(e) for e in errors]

    def compile_and_validate(self, schema: Dict[str, Any], data: Any) -> EngineOutcome:
        errors = self.validate(schema, data)
        if not errors:
            return EngineOutcome(valid=True, errors=None)
        return EngineOutcome(valid=False, errors=errors)

    def _to_record(self, error: ValidationError) -> Dict[str, Any]:
        return {
            "instancePath": json_pointer(error.absolute_path),
            "schemaPath": "#" + json_pointer(error.absolute_schema_path),
            "keyword": error.validator,
            "message": error.message,
            "params": self._extract_params(error),
        }

    def _extract_params(self, error: ValidationError) -> Dict[str, Any]:
        if error.validator != "required":
            return {error.validator: error.validator_value}

        if isinstance(error.instance, dict) and isinstance(error.validator_value, list):
            for name in error.validator_value:
                if name not in error.instance and error.message == f"{name!r} is a required property":
                    return {"missingProperty": name}
        match = re.search(r"'([^']+)' is a required property", error.message or "")
        if match:
            return {"missingProperty": match.group(1)}
        return {"missingProperty": ""}
