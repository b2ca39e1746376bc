from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from schema_validator.core.errors import MissingSchemaError
from schema_validator.core.validator import SchemaValidator
from .locator import PathDescriptor, SchemaDialect, classify_schema, locate_schema
from .mismatch import IssueStyles, ProjectedIssue, project_mismatches

logger = logging.getLogger(__name__)

DEFAULT_ENGINE = SchemaValidator()


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: Optional[Tuple[Dict[str, Any], ...]] = None
    mismatch_view: Any = None
    issues: Tuple[ProjectedIssue, ...] = ()
    issue_styles: IssueStyles = field(default_factory=IssueStyles.from_config)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors) if self.errors is not None else None,
            "dataMismatches": self.mismatch_view,
            "issueStyles": self.issue_styles.to_payload(),
        }


def resolve_schema(
    schema: Mapping[str, Any],
    path: Union[PathDescriptor, Mapping[str, Any], None] = None,
) -> Mapping[str, Any]:
    """Return the schema the data is validated against.

    API documents are narrowed down to the response schema of ``path``;
    anything else is taken as a plain JSON Schema and ``path`` is ignored.
    """

    if schema is None:
        raise MissingSchemaError()
    if path is None:
        return schema

    dialect = classify_schema(schema)
    if dialect is SchemaDialect.PLAIN:
        return schema

    descriptor = PathDescriptor.from_value(path).with_defaults()
    return locate_schema(schema, descriptor, dialect)


def validate_schema(
    data: Any,
    schema: Mapping[str, Any],
    path: Union[PathDescriptor, Mapping[str, Any], None] = None,
    *,
    engine: Optional[SchemaValidator] = None,
    styles: Optional[IssueStyles] = None,
) -> ValidationResult:
    engine = engine or DEFAULT_ENGINE
    styles = styles or IssueStyles.from_config()

    resolved = resolve_schema(schema, path)
    outcome = engine.compile_and_validate(resolved, data)
    if outcome.valid:
        return ValidationResult(valid=True, issue_styles=styles)

    errors = tuple(outcome.errors or ())
    logger.debug("Schema validation produced %d errors", len(errors))
    projection = project_mismatches(data, errors, styles)
    return ValidationResult(
        valid=False,
        errors=errors,
        mismatch_view=projection.view,
        issues=projection.issues,
        issue_styles=styles,
    )
