import json
import logging
from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Sequence, Tuple

from .mismatch import IssueStyles, classify_error, replace_icons

logger = logging.getLogger(__name__)

ICON_PASSED = "✔️"
ICON_FAILED = "❌"
ICON_MORE_ERRORS = "➕"

@dataclass
class ValidationReport:
    passed: bool
    total_errors: int
    shown_errors: List[Dict[str, Any]]
    remaining_errors: List[Dict[str, Any]]
    data_mismatches: Any = None

def split_errors(
    errors: Sequence[Dict[str, Any]], max_errors_to_show: int
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    # one extra error still fits, a "more errors" line would take its place anyway
    if len(errors) > max_errors_to_show + 1:
        return list(errors[:max_errors_to_show]), list(errors[max_errors_to_show:])
    return list(errors), []

def log_validation_result(
    result,
    *,
    max_errors_to_show: int = 10,
    styles: Optional[IssueStyles] = None,
) -> ValidationReport:
    if result.valid:
        logger.info("%s PASSED - THE RESPONSE BODY IS VALID AGAINST THE SCHEMA.", ICON_PASSED)
        return ValidationReport(passed=True, total_errors=0, shown_errors=[], remaining_errors=[])

    styles = styles or result.issue_styles
    errors = list(result.errors or [])
    data_mismatches = result.mismatch_view
    if styles != result.issue_styles:
        data_mismatches = replace_icons(data_mismatches, result.issue_styles, styles)

    logger.error(
        "%s FAILED - THE RESPONSE BODY IS NOT VALID AGAINST THE SCHEMA (Number of schema errors: %d).",
        ICON_FAILED,
        len(errors),
        extra={
            "number_of_schema_errors": len(errors),
            "schema_errors": errors,
            "data_mismatches": data_mismatches,
        },
    )

    shown, remaining = split_errors(errors, max_errors_to_show)
    for error in shown:
        kind = classify_error(error)
        logger.warning(
            "%s %s",
            styles.icon_for(kind),
            json.dumps(error, ensure_ascii=False, default=str),
            extra={"schema_error": error, "issue_color": styles.color_for(kind)},
        )
    if remaining:
        logger.warning(
            "%s ...and %d more errors.",
            ICON_MORE_ERRORS,
            len(remaining),
            extra={"rest_of_errors": remaining, "issue_color": styles.color_property_missing},
        )

    return ValidationReport(
        passed=False,
        total_errors=len(errors),
        shown_errors=shown,
        remaining_errors=remaining,
        data_mismatches=data_mismatches,
    )
