"""Projects validation errors back onto a copy of the validated data.

Every error record is turned into a short annotation (icon + description)
written at the place in the data where the mismatch happened, which gives a
readable picture of what is wrong with a response without cross-referencing
JSON pointers by hand.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from schema_validator.core.config import CONFIG, AppConfig


class IssueKind(str, Enum):
    MISSING_PROPERTY = "missing_property"
    VALUE_MISMATCH = "value_mismatch"


@dataclass(frozen=True)
class IssueStyles:
    icon_property_error: str
    color_property_error: str
    icon_property_missing: str
    color_property_missing: str

    @staticmethod
    def from_config(config: AppConfig = CONFIG) -> "IssueStyles":
        return IssueStyles(
            icon_property_error=config.icon_property_error,
            color_property_error=config.color_property_error,
            icon_property_missing=config.icon_property_missing,
            color_property_missing=config.color_property_missing,
        )

    def icon_for(self, kind: IssueKind) -> str:
        if kind is IssueKind.MISSING_PROPERTY:
            return self.icon_property_missing
        return self.icon_property_error

    def color_for(self, kind: IssueKind) -> str:
        if kind is IssueKind.MISSING_PROPERTY:
            return self.color_property_missing
        return self.color_property_error

    def to_payload(self) -> Dict[str, str]:
        return {
            "iconPropertyError": self.icon_property_error,
            "colorPropertyError": self.color_property_error,
            "iconPropertyMissing": self.icon_property_missing,
            "colorPropertyMissing": self.color_property_missing,
        }


@dataclass(frozen=True)
class ProjectedIssue:
    error: Mapping[str, Any]
    kind: IssueKind
    path: str
    segments: Tuple[str, ...]
    annotation: str


@dataclass(frozen=True)
class MismatchProjection:
    view: Any
    issues: Tuple[ProjectedIssue, ...]


_MISSING = object()


def parse_instance_path(instance_path: str) -> List[str]:
    """Split a JSON pointer such as ``/items/0/name`` into its segments."""

    if not instance_path:
        return []
    if instance_path.startswith("/"):
        instance_path = instance_path[1:]
    return [part.replace("~1", "/").replace("~0", "~") for part in instance_path.split("/")]


def classify_error(error: Mapping[str, Any]) -> IssueKind:
    if error.get("keyword") == "required":
        return IssueKind.MISSING_PROPERTY
    return IssueKind.VALUE_MISMATCH


def _is_index(segment: str) -> bool:
    return segment.isdigit()


def _read(node: Any, segments: Sequence[str]) -> Any:
    for segment in segments:
        if isinstance(node, Mapping) and segment in node:
            node = node[segment]
        elif isinstance(node, list) and _is_index(segment) and int(segment) < len(node):
            node = node[int(segment)]
        else:
            return _MISSING
    return node


def _write(node: Any, segments: Sequence[str], value: Any) -> Any:
    if not segments:
        return value

    head, rest = segments[0], segments[1:]
    if isinstance(node, list) and _is_index(head):
        index = int(head)
        if index >= len(node):
            node.extend([None] * (index + 1 - len(node)))
        node[index] = _write(node[index], rest, value)
        return node

    if not isinstance(node, dict):
        node = {}
    node[head] = _write(node.get(head), rest, value)
    return node


def _format_value(value: Any) -> str:
    if value is _MISSING:
        return "undefined"
    return json.dumps(value, ensure_ascii=False, default=str).replace('"', "'")


def project_mismatches(
    data: Any,
    errors: Sequence[Mapping[str, Any]],
    styles: Optional[IssueStyles] = None,
) -> MismatchProjection:
    styles = styles or IssueStyles.from_config()
    view = copy.deepcopy(data)
    issues: List[ProjectedIssue] = []

    for error in errors:
        segments = parse_instance_path(error.get("instancePath", ""))
        kind = classify_error(error)

        if kind is IssueKind.MISSING_PROPERTY:
            missing_property = str((error.get("params") or {}).get("missingProperty", ""))
            segments = segments + [missing_property]
            annotation = f"{styles.icon_property_missing} Missing property '{missing_property}'"
        else:
            value = _read(data, segments)
            annotation = f"{styles.icon_property_error} {_format_value(value)} {error.get('message', '')}"

        view = _write(view, segments, annotation)
        issues.append(
            ProjectedIssue(
                error=error,
                kind=kind,
                path=".".join(segments),
                segments=tuple(segments),
                annotation=annotation,
            )
        )

    return MismatchProjection(view=view, issues=tuple(issues))


def replace_icons(data: Any, source: IssueStyles, target: IssueStyles) -> Any:
    """Swap the issue icons of ``source`` for the ones of ``target`` in a mismatch view."""

    if isinstance(data, str):
        return data.replace(source.icon_property_error, target.icon_property_error).replace(
            source.icon_property_missing, target.icon_property_missing
        )
    if isinstance(data, list):
        return [replace_icons(item, source, target) for item in data]
    if isinstance(data, dict):
        return {key: replace_icons(value, source, target) for key, value in data.items()}
    return data
