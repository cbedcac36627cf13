"""Validates the model's parsed JSON and builds an Analysis."""

import json
from typing import Any

from docintake.analysis.exceptions import AnalysisValidationError
from docintake.analysis.models import Analysis

_MAX_LIST_ITEMS = 50
_LIST_FIELDS = ("keyPoints", "riskFactors", "recommendations")


def validate_and_build(data: dict[str, Any]) -> Analysis:
    """Validate raw parsed JSON and build an Analysis.

    Missing optional lists default to empty; wrong types are rejected.

    Raises:
        AnalysisValidationError: on any validation failure.
    """
    summary = data.get("summary")
    if not isinstance(summary, str) or not _clean(summary):
        raise AnalysisValidationError("'summary' must be a non-empty string")

    key_points, risk_factors, recommendations = (
        _build_string_list(data.get(name), name) for name in _LIST_FIELDS
    )
    return Analysis(
        summary=_clean(summary),
        key_points=key_points,
        relevant_to_domain=_build_relevance(data),
        extracted_fields=_build_fields(_first_present(data, "extractedData", "extractedFields")),
        risk_factors=risk_factors,
        recommendations=recommendations,
        confidence=_build_confidence(data.get("confidence")),
    )


def _clean(value: str) -> str:
    """Strip whitespace and NUL characters, which PostgreSQL cannot store."""
    return value.replace("\x00", "").strip()


def _first_present(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _build_string_list(raw: Any, name: str) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise AnalysisValidationError(f"'{name}' must be a list")
    if len(raw) > _MAX_LIST_ITEMS:
        raise AnalysisValidationError(
            f"Too many items in '{name}': {len(raw)} (max {_MAX_LIST_ITEMS})"
        )
    items: list[str] = []
    for i, item in enumerate(raw):
        if not isinstance(item, str):
            raise AnalysisValidationError(f"'{name}[{i}]' must be a string")
        cleaned = _clean(item)
        if cleaned:
            items.append(cleaned)
    return items


def _build_relevance(data: dict[str, Any]) -> bool:
    raw = _first_present(data, "relevantToInsurance", "relevantToDomain")
    if raw is None:
        return True
    if not isinstance(raw, bool):
        raise AnalysisValidationError("'relevantToInsurance' must be a boolean")
    return raw


def _build_fields(raw: Any) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise AnalysisValidationError("'extractedData' must be an object")
    fields: dict[str, str] = {}
    for key, value in raw.items():
        if value is None:
            continue
        if isinstance(value, str):
            text = value
        elif isinstance(value, (dict, list)):
            text = json.dumps(value, ensure_ascii=False)
        else:
            text = str(value)
        fields[_clean(str(key))] = text.replace("\x00", "")
    return fields


def _build_confidence(raw: Any) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise AnalysisValidationError("'confidence' must be a number or null")
    if not 0.0 <= raw <= 1.0:
        raise AnalysisValidationError(f"'confidence' must be between 0 and 1, got {raw}")
    return float(raw)
