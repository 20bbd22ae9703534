"""
Analysis Response Normalization

PURE CONVERSION - NO NETWORK, NO STATE

The backend has returned analysis results in two shapes:
- nested:  {"analysis": {"wasteType": ..., ...}, "id": ..., "createdAt": ...}
- flat:    {"wasteType": ..., "urgency": ..., ...}

Each field is resolved independently through the same prioritized lookup:
nested analysis -> top level -> fixed default. Normalization never fails.
"""

from typing import Any, Mapping, Optional, Sequence

from .schemas import WasteAnalysisResult


ANALYSIS_DEFAULTS = {
    "wasteType": "Unknown",
    "urgency": "Medium",
    "severity": "Minor",
    "reasoning": "No reasoning provided",
    "segregationLevel": "Unknown",
    "segregationReasoning": "No segregation details provided",
    "id": "",
    "createdAt": "",
}

# Alternate key spellings accepted per field, in priority order
FIELD_ALIASES = {
    "id": ("id", "_id"),
}


def lookup_field(
    sources: Sequence[Optional[Mapping[str, Any]]],
    keys: Sequence[str],
    default: Any,
) -> Any:
    """
    Return the first present, non-null value for any of ``keys``.

    Sources are searched in order; within a source, keys are tried in order.
    Non-mapping sources are skipped.
    """
    for source in sources:
        if not isinstance(source, Mapping):
            continue
        for key in keys:
            value = source.get(key)
            if value is not None:
                return value
    return default


def analysis_sources(payload: Any) -> list:
    """Lookup order for an analysis payload: nested block first, then top level."""
    if not isinstance(payload, Mapping):
        return []
    nested = payload.get("analysis")
    return [nested if isinstance(nested, Mapping) else None, payload]


def normalize_analysis(payload: Any) -> WasteAnalysisResult:
    """
    Convert a raw analysis response into WasteAnalysisResult.

    Args:
        payload: Parsed JSON body (any shape)

    Returns:
        WasteAnalysisResult with every field populated
    """
    sources = analysis_sources(payload)
    values = {
        name: str(lookup_field(sources, FIELD_ALIASES.get(name, (name,)), default))
        for name, default in ANALYSIS_DEFAULTS.items()
    }
    return WasteAnalysisResult(**values)
