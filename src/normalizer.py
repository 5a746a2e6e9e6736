"""
Column mapping engine.

Projects one raw spreadsheet row onto the canonical asset record using a
table of ColumnMapping rules. Problems are collected on the result instead of
raised: a missing required column becomes a validation error and a failing
processor becomes a processing note, and the rest of the row still maps.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Sequence

from config import CUSTOM_FIELD_PREFIX
from schema import ColumnMapping, TargetKind, TransformationResult, is_blank

logger = logging.getLogger(__name__)


class NormalizationError(Exception):
    """Base class for errors raised by the import transformation engine."""
    pass


def clean_header(h: Any) -> str:
    """
    Normalize a header for comparison.

    Args:
        h: Raw header string

    Returns:
        Lowercased header with surrounding whitespace removed and inner runs
        of whitespace collapsed to one space
    """
    if not h:
        return ""
    return " ".join(str(h).split()).lower()


def _header_index(row: Dict[str, Any]) -> Dict[str, str]:
    index = {}
    for key in row:
        index.setdefault(clean_header(key), key)
    return index


def find_column(row: Dict[str, Any], column: str) -> Optional[str]:
    """Return the key of row matching column case/whitespace-insensitively."""
    return _header_index(row).get(clean_header(column))


def get_mapping(mappings: Iterable[ColumnMapping], column: str) -> Optional[ColumnMapping]:
    """First rule reading exactly this source column, or None."""
    for mapping in mappings:
        if mapping.source_column == column:
            return mapping
    return None


def _store(result: TransformationResult, mapping: ColumnMapping, value: Any, custom_prefix: str) -> None:
    target = mapping.target_field

    if custom_prefix and target.startswith(custom_prefix):
        result.custom_fields[target[len(custom_prefix):]] = value
    elif mapping.target_kind is TargetKind.DIRECT:
        result.direct_fields[target] = value
    elif mapping.target_kind is TargetKind.SPECIFICATIONS:
        result.specifications[target] = value
    elif mapping.target_kind is TargetKind.CUSTOM:
        result.custom_fields[target] = value


def apply_column_mappings(
    row: Dict[str, Any],
    mappings: Sequence[ColumnMapping],
    custom_prefix: str = CUSTOM_FIELD_PREFIX,
) -> TransformationResult:
    """
    Apply a mapping table to a single row.

    Args:
        row: Raw row, header -> cell value
        mappings: Rules, applied in order; later rules targeting the same
            field overwrite earlier ones
        custom_prefix: Target fields with this prefix go to custom_fields
            (prefix removed), whatever the declared kind

    Returns:
        TransformationResult for the row
    """
    result = TransformationResult()
    headers = _header_index(row)

    for mapping in mappings:
        key = headers.get(clean_header(mapping.source_column))
        raw_value = row[key] if key is not None else None

        if mapping.required and is_blank(raw_value):
            result.validation_errors.append(f"Required field {mapping.target_field} is missing")
            continue

        if raw_value is None:
            continue

        value = raw_value
        if mapping.processor is not None:
            try:
                value = mapping.processor(raw_value)
            except Exception as e:
                logger.debug(f"[Column Mapping] Processor for '{mapping.source_column}' failed: {e!r}")
                result.notes.append(f"Failed to process {mapping.source_column}: {e}")
                continue

        # None means "no data" and leaves the field unset
        if value is None:
            continue

        _store(result, mapping, value, custom_prefix)

    logger.debug(
        f"[Column Mapping] {len(result.direct_fields)} direct, "
        f"{len(result.specifications)} specification, {len(result.custom_fields)} custom fields; "
        f"{len(result.validation_errors)} errors"
    )
    return result
