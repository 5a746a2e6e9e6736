"""
Schema types for the import transformation engine.

Defines the mapping rule shape, the per-row transformation result and the
parsed device record, plus small helpers shared by the per-source validators.
"""

from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple
from enum import Enum


class TargetKind(Enum):
    """Where a mapped value is stored on the asset record."""
    DIRECT = "direct"
    SPECIFICATIONS = "specifications"
    CUSTOM = "custom"
    IGNORE = "ignore"


class ColumnMapping(NamedTuple):
    """
    Declarative binding of one source column to one target field.

    The processor receives the raw cell value and returns the value to store.
    Rules with an empty target_field and TargetKind.IGNORE only document
    columns that are known but unused.
    """
    source_column: str
    target_field: str
    target_kind: TargetKind = TargetKind.DIRECT
    processor: Optional[Callable[[str], Any]] = None
    required: bool = False
    description: str = ""


class ParsedDevice(NamedTuple):
    """Make, model and storage extracted from a device description."""
    make: str
    model: str
    storage: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        result = {"make": self.make, "model": self.model}
        if self.storage is not None:
            result["storage"] = self.storage
        return result


class ValidationResult(NamedTuple):
    is_valid: bool
    errors: List[str]


class TransformationResult:
    """Result of transforming a single row."""

    def __init__(self):
        self.direct_fields: Dict[str, Any] = {}
        self.specifications: Dict[str, Any] = {}
        self.custom_fields: Dict[str, Any] = {}
        self.notes: List[str] = []
        self.validation_errors: List[str] = []

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the camelCase shape consumed by import jobs and previews.

        Returns:
            Dictionary with directFields, specifications, customFields,
            processingNotes and validationErrors keys
        """
        return {
            "directFields": dict(self.direct_fields),
            "specifications": dict(self.specifications),
            "customFields": dict(self.custom_fields),
            "processingNotes": list(self.notes),
            "validationErrors": list(self.validation_errors),
        }

    def __repr__(self) -> str:
        return (
            f"TransformationResult(direct_fields={self.direct_fields!r}, "
            f"specifications={self.specifications!r}, "
            f"custom_fields={self.custom_fields!r}, "
            f"notes={self.notes!r}, validation_errors={self.validation_errors!r})"
        )


def is_blank(value: Any) -> bool:
    """True for None and for strings that are empty after stripping."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def collect_missing(
    data: Dict[str, Any],
    checks: Sequence[Tuple[str, str]],
) -> List[str]:
    """
    Check that fields are present and non-blank.

    Args:
        data: Flat record (typically direct fields merged with specifications)
        checks: (field name, error message) pairs, evaluated in order

    Returns:
        Error messages for every blank field (empty if valid)
    """
    errors = []
    for field, message in checks:
        if is_blank(data.get(field)):
            errors.append(message)
    return errors
