"""
Import source registry.

Binds each supported source type to its transformer (row transform, mapping
table, validator) so callers have one entry point whatever the export came
from.
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from normalizer import NormalizationError, clean_header
from schema import ColumnMapping, TransformationResult, ValidationResult
from mappings import ninjaone_mappings, rogers_mappings, telus_mappings, template_mappings

logger = logging.getLogger(__name__)


class SourceType(Enum):
    """Supported import source types."""
    TELUS = "telus"
    ROGERS = "rogers"
    NINJAONE = "ninjaone"
    NINJAONE_SERVERS = "ninjaone-servers"
    TEMPLATE = "bgc-template"


class UnsupportedSourceError(NormalizationError, ValueError):
    """Raised when a source type has no registered transformer."""
    pass


class SourceTransformer(NamedTuple):
    transform_row: Callable[[Dict[str, Any]], TransformationResult]
    get_mappings: Callable[[], Tuple[ColumnMapping, ...]]
    validate: Callable[[Dict[str, Any]], ValidationResult]


def _validator(check: Callable[[Dict[str, Any]], List[str]]) -> Callable[[Dict[str, Any]], ValidationResult]:
    def validate(data: Dict[str, Any]) -> ValidationResult:
        errors = check(data)
        return ValidationResult(is_valid=not errors, errors=errors)
    return validate


REGISTRY = MappingProxyType({
    SourceType.TELUS: SourceTransformer(
        transform_row=telus_mappings.transform_row,
        get_mappings=lambda: telus_mappings.TELUS_PHONE_MAPPINGS,
        validate=_validator(telus_mappings.validate),
    ),
    SourceType.ROGERS: SourceTransformer(
        transform_row=rogers_mappings.transform_row,
        get_mappings=lambda: rogers_mappings.ROGERS_PHONE_MAPPINGS,
        validate=_validator(rogers_mappings.validate),
    ),
    SourceType.NINJAONE: SourceTransformer(
        transform_row=ninjaone_mappings.transform_row,
        get_mappings=lambda: ninjaone_mappings.NINJA_ONE_MAPPINGS,
        validate=_validator(ninjaone_mappings.validate),
    ),
    SourceType.NINJAONE_SERVERS: SourceTransformer(
        transform_row=ninjaone_mappings.transform_server_row,
        get_mappings=lambda: ninjaone_mappings.NINJA_ONE_SERVER_MAPPINGS,
        validate=_validator(ninjaone_mappings.validate),
    ),
    SourceType.TEMPLATE: SourceTransformer(
        transform_row=template_mappings.transform_row,
        get_mappings=lambda: template_mappings.TEMPLATE_MAPPINGS,
        validate=_validator(template_mappings.validate),
    ),
})

# Columns whose joint presence identifies an export, checked in order
SOURCE_SIGNATURES = (
    (SourceType.TELUS, ("BAN", "Device Name", "IMEI")),
    (SourceType.ROGERS, ("Account Number", "Device Description", "IMEI")),
    (SourceType.NINJAONE, ("Display Name", "Role", "Serial Number")),
    (SourceType.TEMPLATE, ("Service Tag",)),
)


def _coerce_source_type(source_type: Union[SourceType, str]) -> SourceType:
    if isinstance(source_type, SourceType):
        return source_type
    try:
        return SourceType(str(source_type).strip().lower())
    except ValueError:
        raise UnsupportedSourceError(f"Unsupported import source: {source_type}") from None


def get_transformer(source_type: Union[SourceType, str]) -> SourceTransformer:
    """
    Get the transformer for an import source.

    Args:
        source_type: SourceType member or its string value (e.g. "telus")

    Returns:
        SourceTransformer for the source

    Raises:
        UnsupportedSourceError: If the source type is not registered
    """
    source = _coerce_source_type(source_type)
    transformer = REGISTRY.get(source)
    if transformer is None:
        raise UnsupportedSourceError(f"Unsupported import source: {source_type}")
    return transformer


def transform_row(source_type: Union[SourceType, str], row: Dict[str, Any]) -> TransformationResult:
    return get_transformer(source_type).transform_row(row)


def transform_many(source_type: Union[SourceType, str], rows: Iterable[Dict[str, Any]]) -> List[TransformationResult]:
    """
    Transform rows one after another with the source's transformer.

    Rows are independent; a bad row yields a result with errors rather than
    stopping the batch.
    """
    transformer = get_transformer(source_type)
    results = [transformer.transform_row(row) for row in rows]
    logger.debug(
        f"[Registry] Transformed {len(results)} rows from {source_type}, "
        f"{sum(1 for r in results if r.validation_errors)} with validation errors"
    )
    return results


def get_mappings(source_type: Union[SourceType, str]) -> Tuple[ColumnMapping, ...]:
    return get_transformer(source_type).get_mappings()


def validate_data(source_type: Union[SourceType, str], data: Dict[str, Any]) -> ValidationResult:
    return get_transformer(source_type).validate(data)


def get_supported_sources() -> List[str]:
    return [source.value for source in REGISTRY]


def is_source_supported(source_type: Any) -> bool:
    try:
        _coerce_source_type(source_type)
    except UnsupportedSourceError:
        return False
    return True


def detect_source_type(headers: Sequence[str]) -> Optional[SourceType]:
    """
    Guess the import source from a header row.

    NinjaOne endpoint and server exports share a header layout, so both are
    reported as SourceType.NINJAONE; use the Role column to tell them apart.

    Args:
        headers: Column headers of the file

    Returns:
        SourceType, or None if no known export layout matches
    """
    present = {clean_header(h) for h in headers}
    for source, columns in SOURCE_SIGNATURES:
        if all(clean_header(c) in present for c in columns):
            logger.debug(f"[Registry] Detected source {source.value} from headers")
            return source
    return None
