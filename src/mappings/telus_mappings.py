"""
Telus Mobility phone export -> asset record.

The device name column ("SAMSUNG GALAXY S23 128GB BLACK") feeds make, model
and storage; the BAN (billing account number) column is only a marker that
the row came from a Telus export.
"""

from typing import Any, Dict, List, Optional

from inference import parse_device_name
from normalizer import apply_column_mappings, get_mapping as _get_mapping
from schema import ColumnMapping, TargetKind, TransformationResult
from transforms import clean_phone_number, parse_contract_date, strip_or_none
from mappings.phone_common import always_phone, apply_phone_defaults, validate_phone_data

SOURCE = "TELUS"
CARRIER = "Telus"
DEVICE_COLUMN = "Device Name"

TELUS_PHONE_MAPPINGS = (
    ColumnMapping(
        "Subscriber Name", "assignedToAadId", TargetKind.DIRECT,
        processor=strip_or_none,
        description="Subscriber name (attempt Azure AD resolution)",
    ),
    ColumnMapping(
        "Phone Number", "phoneNumber", TargetKind.SPECIFICATIONS,
        processor=clean_phone_number,
        description="Phone number",
    ),
    ColumnMapping("Rate Plan", "planType", TargetKind.SPECIFICATIONS, description="Plan type"),
    ColumnMapping(
        DEVICE_COLUMN, "model", TargetKind.DIRECT,
        processor=lambda value: parse_device_name(value).model,
        required=True,
        description="Device model (make is extracted separately)",
    ),
    ColumnMapping(
        DEVICE_COLUMN, "make", TargetKind.DIRECT,
        processor=lambda value: parse_device_name(value).make,
        description="Device manufacturer (extracted from device name)",
    ),
    ColumnMapping(
        DEVICE_COLUMN, "storage", TargetKind.SPECIFICATIONS,
        processor=lambda value: parse_device_name(value).storage,
        description="Storage capacity extracted from device name",
    ),
    ColumnMapping("IMEI", "imei", TargetKind.SPECIFICATIONS, required=True, description="IMEI number"),
    ColumnMapping(
        "IMEI", "serialNumber", TargetKind.DIRECT,
        processor=strip_or_none,
        description="IMEI as serial number (fallback)",
    ),
    ColumnMapping(
        "Contract end date", "contractEndDate", TargetKind.SPECIFICATIONS,
        processor=parse_contract_date,
        description="Contract end date",
    ),
    ColumnMapping(
        "BAN", "assetType", TargetKind.DIRECT,
        processor=always_phone,
        required=True,
        description="Billing account number; marks the row as a phone",
    ),
    ColumnMapping("Status", "", TargetKind.IGNORE, description="Line status (ignored)"),
)


def transform_row(row: Dict[str, Any]) -> TransformationResult:
    """Transform a single row of Telus phone data."""
    result = apply_column_mappings(row, TELUS_PHONE_MAPPINGS)
    return apply_phone_defaults(result, row, SOURCE, CARRIER, DEVICE_COLUMN)


def get_mapping(column: str) -> Optional[ColumnMapping]:
    return _get_mapping(TELUS_PHONE_MAPPINGS, column)


def validate(data: Dict[str, Any]) -> List[str]:
    return validate_phone_data(data)
