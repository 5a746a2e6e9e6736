"""
Rogers phone export -> asset record.

Rogers device descriptions use run-together abbreviations ("APLE IP11PM",
"IPADAIR128", "S21 Grey - 128GB"), so this source parses them with the
carrier variant of the device-name parser.
"""

from typing import Any, Dict, List, Optional

from inference import parse_carrier_device_name
from normalizer import apply_column_mappings, get_mapping as _get_mapping
from schema import ColumnMapping, TargetKind, TransformationResult
from transforms import clean_phone_number, parse_contract_date, parse_yes_no, strip_or_none
from mappings.phone_common import always_phone, apply_phone_defaults, validate_phone_data

SOURCE = "ROGERS"
CARRIER = "Rogers"
DEVICE_COLUMN = "Device Description"

ROGERS_PHONE_MAPPINGS = (
    ColumnMapping(
        "Usernames", "assignedToAadId", TargetKind.DIRECT,
        processor=strip_or_none,
        description="Username (attempt Azure AD resolution)",
    ),
    ColumnMapping(
        "Subscriber Number", "phoneNumber", TargetKind.SPECIFICATIONS,
        processor=clean_phone_number,
        description="Phone number",
    ),
    ColumnMapping("Price Plan Description", "planType", TargetKind.SPECIFICATIONS, description="Plan type"),
    ColumnMapping(
        DEVICE_COLUMN, "model", TargetKind.DIRECT,
        processor=lambda value: parse_carrier_device_name(value).model,
        required=True,
        description="Device model (make is extracted separately)",
    ),
    ColumnMapping(
        DEVICE_COLUMN, "make", TargetKind.DIRECT,
        processor=lambda value: parse_carrier_device_name(value).make,
        description="Device manufacturer (extracted from device description)",
    ),
    ColumnMapping(
        DEVICE_COLUMN, "storage", TargetKind.SPECIFICATIONS,
        processor=lambda value: parse_carrier_device_name(value).storage,
        description="Storage capacity extracted from device description",
    ),
    ColumnMapping("IMEI", "imei", TargetKind.SPECIFICATIONS, required=True, description="IMEI number"),
    ColumnMapping(
        "IMEI", "serialNumber", TargetKind.DIRECT,
        processor=strip_or_none,
        description="IMEI as serial number (fallback)",
    ),
    ColumnMapping("SIM Card", "simCard", TargetKind.SPECIFICATIONS, description="SIM card number"),
    ColumnMapping(
        "Commit Start Date", "purchaseDate", TargetKind.DIRECT,
        processor=parse_contract_date,
        description="Purchase date (commit start)",
    ),
    ColumnMapping(
        "Commit End Date", "contractEndDate", TargetKind.SPECIFICATIONS,
        processor=parse_contract_date,
        description="Contract end date",
    ),
    ColumnMapping(
        "HUP Eligible (y/n)", "hupEligible", TargetKind.SPECIFICATIONS,
        processor=parse_yes_no,
        description="Hardware Upgrade Program eligible",
    ),
    ColumnMapping(
        "Account Number", "assetType", TargetKind.DIRECT,
        processor=always_phone,
        required=True,
        description="Account number; marks the row as a phone",
    ),
    ColumnMapping("Status", "", TargetKind.IGNORE, description="Status (ignored)"),
    ColumnMapping("# of Months Remaining", "", TargetKind.IGNORE, description="Months remaining (ignored)"),
    ColumnMapping("Early Cancellation Fee", "", TargetKind.IGNORE, description="Early cancellation fee (ignored)"),
    ColumnMapping(" Applicable Pre-HUP ", "", TargetKind.IGNORE, description="Pre-HUP credit (ignored)"),
    ColumnMapping("Available HUP Date(s)", "", TargetKind.IGNORE, description="HUP available dates (ignored)"),
)


def transform_row(row: Dict[str, Any]) -> TransformationResult:
    """Transform a single row of Rogers phone data."""
    result = apply_column_mappings(row, ROGERS_PHONE_MAPPINGS)
    return apply_phone_defaults(result, row, SOURCE, CARRIER, DEVICE_COLUMN)


def get_mapping(column: str) -> Optional[ColumnMapping]:
    return _get_mapping(ROGERS_PHONE_MAPPINGS, column)


def validate(data: Dict[str, Any]) -> List[str]:
    return validate_phone_data(data)
