"""
Business rules shared by the phone carrier imports (Telus, Rogers).
"""

from typing import Any, Dict, List

from normalizer import find_column
from schema import TransformationResult, collect_missing, is_blank
from transforms import generate_phone_asset_tag, handle_imei_fallback

# Carrier rows always describe phones and arrive in good condition
PHONE_ASSET_TYPE = "PHONE"
DEFAULT_CONDITION = "GOOD"


def always_phone(_value: str) -> str:
    """Processor for the carrier trigger column: its presence marks a phone row."""
    return PHONE_ASSET_TYPE


def apply_phone_defaults(
    result: TransformationResult,
    row: Dict[str, Any],
    source: str,
    carrier: str,
    device_column: str,
) -> TransformationResult:
    """
    Post-process a mapped carrier row.

    Carrier rules always overwrite: asset type, asset tag and status are
    derived here regardless of what the mapping produced.
    """
    direct = result.direct_fields
    specs = result.specifications

    direct["assetType"] = PHONE_ASSET_TYPE
    direct["condition"] = direct.get("condition") or DEFAULT_CONDITION
    direct["source"] = source
    specs["carrier"] = specs.get("carrier") or carrier

    assignee = direct.get("assignedToAadId")
    direct["assetTag"] = generate_phone_asset_tag(assignee)

    fallback = handle_imei_fallback(direct.get("serialNumber"), specs.get("imei"))
    if fallback.get("serialNumber"):
        direct["serialNumber"] = fallback["serialNumber"]
    if fallback.get("imei"):
        specs["imei"] = fallback["imei"]

    direct["status"] = "ASSIGNED" if assignee else "AVAILABLE"

    # Raw descriptor is shown in the phone details panel
    key = find_column(row, device_column)
    if key is not None and not is_blank(row[key]):
        specs["operatingSystem"] = row[key]

    if assignee:
        result.notes.append(f'Username "{assignee}" requires Azure AD lookup')

    return result


def validate_phone_data(data: Dict[str, Any]) -> List[str]:
    """
    Validate a mapped phone record.

    "IMEI is required" and "Either Serial Number or IMEI is required" are
    reported independently; a record with a serial number but no IMEI gets
    only the first.
    """
    errors = collect_missing(data, (
        ("model", "Device model is required"),
        ("imei", "IMEI is required"),
    ))
    if is_blank(data.get("serialNumber")) and is_blank(data.get("imei")):
        errors.append("Either Serial Number or IMEI is required")
    return errors
