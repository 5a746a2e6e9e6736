"""
Manually filled asset template (Excel) -> asset record.

Unlike the carrier imports, explicit template values always win: the asset
tag, status, condition and type are only derived when the template cell was
left empty.
"""

from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from normalizer import apply_column_mappings, get_mapping as _get_mapping
from schema import ColumnMapping, TargetKind, TransformationResult, collect_missing
from transforms import generate_asset_tag, normalize_template_asset_tag, parse_price, strip_or_none, to_iso

SOURCE = "EXCEL"

DEVICE_TYPES = MappingProxyType({
    "laptop": "LAPTOP",
    "desktop": "DESKTOP",
    "tablet": "TABLET",
    "phone": "PHONE",
    "server": "SERVER",
    "workstation": "DESKTOP",
    "all-in-one": "DESKTOP",
})

STATUSES = MappingProxyType({
    "active": "AVAILABLE",
    "available": "AVAILABLE",
    "assigned": "ASSIGNED",
    "in use": "ASSIGNED",
    "spare": "SPARE",
    "maintenance": "MAINTENANCE",
    "repair": "MAINTENANCE",
    "retired": "RETIRED",
    "disposed": "DISPOSED",
})

CONDITIONS = MappingProxyType({
    "new": "NEW",
    "brand new": "NEW",
    "excellent": "GOOD",
    "very good": "GOOD",
    "good": "GOOD",
    "fair": "FAIR",
    "poor": "POOR",
    "damaged": "POOR",
    "broken": "POOR",
})

TAG_PREFIXES = MappingProxyType({
    "LAPTOP": "LT",
    "DESKTOP": "DT",
    "PHONE": "PH",
})

DEFAULT_MAKE = "Dell"
DEFAULT_ASSET_TYPE = "LAPTOP"


def lookup(table: Mapping[str, str], default: str):
    """
    Build a processor mapping free text through a lookup table.

    Blank cells give None so the post-processing can derive a value;
    unrecognised text gives the default.
    """
    def processor(value: str) -> Optional[str]:
        key = " ".join(str(value).split()).lower()
        if not key:
            return None
        return table.get(key, default)
    return processor


TEMPLATE_MAPPINGS = (
    ColumnMapping("Service Tag", "serialNumber", TargetKind.DIRECT,
                  processor=strip_or_none, required=True, description="Device serial number"),
    # Header matching ignores whitespace, so "Brand " exports match too
    ColumnMapping("Brand", "make", TargetKind.DIRECT,
                  processor=strip_or_none, description="Manufacturer (Dell, Lenovo, etc.)"),
    ColumnMapping("Model", "model", TargetKind.DIRECT, processor=strip_or_none, description="Device model"),
    ColumnMapping("Purchase date", "purchaseDate", TargetKind.DIRECT, processor=to_iso, description="Purchase date"),
    ColumnMapping("Location of computer", "locationId", TargetKind.DIRECT,
                  processor=strip_or_none, description="Physical location name (resolved to ID)"),
    ColumnMapping("Asset Tag", "assetTag", TargetKind.DIRECT,
                  processor=normalize_template_asset_tag, description="Asset Tag"),
    ColumnMapping("Assigned User", "assignedToAadId", TargetKind.DIRECT,
                  processor=strip_or_none, description="Assigned user (requires Azure AD lookup)"),
    ColumnMapping("Device Type", "assetType", TargetKind.DIRECT,
                  processor=lookup(DEVICE_TYPES, "OTHER"), description="Asset type"),
    ColumnMapping("Status", "status", TargetKind.DIRECT,
                  processor=lookup(STATUSES, "AVAILABLE"), description="Asset status"),
    ColumnMapping("Condition", "condition", TargetKind.DIRECT,
                  processor=lookup(CONDITIONS, "GOOD"), description="Device condition"),
    ColumnMapping("Purchase Price", "purchasePrice", TargetKind.DIRECT,
                  processor=parse_price, description="Purchase price"),
    ColumnMapping("Warranty Start", "warrantyStartDate", TargetKind.DIRECT,
                  processor=to_iso, description="Warranty start date"),
    ColumnMapping("Warranty End", "warrantyEndDate", TargetKind.DIRECT,
                  processor=to_iso, description="Warranty end date"),
    ColumnMapping("Notes", "notes", TargetKind.DIRECT, processor=strip_or_none, description="Additional notes"),
)


def transform_row(row: Dict[str, Any]) -> TransformationResult:
    """Transform a single row of the manual asset template."""
    result = apply_column_mappings(row, TEMPLATE_MAPPINGS)
    direct = result.direct_fields

    direct["condition"] = direct.get("condition") or "GOOD"
    direct["assetType"] = direct.get("assetType") or DEFAULT_ASSET_TYPE
    direct["make"] = direct.get("make") or DEFAULT_MAKE
    direct["model"] = direct.get("model") or "Unknown"
    direct["source"] = SOURCE

    if not direct.get("assetTag"):
        direct["assetTag"] = generate_asset_tag(TAG_PREFIXES.get(direct["assetType"], "AS"))

    if not direct.get("status"):
        direct["status"] = "ASSIGNED" if direct.get("assignedToAadId") else "AVAILABLE"

    username = direct.get("assignedToAadId")
    if username:
        result.notes.append(f'Username "{username}" requires Azure AD lookup')

    return result


def get_mapping(column: str) -> Optional[ColumnMapping]:
    return _get_mapping(TEMPLATE_MAPPINGS, column)


def validate(data: Dict[str, Any]) -> List[str]:
    return collect_missing(data, (("serialNumber", "Serial Number (Service Tag) is required"),))
