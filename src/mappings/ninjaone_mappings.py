"""
NinjaOne RMM export -> asset record.

Endpoints and servers come from the same export format and share most rules.
They differ in how the Role column maps to an asset type, in the server-only
location and virtualization columns, and in the default status.
"""

import math
import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from normalizer import apply_column_mappings, find_column, get_mapping as _get_mapping
from schema import ColumnMapping, TargetKind, TransformationResult, collect_missing, is_blank
from transforms import (
    aggregate_server_volumes,
    aggregate_volumes,
    detect_virtualization,
    extract_domain_username,
    normalize_asset_tag,
    parse_date,
    resolve_server_location,
    simplify_ram,
    to_iso,
)

logger = logging.getLogger(__name__)

ROLE_TO_ASSET_TYPE = MappingProxyType({
    "WINDOWS_DESKTOP": "DESKTOP",
    "WINDOWS_LAPTOP": "LAPTOP",
    "WINDOWS WORKSTATION": "LAPTOP",  # NinjaOne labels Windows laptops this way
    "MAC_DESKTOP": "DESKTOP",
    "MAC_LAPTOP": "LAPTOP",
    "LINUX_DESKTOP": "DESKTOP",
    "LINUX_LAPTOP": "LAPTOP",
    "WINDOWS_SERVER": "SERVER",
    "LINUX_SERVER": "SERVER",
    "HYPER-V_SERVER": "SERVER",
    "VMWARE_SERVER": "SERVER",
    "SERVER": "SERVER",
    "TABLET": "TABLET",
    "MOBILE": "OTHER",
    "NETWORK_DEVICE": "OTHER",
    "PRINTER": "OTHER",
})

ENDPOINT_ROLES = frozenset({
    "WINDOWS_DESKTOP", "WINDOWS_LAPTOP", "MAC_DESKTOP", "MAC_LAPTOP",
    "LINUX_DESKTOP", "LINUX_LAPTOP", "TABLET", "MOBILE",
})

SERVER_ROLES = frozenset({
    "WINDOWS_SERVER", "LINUX_SERVER", "HYPER-V_SERVER", "VMWARE_SERVER",
    "SERVER", "NETWORK_DEVICE", "PRINTER",
})


def endpoint_asset_type(role: str) -> str:
    return ROLE_TO_ASSET_TYPE.get(role.strip().upper(), "OTHER")


def server_asset_type(role: str) -> str:
    """Only server roles keep their type; printers, switches etc. become OTHER."""
    return "SERVER" if endpoint_asset_type(role) == "SERVER" else "OTHER"


def server_asset_tag(value: str) -> str:
    return value.strip().upper()


def _shared_rules(storage_processor: Callable[[str], Optional[str]]) -> Tuple[ColumnMapping, ...]:
    return (
        ColumnMapping("Warranty End Date", "warrantyEndDate", TargetKind.DIRECT,
                      processor=to_iso, description="Warranty End Date"),
        ColumnMapping("Last LoggedIn User", "assignedToAadId", TargetKind.DIRECT,
                      processor=extract_domain_username,
                      description="Assigned user (requires Azure AD lookup)"),
        ColumnMapping("RAM", "ram", TargetKind.SPECIFICATIONS,
                      processor=simplify_ram, description="RAM (rounded to common size)"),
        ColumnMapping("OS Name", "operatingSystem", TargetKind.SPECIFICATIONS, description="Operating System"),
        ColumnMapping("OS Architecture", "osArchitecture", TargetKind.SPECIFICATIONS,
                      description="OS Architecture (64-bit/32-bit)"),
        ColumnMapping("OS Build Number", "osBuildNumber", TargetKind.SPECIFICATIONS, description="OS Build Number"),
        ColumnMapping("OS Version", "osVersion", TargetKind.SPECIFICATIONS, description="Operating System Version"),
        ColumnMapping("Processor", "processor", TargetKind.SPECIFICATIONS, description="Processor"),
        ColumnMapping("Volumes", "storage", TargetKind.SPECIFICATIONS,
                      processor=storage_processor, description="Storage (aggregated from volumes)"),
        ColumnMapping("Graphics", "graphics", TargetKind.SPECIFICATIONS, description="Graphics Card"),
        ColumnMapping("Network Adapters", "networkAdapters", TargetKind.SPECIFICATIONS,
                      description="Network Adapters"),
        ColumnMapping("Serial Number", "serialNumber", TargetKind.DIRECT, required=True,
                      description="Serial Number"),
        ColumnMapping("Manufacturer", "make", TargetKind.DIRECT, description="Manufacturer"),
        ColumnMapping("Model", "model", TargetKind.DIRECT, description="Product Model"),
        # System Model is more specific and wins over Model when both are present
        ColumnMapping("System Model", "model", TargetKind.DIRECT, description="System Model"),
        ColumnMapping("Last Online", "lastOnline", TargetKind.SPECIFICATIONS,
                      processor=to_iso, description="Last Online Date"),
        ColumnMapping("System Name", "systemName", TargetKind.SPECIFICATIONS, description="System Name"),
    )


NINJA_ONE_MAPPINGS = (
    ColumnMapping("Display Name", "assetTag", TargetKind.DIRECT,
                  processor=normalize_asset_tag, required=True, description="Asset Tag"),
    ColumnMapping("Role", "assetType", TargetKind.DIRECT,
                  processor=endpoint_asset_type, required=True, description="Asset Type (mapped from Role)"),
) + _shared_rules(aggregate_volumes)

NINJA_ONE_SERVER_MAPPINGS = (
    ColumnMapping("Display Name", "assetTag", TargetKind.DIRECT,
                  processor=server_asset_tag, required=True, description="Server Asset Tag"),
    ColumnMapping("Role", "assetType", TargetKind.DIRECT,
                  processor=server_asset_type, required=True, description="Asset Type (mapped from Role)"),
    ColumnMapping("Display Name", "locationName", TargetKind.DIRECT,
                  processor=resolve_server_location, description="Location (extracted from server name)"),
    ColumnMapping("System Model", "virtualizationType", TargetKind.SPECIFICATIONS,
                  processor=detect_virtualization, description="Virtual or Physical server"),
) + _shared_rules(aggregate_server_volumes)


def _apply_hardware_defaults(result: TransformationResult) -> None:
    direct = result.direct_fields
    direct["condition"] = direct.get("condition") or "GOOD"
    direct["make"] = direct.get("make") or "Unknown"
    direct["model"] = direct.get("model") or "Unknown"


def _note_user_lookup(result: TransformationResult) -> None:
    username = result.direct_fields.get("assignedToAadId")
    if username:
        result.notes.append(f'Username "{username}" requires Azure AD lookup')


def transform_row(row: Dict[str, Any]) -> TransformationResult:
    """Transform a single row of NinjaOne endpoint data."""
    result = apply_column_mappings(row, NINJA_ONE_MAPPINGS)
    _apply_hardware_defaults(result)

    direct = result.direct_fields
    direct["status"] = "ASSIGNED" if direct.get("assignedToAadId") else "AVAILABLE"

    _note_user_lookup(result)
    return result


def transform_server_row(row: Dict[str, Any]) -> TransformationResult:
    """Transform a single row of NinjaOne server data."""
    result = apply_column_mappings(row, NINJA_ONE_SERVER_MAPPINGS)
    _apply_hardware_defaults(result)

    # Servers are in service, not assigned to a person
    result.direct_fields["status"] = "ASSIGNED"

    location = result.direct_fields.get("locationName")
    if location:
        result.notes.append(f'Location "{location}" will be matched to existing locations')

    _note_user_lookup(result)
    return result


def get_mapping(column: str) -> Optional[ColumnMapping]:
    return _get_mapping(NINJA_ONE_MAPPINGS, column)


def get_server_mapping(column: str) -> Optional[ColumnMapping]:
    return _get_mapping(NINJA_ONE_SERVER_MAPPINGS, column)


def validate(data: Dict[str, Any]) -> List[str]:
    """Validate required fields for a NinjaOne import record."""
    return collect_missing(data, (
        ("assetTag", "Asset Tag is required"),
        ("serialNumber", "Serial Number is required"),
        ("assetType", "Asset Type is required"),
    ))




# ============================================================================
# Import filters
# ============================================================================

class FilterResult(NamedTuple):
    """Rows split by an import filter, with the filter's display name."""
    included: List[Dict[str, Any]]
    excluded: List[Dict[str, Any]]
    filter_name: str

    @property
    def stats(self) -> Dict[str, Any]:
        return {
            "total": len(self.included) + len(self.excluded),
            "included": len(self.included),
            "excluded": len(self.excluded),
            "filterName": self.filter_name,
        }


def _cell(row: Dict[str, Any], column: str) -> Any:
    key = find_column(row, column)
    return row[key] if key is not None else None


def days_since(value: Any, now: Optional[datetime] = None) -> float:
    """
    Whole days (rounded up) between a date cell and now.

    Returns:
        Day count, or math.inf when the cell is blank or not a date
    """
    if is_blank(value):
        return math.inf
    parsed = parse_date(str(value))
    if parsed is None:
        return math.inf
    now = now or datetime.now(timezone.utc)
    return math.ceil((now - parsed).total_seconds() / 86400)


def apply_import_filter(
    rows: Sequence[Dict[str, Any]],
    roles: frozenset,
    filter_name: str,
    last_online_max_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> FilterResult:
    """
    Split NinjaOne rows by role and, optionally, by recent activity.

    Args:
        rows: Raw export rows
        roles: Role values (upper-case) a row must have to be included
        filter_name: Name reported in the filter stats
        last_online_max_days: When positive, rows whose "Last Online" is blank,
            unparseable or older than this many days are excluded
        now: Reference time for the Last Online rule (defaults to current UTC)

    Returns:
        FilterResult with included and excluded rows in input order
    """
    check_last_online = last_online_max_days is not None and last_online_max_days > 0
    included, excluded = [], []

    for row in rows:
        role = _cell(row, "Role")
        keep = not is_blank(role) and str(role).strip().upper() in roles
        if keep and check_last_online:
            keep = days_since(_cell(row, "Last Online"), now) <= last_online_max_days
        (included if keep else excluded).append(row)

    logger.debug(f"[Import Filter] {filter_name}: {len(included)} included, {len(excluded)} excluded")
    return FilterResult(included, excluded, filter_name)


def filter_endpoints(
    rows: Sequence[Dict[str, Any]],
    last_online_max_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> FilterResult:
    """Keep rows whose Role is an endpoint role (desktops, laptops, tablets, mobiles)."""
    return apply_import_filter(rows, ENDPOINT_ROLES, "NinjaOne Endpoint Devices", last_online_max_days, now)


def filter_servers(
    rows: Sequence[Dict[str, Any]],
    last_online_max_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> FilterResult:
    """Keep rows whose Role is a server or infrastructure role."""
    return apply_import_filter(rows, SERVER_ROLES, "NinjaOne Servers", last_online_max_days, now)
