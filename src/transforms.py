"""
Value normalizers used by the import column mappings.

Every function here takes a raw cell value and returns a cleaned value, or
None when the input is blank or cannot be interpreted. None of them raise on
bad data; callers treat None as "no data".
"""

import re
import math
import time
import random
import string
import logging
from types import MappingProxyType
from typing import Any, Dict, Optional, Union
from datetime import datetime, timedelta, timezone

from dateutil import parser as date_parser

from config import ASSET_TAG_PREFIX, DIRECTORY_DOMAIN

logger = logging.getLogger(__name__)

# Spreadsheet serial dates count days from 1899-12-30
SPREADSHEET_EPOCH = datetime(1899, 12, 30, tzinfo=timezone.utc)

TZ_OFFSET_NO_COLON = re.compile(r'(:\d{2}(?:\.\d+)?\s?)([+-]\d{2})(\d{2})$')

VOLUME_PATTERN = re.compile(r'Type: "(.*?)"[^(]*\((\d+(?:\.\d+)?)\s*GiB\)', re.IGNORECASE)

LEADING_FLOAT = re.compile(r'^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))')

LOCATION_ABBREVIATIONS = MappingProxyType({
    "CAL": "Calgary",
    "VAN": "Vancouver",
    "TOR": "Toronto",
    "EDM": "Edmonton",
    "MTL": "Montreal",
    "OTT": "Ottawa",
})

VIRTUAL_MARKERS = ("VIRTUAL", "VMWARE", "HYPER-V", "KVM", "QEMU", "XEN", "PARALLELS")

TAG_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


# ============================================================================
# Dates
# ============================================================================

def parse_date(date_str: str) -> Optional[datetime]:
    """
    Parse a date string in any format dateutil understands (ISO-8601,
    US month-first numeric dates, month names, RFC 2822, 12-hour times).

    Args:
        date_str: Raw date text

    Returns:
        Timezone-aware datetime in UTC (naive values are taken as UTC),
        or None if the text is not a recognised date
    """
    if not date_str or not isinstance(date_str, str):
        return None

    s = date_str.strip()
    if not s:
        return None

    try:
        parsed = date_parser.parse(s)
    except (ValueError, OverflowError) as e:
        # ParserError is a ValueError
        logger.debug(f"[Dates] dateutil rejected {s!r}: {e}")
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        return None


def format_iso(value: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision, e.g. 2021-01-01T00:00:00.000Z"""
    value = value.astimezone(timezone.utc)
    # %Y is not zero-padded below year 1000 on every platform
    return f"{value.year:04d}" + value.strftime("-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def to_iso(value: Any) -> Optional[str]:
    """
    Convert a date string or spreadsheet serial number to an ISO-8601 string.

    All-digit values are spreadsheet serial dates (days since 1899-12-30 UTC).
    A trailing numeric offset without a colon ("-0700") is repaired before
    parsing.

    Args:
        value: Raw cell value

    Returns:
        ISO-8601 string, or None on blank or unparseable input
    """
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None

    if s.isdigit():
        try:
            return format_iso(SPREADSHEET_EPOCH + timedelta(days=int(s)))
        except (OverflowError, ValueError):
            logger.debug(f"[Dates] Serial date out of range: {s}")
            return None

    parsed = parse_date(TZ_OFFSET_NO_COLON.sub(r'\1\2:\3', s))
    if parsed is None:
        logger.debug(f"[Dates] Could not parse date: {s!r}")
        return None
    try:
        return format_iso(parsed)
    except (OverflowError, ValueError):
        return None


def parse_contract_date(value: Any) -> Optional[str]:
    """Carrier contract dates: ISO/US formats or compact YYYYMMDD."""
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None

    compact = re.fullmatch(r'(\d{4})(\d{2})(\d{2})', s)
    if compact:
        s = "-".join(compact.groups())
    elif s.isdigit():
        return None
    return to_iso(s)


# ============================================================================
# Sizes
# ============================================================================

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _parse_float(value: Any) -> Optional[float]:
    """Leading-number parse: "15.8 GiB" -> 15.8, "abc" -> None."""
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return None if math.isnan(value) else float(value)
    match = LEADING_FLOAT.match(str(value))
    if not match:
        return None
    return float(match.group(1))


def round_to_common_storage_size(gib: float) -> str:
    """
    Round a capacity in GiB to the nearest commercial storage tier.

    Thresholds sit above the nominal tier so that drives reporting slightly
    less than their label (filesystem overhead) land on the labelled tier.
    """
    if gib > 1800:
        return "2 TB"
    if gib > 900:
        return "1 TB"
    if gib > 450:
        return "512 GB"
    if gib > 230:
        return "256 GB"
    if gib > 110:
        return "128 GB"
    if gib > 55:
        return "64 GB"
    if gib > 28:
        return "32 GB"
    if gib > 14:
        return "16 GB"
    if gib > 6:
        return "8 GB"
    return f"{_round_half_up(gib)} GB"


def simplify_ram(value: Union[str, float, None]) -> Optional[str]:
    """
    Simplify a raw memory value in GiB to the nearest common size label.

    Returns:
        Label such as "16 GB", or None for blank or non-numeric input
    """
    gib = _parse_float(value)
    if gib is None:
        return None

    if gib > 120:
        return "128 GB"
    if gib > 90:
        return "96 GB"
    if gib > 60:
        return "64 GB"
    if gib > 30:
        return "32 GB"
    if gib > 14:
        return "16 GB"
    if gib > 6:
        return "8 GB"
    if gib > 2:
        return "4 GB"
    return f"{_round_half_up(gib)} GB"


def _sum_fixed_volumes(value: Any) -> float:
    total = 0.0
    for volume_type, capacity in VOLUME_PATTERN.findall(str(value)):
        # Only local storage counts
        if volume_type.strip().lower() == "removable disk":
            continue
        total += float(capacity)
    return total


def aggregate_volumes(value: Any) -> Optional[str]:
    """
    Aggregate an RMM "Volumes" cell into a single rounded storage label.

    The cell holds one or more segments like
    'Name: "C:" Type: "Local Disk" ... (476.3 GiB)'. Removable disks are
    excluded from the sum.

    Returns:
        Storage label, or None when no fixed volume capacity is found
    """
    if not value:
        return None
    total = _sum_fixed_volumes(value)
    if total <= 0:
        return None
    return round_to_common_storage_size(total)


def aggregate_server_volumes(value: Any) -> Optional[str]:
    """
    Like aggregate_volumes, but large arrays are reported in TB with one
    decimal instead of being capped at the 2 TB tier.
    """
    if not value:
        return None
    total = _sum_fixed_volumes(value)
    if total <= 0:
        return None
    if total > 1800:
        tb = f"{total / 1024:.1f}"
        if tb.endswith(".0"):
            tb = tb[:-2]
        return f"{tb} TB"
    return round_to_common_storage_size(total)


# ============================================================================
# Identifiers
# ============================================================================

def handle_imei_fallback(serial_number: Optional[str] = None, imei: Optional[str] = None) -> Dict[str, str]:
    """
    Use the IMEI as serial number when the serial number is missing.

    Returns:
        Dict with serialNumber and/or imei keys; empty when neither is present
    """
    has_serial = bool(serial_number and str(serial_number).strip())
    has_imei = bool(imei and str(imei).strip())

    if has_serial and has_imei:
        return {"serialNumber": serial_number, "imei": imei}
    if has_imei:
        return {"serialNumber": imei, "imei": imei}
    if has_serial:
        return {"serialNumber": serial_number}
    return {}


def clean_phone_number(value: Optional[str]) -> Optional[str]:
    """Strip every non-digit character ("+1 (555) 123-4567" -> "15551234567")."""
    if value is None:
        return None
    return re.sub(r'\D', '', str(value))


def normalize_asset_tag(value: Optional[str], prefix: str = ASSET_TAG_PREFIX) -> Optional[str]:
    """
    Numeric-only tags get the organisation prefix and six-digit zero padding
    ("1234" -> "BGC001234"); anything else is upper-cased.
    """
    if value is None:
        return None
    trimmed = str(value).strip()
    if not trimmed:
        return None
    if trimmed.isdigit():
        return f"{prefix}{trimmed.zfill(6)}"
    return trimmed.upper()


def normalize_template_asset_tag(value: Optional[str], prefix: str = ASSET_TAG_PREFIX) -> Optional[str]:
    """normalize_asset_tag, plus the prefix on bare alphanumeric tags ("a12" -> "BGCA12")."""
    tag = normalize_asset_tag(value, prefix)
    if tag is None or tag.isdigit():
        return tag
    if not tag.startswith(prefix) and re.fullmatch(r'[A-Z0-9]+', tag):
        return f"{prefix}{tag}"
    return tag


def extract_domain_username(value: Optional[str], domain: str = DIRECTORY_DOMAIN) -> Optional[str]:
    """Strip the Windows domain from an RMM login ("BGC\\jdoe" -> "jdoe")."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    match = re.search(re.escape(domain) + r'\\(.+)', text, re.IGNORECASE)
    raw = match.group(1) if match else text
    return raw.strip() or None


def strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


# ============================================================================
# Flags and amounts
# ============================================================================

def parse_yes_no(value: Optional[str]) -> Optional[bool]:
    """"y"/"yes"/"true" -> True, other text -> False, blank -> None."""
    if value is None:
        return None
    normalized = str(value).strip().lower()
    if not normalized:
        return None
    return normalized in ("y", "yes", "true")


def parse_price(value: Optional[str]) -> Optional[float]:
    """Parse "$1,299.00" style amounts; None for blank, garbage or negative."""
    if value is None:
        return None
    cleaned = re.sub(r'[$,€£¥\s]', '', str(value))
    if not cleaned:
        return None
    amount = _parse_float(cleaned)
    if amount is None or amount < 0:
        return None
    return amount


# ============================================================================
# Locations and hardware
# ============================================================================

def resolve_location(value: Optional[str]) -> Optional[str]:
    """
    Resolve a city abbreviation ("VAN") or full name ("vancouver") to its
    canonical name. Returns None for unknown locations.
    """
    if value is None:
        return None
    key = str(value).strip().upper()
    if not key:
        return None
    if key in LOCATION_ABBREVIATIONS:
        return LOCATION_ABBREVIATIONS[key]
    for name in LOCATION_ABBREVIATIONS.values():
        if name.upper() == key:
            return name
    return None


def resolve_server_location(display_name: Optional[str]) -> Optional[str]:
    """
    Derive a server's location from its display name.

    Server names start with a site code ("CAL-FS01", "VANSQL02"); a full city
    name anywhere in the name is accepted too.
    """
    if display_name is None:
        return None
    name = str(display_name).strip().upper()
    if not name:
        return None

    match = re.match(r'([A-Z]{3})', name)
    if match and match.group(1) in LOCATION_ABBREVIATIONS:
        return LOCATION_ABBREVIATIONS[match.group(1)]

    for city in LOCATION_ABBREVIATIONS.values():
        if city.upper() in name:
            return city
    return None


def detect_virtualization(system_model: Optional[str]) -> Optional[str]:
    """"VMware Virtual Platform" -> "Virtual", "PowerEdge R740" -> "Physical"."""
    if system_model is None:
        return None
    model = str(system_model).strip().upper()
    if not model:
        return None
    if any(marker in model for marker in VIRTUAL_MARKERS):
        return "Virtual"
    return "Physical"


# ============================================================================
# Asset tags
# ============================================================================

def _timestamp_suffix() -> str:
    return str(int(time.time() * 1000))[-6:]


def _random_suffix(length: int = 3) -> str:
    return "".join(random.choices(TAG_SUFFIX_ALPHABET, k=length))


def generate_asset_tag(prefix: str) -> str:
    """Generic tag "<prefix>-<6 timestamp digits>-<3 random chars>". Not unique."""
    return f"{prefix}-{_timestamp_suffix()}-{_random_suffix()}"


def generate_phone_asset_tag(assigned_user: Optional[str] = None, phone_number: Optional[str] = None) -> str:
    """
    Build a phone asset tag.

    Args:
        assigned_user: Display name or username of the assignee
        phone_number: Used when there is no assignee; the last four digits
            of a number with at least ten digits are used

    Returns:
        "PH-First Last" for display names, "PH-username" for single tokens,
        "PH-1234" from the phone number, or a generated "PH-123456-X7Q"
    """
    user = (assigned_user or "").strip()
    if user:
        parts = user.split()
        if len(parts) >= 2:
            return f"PH-{parts[0]} {parts[-1]}"
        return f"PH-{user}"

    digits = clean_phone_number(phone_number) or ""
    if len(digits) >= 10:
        return f"PH-{digits[-4:]}"

    return generate_asset_tag("PH")
