"""
Device-name inference for phone and tablet imports.

Carrier exports describe devices with free text such as
"SAMSUNG GALAXY S23 128GB BLACK" or "APLE IP11PM 6425651GR". This module
extracts make, model and storage from that text with an ordered cascade of
patterns. Order matters: the first pattern whose predicate accepts the text
wins, so the cascades are plain tuples evaluated in sequence.
"""

import re
import logging
from typing import Callable, NamedTuple, Optional, Sequence

from schema import ParsedDevice

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

STORAGE_TOKEN = re.compile(r'(\d+)(?:GB|TB)')

# Color / finish tokens dropped from iPad and Watch descriptions
IPAD_NOISE = frozenset({
    "SPACE", "SPC", "GRAY", "GRY", "GREY", "SILVER", "SLV", "ARTL", "TL", "ML",
    "AL", "TI", "BLK", "MID", "ROSE", "GOLD", "STARLIGHT", "MIDNIGHT",
})
WATCH_NOISE = frozenset({
    "SPACE", "SPC", "GRAY", "GRY", "GREY", "BLACK", "BLK", "MID", "BLUE", "RED",
    "PINK", "ORANGE", "YELLOW", "WHITE", "SILVER", "STAINLESS", "MIDNIGHT",
    "STARLIGHT",
})

# Manufacturer keywords scanned when no pattern recognised the text
BRAND_KEYWORDS = (
    (("SAMSUNG",), "Samsung"),
    (("APPLE", "IPHONE", "IPAD"), "Apple"),
    (("GOOGLE", "PIXEL"), "Google"),
    (("ONEPLUS",), "OnePlus"),
    (("HUAWEI",), "Huawei"),
    (("MOTOROLA", "MOTO "), "Motorola"),
)


class DeviceText(NamedTuple):
    """The views of one device description that patterns match against."""
    original: str      # trimmed input, original casing
    upper: str         # upper-cased input
    normalized: str    # upper-cased, "SWAP " and storage token removed, "SS " expanded
    compact: str       # upper-cased with everything but A-Z0-9 removed
    storage: Optional[str]

    @classmethod
    def from_text(cls, text: str) -> "DeviceText":
        original = text.strip()
        upper = original.upper()

        normalized = upper
        if normalized.startswith("SWAP "):
            normalized = normalized[5:]

        storage = None
        match = STORAGE_TOKEN.search(normalized)
        if match:
            storage = f"{match.group(1)}GB"
            normalized = normalized.replace(match.group(0), "", 1).strip()

        if normalized.startswith("SS "):
            normalized = "SAMSUNG " + normalized[3:]

        compact = re.sub(r'[^A-Z0-9]', '', upper)
        return cls(original, upper, normalized, compact, storage)


class DevicePattern(NamedTuple):
    name: str
    predicate: Callable[[DeviceText], bool]
    extractor: Callable[[DeviceText], ParsedDevice]


def _title_word(word: str) -> str:
    return word[:1] + word[1:].lower()


def _title_words(text: str) -> str:
    return " ".join(_title_word(w) for w in text.split())


def _strip_apple(text: str) -> str:
    return re.sub(r'^APPLE\s+', '', text)


# ============================================================================
# Shared brand cascade
# ============================================================================

def _extract_iphone(device: DeviceText) -> ParsedDevice:
    match = re.search(r'IPHONE\s+(\d+(?:\s+(?:PRO|PLUS|MINI|MAX))*)', device.normalized)
    if match:
        return ParsedDevice("Apple", f"iPhone {_title_words(match.group(1))}", device.storage)
    return ParsedDevice("Apple", "iPhone", device.storage)


def _extract_ipad(device: DeviceText) -> ParsedDevice:
    words = [w for w in _strip_apple(device.normalized).split() if w not in IPAD_NOISE]
    return ParsedDevice("Apple", _title_words(" ".join(words)), device.storage)


def _extract_watch(device: DeviceText) -> ParsedDevice:
    # ULTRA, SERIES, SE and generation digits are not noise and survive
    words = [w for w in _strip_apple(device.normalized).split() if w not in WATCH_NOISE]
    return ParsedDevice("Apple", _title_words(" ".join(words)), device.storage)


def _extract_galaxy(device: DeviceText) -> ParsedDevice:
    match = re.search(r'GALAXY\s+([A-Z]\d+(?:\s+(?:PLUS|ULTRA|FE))*)', device.normalized)
    if match:
        return ParsedDevice("Samsung", f"Galaxy {_title_words(match.group(1))}", device.storage)
    return ParsedDevice("Samsung", "Galaxy", device.storage)


def _extract_pixel(device: DeviceText) -> ParsedDevice:
    match = re.search(r'PIXEL\s+(\d+[A-Z]*(?:\s+(?:PRO|XL))*)', device.normalized)
    if match:
        return ParsedDevice("Google", f"Pixel {_title_words(match.group(1))}", device.storage)
    return ParsedDevice("Google", "Pixel", device.storage)


SHARED_PATTERNS = (
    DevicePattern("iphone", lambda d: "IPHONE" in d.normalized, _extract_iphone),
    DevicePattern("ipad", lambda d: "IPAD" in d.normalized, _extract_ipad),
    DevicePattern("watch", lambda d: "WATCH" in d.normalized, _extract_watch),
    DevicePattern(
        "samsung_galaxy",
        lambda d: "SAMSUNG" in d.normalized and "GALAXY" in d.normalized,
        _extract_galaxy,
    ),
    DevicePattern("pixel", lambda d: "PIXEL" in d.normalized, _extract_pixel),
)


# ============================================================================
# Carrier abbreviations (run-together codes such as "APLE IP11PM")
# ============================================================================

def _bare_storage(device: DeviceText, sizes: str = "32|64|128|256|512") -> Optional[str]:
    match = re.search(rf'\b({sizes})\b', device.upper)
    if match:
        return f"{match.group(1)}GB"
    return device.storage


def _extract_ipad_pro_code(device: DeviceText) -> ParsedDevice:
    size = re.search(r'IPDP(\d{1,2})?', device.compact).group(1)
    model = f'iPad Pro {size}"' if size else "iPad Pro"
    return ParsedDevice("Apple", model, _bare_storage(device))


def _extract_ipad_air_code(device: DeviceText) -> ParsedDevice:
    size = re.search(r'IPADAIR(\d{2,3})?', device.upper).group(1)
    return ParsedDevice("Apple", "iPad Air", f"{size}GB" if size else device.storage)


def _extract_ipad_pro_text(device: DeviceText) -> ParsedDevice:
    size = re.search(r'IPAD\s+PRO(?:\s+(\d{1,2}(?:\.\d+)?)\b)?', device.upper).group(1)
    model = f"iPad Pro {size}" if size else "iPad Pro"
    return ParsedDevice("Apple", model, _bare_storage(device))


def _extract_ipad_code(device: DeviceText) -> ParsedDevice:
    match = re.search(r'IPAD([A-Z]*)(\d{2,3})?', device.upper)
    subtype = match.group(1)
    nice = {"PRO": "Pro", "MINI": "mini", "AIR": "Air"}.get(subtype, _title_word(subtype))
    model = f"iPad {nice}" if nice else "iPad"
    storage = f"{match.group(2)}GB" if match.group(2) else device.storage
    return ParsedDevice("Apple", model, storage)


IPHONE_SUFFIXES = {
    "P": " Pro",
    "PRO": " Pro",
    "PM": " Pro Max",
    "PROMAX": " Pro Max",
    "PLUS": " Plus",
}

# IP5x / IP6x are ingress protection ratings, not iPhone generations
IPHONE_CODE = re.compile(r'\bIP(?![56]\d(?![A-Z0-9]))(\d{2})(PROMAX|PRO|PLUS|PM|P)?')

NON_APPLE_BRANDS = ("SAMSUNG", "GALAXY", "PIXEL", "GOOGLE")


def _is_iphone_code(device: DeviceText) -> bool:
    if any(brand in device.normalized for brand in NON_APPLE_BRANDS):
        return False
    return IPHONE_CODE.search(device.upper) is not None


def _extract_iphone_code(device: DeviceText) -> ParsedDevice:
    match = IPHONE_CODE.search(device.upper)
    suffix = IPHONE_SUFFIXES.get(match.group(2) or "", "")
    return ParsedDevice("Apple", f"iPhone {match.group(1)}{suffix}", _bare_storage(device, "64|128|256|512"))


def _extract_galaxy_shorthand(device: DeviceText) -> ParsedDevice:
    code = re.match(r'S\d+[A-Z]*', device.upper).group(0)
    return ParsedDevice("Samsung", f"Galaxy {code}", device.storage)


CARRIER_PATTERNS = (
    DevicePattern("ipad_pro_code", lambda d: "IPDP" in d.compact, _extract_ipad_pro_code),
    DevicePattern("ipad_air_code", lambda d: "IPADAIR" in d.upper, _extract_ipad_air_code),
    DevicePattern(
        "ipad_pro_text",
        lambda d: re.search(r'IPAD\s+PRO\b', d.upper) is not None,
        _extract_ipad_pro_text,
    ),
    DevicePattern("ipad_code", lambda d: "IPAD" in d.upper, _extract_ipad_code),
    DevicePattern("iphone_code", _is_iphone_code, _extract_iphone_code),
    DevicePattern(
        "galaxy_shorthand",
        lambda d: re.match(r'S\d+', d.upper) is not None,
        _extract_galaxy_shorthand,
    ),
)


# ============================================================================
# Public API
# ============================================================================

def match_device_pattern(device: DeviceText, patterns: Sequence[DevicePattern]) -> Optional[ParsedDevice]:
    """
    Run a cascade against a prepared description.

    Returns:
        Result of the first pattern whose predicate accepts the text,
        or None if no pattern matched
    """
    for pattern in patterns:
        if pattern.predicate(device):
            parsed = pattern.extractor(device)
            logger.debug(f"[Device Inference] '{device.original}' matched {pattern.name}: {parsed}")
            return parsed
    return None


def generic_device(device: DeviceText) -> ParsedDevice:
    """First word as manufacturer, original text as model."""
    words = device.normalized.split()
    if not words:
        return ParsedDevice(UNKNOWN, device.original, device.storage)
    return ParsedDevice(_title_word(words[0]), device.original, device.storage)


def scan_brand_keywords(text: str) -> Optional[str]:
    """Find a manufacturer keyword anywhere in the text."""
    upper = text.upper()
    if upper.startswith("SS "):
        return "Samsung"
    for keywords, make in BRAND_KEYWORDS:
        if any(keyword in upper for keyword in keywords):
            return make
    return None


def parse_device_name(device_name: Optional[str]) -> ParsedDevice:
    """
    Parse a device description into make, model and storage.

    Args:
        device_name: Free-text description, e.g. "IPHONE 14 PRO 256GB SPACE BLACK"

    Returns:
        ParsedDevice; ("Unknown", "Unknown") for empty input. When no brand
        pattern matches, the first word becomes the make and the original
        text the model.
    """
    if device_name is None or not str(device_name).strip():
        return ParsedDevice(UNKNOWN, UNKNOWN)

    device = DeviceText.from_text(str(device_name))
    parsed = match_device_pattern(device, SHARED_PATTERNS)
    if parsed is not None:
        return parsed

    logger.debug(f"[Device Inference] No brand pattern for '{device.original}', using first word")
    return generic_device(device)


def parse_carrier_device_name(device_name: Optional[str]) -> ParsedDevice:
    """
    Carrier variant of parse_device_name.

    Tries run-together abbreviations ("APLE IP11PM", "IPADAIR128", "S21 Grey")
    before the shared cascade, and when both fail, replaces the first-word
    make with a manufacturer keyword found anywhere in the text.
    """
    if device_name is None or not str(device_name).strip():
        return ParsedDevice(UNKNOWN, UNKNOWN)

    device = DeviceText.from_text(str(device_name))
    parsed = match_device_pattern(device, CARRIER_PATTERNS + SHARED_PATTERNS)
    if parsed is not None:
        return parsed

    fallback = generic_device(device)
    make = scan_brand_keywords(device.upper)
    if make:
        logger.debug(f"[Device Inference] Brand keyword in '{device.original}': {make}")
        return fallback._replace(make=make)
    return fallback
