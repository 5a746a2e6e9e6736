"""
Tests for device-name inference (make / model / storage extraction).
"""

import sys
from pathlib import Path

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from inference import (
    DeviceText,
    SHARED_PATTERNS,
    match_device_pattern,
    parse_carrier_device_name,
    parse_device_name,
    scan_brand_keywords,
)
from schema import ParsedDevice


# ============================================================================
# Shared cascade
# ============================================================================

def test_parse_samsung_galaxy():
    assert parse_device_name("SAMSUNG GALAXY S23 128GB BLACK") == ParsedDevice("Samsung", "Galaxy S23", "128GB")


def test_parse_samsung_alias_and_suffix():
    assert parse_device_name("SS GALAXY S24 ULTRA 256GB TITANIUM") == ParsedDevice(
        "Samsung", "Galaxy S24 Ultra", "256GB"
    )


def test_parse_iphone_with_suffix():
    assert parse_device_name("IPHONE 14 PRO 256GB SPACE BLACK") == ParsedDevice("Apple", "iPhone 14 Pro", "256GB")
    assert parse_device_name("iPhone 15 Pro Max 512GB") == ParsedDevice("Apple", "iPhone 15 Pro Max", "512GB")


def test_parse_swap_prefix_is_ignored():
    assert parse_device_name("SWAP IPHONE 13 128GB MIDNIGHT") == ParsedDevice("Apple", "iPhone 13", "128GB")


def test_parse_pixel():
    assert parse_device_name("PIXEL 6A 64GB CHARCOAL") == ParsedDevice("Google", "Pixel 6a", "64GB")
    assert parse_device_name("GOOGLE PIXEL 7 PRO 128GB OBSIDIAN") == ParsedDevice("Google", "Pixel 7 Pro", "128GB")


def test_parse_ipad_strips_color_tokens():
    assert parse_device_name("APPLE IPAD AIR 64GB SPACE GRAY") == ParsedDevice("Apple", "Ipad Air", "64GB")


def test_parse_watch_keeps_identifiers():
    parsed = parse_device_name("APPLE WATCH SERIES 9 45MM MIDNIGHT")
    assert parsed.make == "Apple"
    assert parsed.model == "Watch Series 9 45mm"
    assert parsed.storage is None


def test_parse_terabyte_storage_keeps_gb_unit():
    assert parse_device_name("IPHONE 15 PRO 1TB").storage == "1GB"


def test_parse_empty_input():
    assert parse_device_name("") == ParsedDevice("Unknown", "Unknown")
    assert parse_device_name("   ") == ParsedDevice("Unknown", "Unknown")
    assert parse_device_name(None) == ParsedDevice("Unknown", "Unknown")
    assert parse_device_name("").to_dict() == {"make": "Unknown", "model": "Unknown"}


def test_parse_unrecognised_uses_first_word():
    assert parse_device_name("MOTOROLA EDGE 2023") == ParsedDevice("Motorola", "MOTOROLA EDGE 2023")
    assert parse_device_name("UNKNOWN DEVICE 64GB") == ParsedDevice("Unknown", "UNKNOWN DEVICE 64GB", "64GB")


def test_match_device_pattern_returns_none_without_match():
    assert match_device_pattern(DeviceText.from_text("NOKIA 3310"), SHARED_PATTERNS) is None


def test_device_text_views():
    device = DeviceText.from_text(" swap ss galaxy s22 128GB ")
    assert device.original == "swap ss galaxy s22 128GB"
    assert device.normalized == "SAMSUNG GALAXY S22"
    assert device.compact == "SWAPSSGALAXYS22128GB"
    assert device.storage == "128GB"


# ============================================================================
# Carrier variant
# ============================================================================

def test_carrier_iphone_code():
    parsed = parse_carrier_device_name("APLE IP11PM 6425651GR")
    assert parsed.make == "Apple"
    assert parsed.model == "iPhone 11 Pro Max"


def test_carrier_iphone_code_with_storage():
    assert parse_carrier_device_name("APL IP13P 128 GRAPHITE") == ParsedDevice("Apple", "iPhone 13 Pro", "128GB")


def test_carrier_ingress_rating_is_not_an_iphone():
    assert parse_carrier_device_name("SAMSUNG GALAXY XCOVER6 PRO IP68 64GB") == ParsedDevice(
        "Samsung", "Galaxy", "64GB"
    )
    assert parse_carrier_device_name("CAT S62 PRO IP68").make == "Cat"


def test_carrier_ipad_codes():
    assert parse_carrier_device_name("APL IPDP11 256 SG") == ParsedDevice("Apple", 'iPad Pro 11"', "256GB")
    assert parse_carrier_device_name("IPADAIR128") == ParsedDevice("Apple", "iPad Air", "128GB")
    assert parse_carrier_device_name("IPADMINI64") == ParsedDevice("Apple", "iPad mini", "64GB")


def test_carrier_galaxy_shorthand():
    assert parse_carrier_device_name("S21 Grey - 128GB") == ParsedDevice("Samsung", "Galaxy S21", "128GB")


def test_carrier_falls_through_to_shared_cascade():
    assert parse_carrier_device_name("SAMSUNG GALAXY S23 128GB BLACK") == ParsedDevice(
        "Samsung", "Galaxy S23", "128GB"
    )


def test_carrier_brand_keyword_scan():
    parsed = parse_carrier_device_name("ONEPLUS 11 5G")
    assert parsed.make == "OnePlus"
    assert parsed.model == "ONEPLUS 11 5G"


def test_carrier_unknown_device():
    assert parse_carrier_device_name("Unknown Device Model").make == "Unknown"
    assert parse_carrier_device_name("") == ParsedDevice("Unknown", "Unknown")


def test_scan_brand_keywords():
    assert scan_brand_keywords("ss a54") == "Samsung"
    assert scan_brand_keywords("refurb pixel") == "Google"
    assert scan_brand_keywords("nokia") is None
