"""
Tests for the import source registry, end to end from raw rows.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from mappings import NINJA_ONE_SERVER_MAPPINGS, TELUS_PHONE_MAPPINGS
from schema import ValidationResult
from sources import (
    SourceType,
    UnsupportedSourceError,
    detect_source_type,
    get_mappings,
    get_supported_sources,
    get_transformer,
    is_source_supported,
    transform_many,
    transform_row,
    validate_data,
)

TELUS_ROW = {
    "Subscriber Name": "John Doe",
    "Phone Number": "555-123-4567",
    "Rate Plan": "Business Plan",
    "Device Name": "SAMSUNG GALAXY S23 128GB BLACK",
    "IMEI": "123456789012345",
    "BAN": "12345",
}


def test_supported_sources():
    assert get_supported_sources() == ["telus", "rogers", "ninjaone", "ninjaone-servers", "bgc-template"]


def test_is_source_supported():
    assert is_source_supported("telus")
    assert is_source_supported(" ROGERS ")
    assert is_source_supported(SourceType.NINJAONE_SERVERS)
    assert not is_source_supported("sap")
    assert not is_source_supported(None)


def test_unsupported_source_raises():
    with pytest.raises(UnsupportedSourceError):
        get_transformer("sap")
    with pytest.raises(ValueError):
        transform_row("sap", {})


def test_transform_row_end_to_end():
    result = transform_row("telus", TELUS_ROW)
    payload = result.to_dict()

    direct = payload["directFields"]
    assert direct["make"] == "Samsung"
    assert direct["model"] == "Galaxy S23"
    assert direct["serialNumber"] == "123456789012345"
    assert direct["assetType"] == "PHONE"
    assert direct["assetTag"] == "PH-John Doe"
    assert direct["status"] == "ASSIGNED"
    assert direct["source"] == "TELUS"

    specs = payload["specifications"]
    assert specs["phoneNumber"] == "5551234567"
    assert specs["storage"] == "128GB"
    assert specs["imei"] == "123456789012345"
    assert specs["carrier"] == "Telus"

    assert payload["validationErrors"] == []


def test_transform_many_keeps_rows_independent():
    bad_row = dict(TELUS_ROW)
    del bad_row["IMEI"]

    results = transform_many(SourceType.TELUS, [TELUS_ROW, bad_row, TELUS_ROW])

    assert len(results) == 3
    assert results[0].is_valid
    assert not results[1].is_valid
    assert results[2].is_valid
    assert transform_many("rogers", []) == []


def test_server_source_uses_server_rules():
    row = {"Display Name": "VAN-SQL01", "Role": "LINUX_SERVER", "Serial Number": "SRV1"}
    result = transform_row("ninjaone-servers", row)

    assert result.direct_fields["assetType"] == "SERVER"
    assert result.direct_fields["locationName"] == "Vancouver"
    assert result.direct_fields["status"] == "ASSIGNED"


def test_get_mappings():
    assert get_mappings("telus") is TELUS_PHONE_MAPPINGS
    assert get_mappings(SourceType.NINJAONE_SERVERS) is NINJA_ONE_SERVER_MAPPINGS


def test_validate_data():
    valid = validate_data("bgc-template", {"serialNumber": "ABC"})
    invalid = validate_data("ninjaone", {"assetTag": "BGC000001"})

    assert valid == ValidationResult(is_valid=True, errors=[])
    assert not invalid.is_valid
    assert invalid.errors == ["Serial Number is required", "Asset Type is required"]


def test_detect_source_type():
    assert detect_source_type(["BAN", "Device Name", "IMEI", "Subscriber Name"]) is SourceType.TELUS
    assert detect_source_type(["Account Number", "Device Description", "imei "]) is SourceType.ROGERS
    assert detect_source_type(["Display Name", "Role", "Serial Number", "RAM"]) is SourceType.NINJAONE
    assert detect_source_type(["Service Tag", "Brand ", "Model"]) is SourceType.TEMPLATE
    assert detect_source_type(["Name", "Email"]) is None
