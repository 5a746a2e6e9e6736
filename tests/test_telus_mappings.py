"""
Tests for the Telus phone import.
"""

import re
import sys
from pathlib import Path

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from mappings import telus_mappings
from schema import TargetKind


def _row(**overrides):
    row = {
        "Subscriber Name": "John Doe",
        "Phone Number": "(555) 123-4567",
        "Rate Plan": "Business Unlimited",
        "Device Name": "SAMSUNG GALAXY S23 128GB BLACK",
        "IMEI": "123456789012345",
        "Contract end date": "2025-12-31",
        "BAN": "987654",
        "Status": "Active",
    }
    row.update(overrides)
    return row


def test_transform_full_row():
    result = telus_mappings.transform_row(_row())

    assert result.direct_fields == {
        "assignedToAadId": "John Doe",
        "model": "Galaxy S23",
        "make": "Samsung",
        "serialNumber": "123456789012345",
        "assetType": "PHONE",
        "condition": "GOOD",
        "source": "TELUS",
        "assetTag": "PH-John Doe",
        "status": "ASSIGNED",
    }
    assert result.specifications == {
        "phoneNumber": "5551234567",
        "planType": "Business Unlimited",
        "storage": "128GB",
        "imei": "123456789012345",
        "contractEndDate": "2025-12-31T00:00:00.000Z",
        "carrier": "Telus",
        "operatingSystem": "SAMSUNG GALAXY S23 128GB BLACK",
    }
    assert result.notes == ['Username "John Doe" requires Azure AD lookup']
    assert result.validation_errors == []


def test_unassigned_phone():
    result = telus_mappings.transform_row(_row(**{"Subscriber Name": ""}))

    assert result.direct_fields["status"] == "AVAILABLE"
    assert re.fullmatch(r'PH-\d{6}-[A-Z0-9]{3}', result.direct_fields["assetTag"])
    assert "assignedToAadId" not in result.direct_fields
    assert result.notes == []


def test_missing_imei():
    row = _row()
    del row["IMEI"]
    result = telus_mappings.transform_row(row)

    assert "Required field imei is missing" in result.validation_errors
    assert "serialNumber" not in result.direct_fields
    assert "imei" not in result.specifications


def test_missing_ban_still_a_phone():
    row = _row()
    del row["BAN"]
    result = telus_mappings.transform_row(row)

    assert result.validation_errors == ["Required field assetType is missing"]
    assert result.direct_fields["assetType"] == "PHONE"


def test_contract_end_date_with_time():
    result = telus_mappings.transform_row(_row(**{"Contract end date": "Dec 31 2025 11:59 PM"}))

    assert result.specifications["contractEndDate"] == "2025-12-31T23:59:00.000Z"
    assert result.validation_errors == []


def test_missing_device_name():
    result = telus_mappings.transform_row(_row(**{"Device Name": ""}))

    assert "Required field model is missing" in result.validation_errors
    assert "operatingSystem" not in result.specifications


def test_status_column_ignored():
    result = telus_mappings.transform_row(_row(Status="Suspended"))
    assert "Suspended" not in result.direct_fields.values()
    assert "Suspended" not in result.specifications.values()


def test_validate():
    assert telus_mappings.validate({"model": "Galaxy S23", "imei": "1", "serialNumber": "1"}) == []
    assert telus_mappings.validate({}) == [
        "Device model is required",
        "IMEI is required",
        "Either Serial Number or IMEI is required",
    ]
    assert telus_mappings.validate({"model": "Galaxy S23", "serialNumber": "SN"}) == ["IMEI is required"]


def test_get_mapping():
    mapping = telus_mappings.get_mapping("Device Name")
    assert mapping.target_field == "model"
    assert mapping.required
    assert telus_mappings.get_mapping("Status").target_kind is TargetKind.IGNORE
    assert telus_mappings.get_mapping("Nope") is None
