"""
Tests for the Rogers phone import.
"""

import re
import sys
from pathlib import Path

# Add src to path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from mappings import rogers_mappings


def _row(**overrides):
    row = {
        "Usernames": "jdoe",
        "Subscriber Number": "416-555-0199",
        "Price Plan Description": "Corporate Share 20GB",
        "Device Description": "APLE IP11PM 6425651GR",
        "IMEI": "356789012345678",
        "SIM Card": "89302720401234567890",
        "Commit Start Date": "20230115",
        "Commit End Date": "2025-01-15",
        "HUP Eligible (y/n)": "Y",
        "Account Number": "12345678",
        "Status": "Active",
        "# of Months Remaining": "3",
        "Early Cancellation Fee": "$100.00",
        " Applicable Pre-HUP ": "$0.00",
        "Available HUP Date(s)": "2024-06-01",
    }
    row.update(overrides)
    return row


def test_transform_full_row():
    result = rogers_mappings.transform_row(_row())

    assert result.direct_fields == {
        "assignedToAadId": "jdoe",
        "model": "iPhone 11 Pro Max",
        "make": "Apple",
        "serialNumber": "356789012345678",
        "purchaseDate": "2023-01-15T00:00:00.000Z",
        "assetType": "PHONE",
        "condition": "GOOD",
        "source": "ROGERS",
        "assetTag": "PH-jdoe",
        "status": "ASSIGNED",
    }
    assert result.specifications == {
        "phoneNumber": "4165550199",
        "planType": "Corporate Share 20GB",
        "imei": "356789012345678",
        "simCard": "89302720401234567890",
        "contractEndDate": "2025-01-15T00:00:00.000Z",
        "hupEligible": True,
        "carrier": "Rogers",
        "operatingSystem": "APLE IP11PM 6425651GR",
    }
    assert result.notes == ['Username "jdoe" requires Azure AD lookup']
    assert result.validation_errors == []


def test_galaxy_shorthand_description():
    result = rogers_mappings.transform_row(_row(**{"Device Description": "S21 Grey - 128GB"}))

    assert result.direct_fields["make"] == "Samsung"
    assert result.direct_fields["model"] == "Galaxy S21"
    assert result.specifications["storage"] == "128GB"


def test_hup_not_eligible():
    result = rogers_mappings.transform_row(_row(**{"HUP Eligible (y/n)": "n"}))
    assert result.specifications["hupEligible"] is False


def test_unassigned_phone():
    result = rogers_mappings.transform_row(_row(Usernames="   "))

    assert result.direct_fields["status"] == "AVAILABLE"
    assert re.fullmatch(r'PH-\d{6}-[A-Z0-9]{3}', result.direct_fields["assetTag"])


def test_ignored_columns_do_not_leak():
    result = rogers_mappings.transform_row(_row())
    stored = set(result.direct_fields) | set(result.specifications) | set(result.custom_fields)
    assert "" not in stored
    assert result.custom_fields == {}


def test_missing_account_number():
    row = _row()
    del row["Account Number"]
    result = rogers_mappings.transform_row(row)

    assert result.validation_errors == ["Required field assetType is missing"]
    assert result.direct_fields["assetType"] == "PHONE"


def test_validate():
    assert rogers_mappings.validate({"model": "iPhone 11", "imei": "3567", "serialNumber": "3567"}) == []
    assert rogers_mappings.validate({"model": "iPhone 11"}) == [
        "IMEI is required",
        "Either Serial Number or IMEI is required",
    ]


def test_get_mapping():
    assert rogers_mappings.get_mapping("Commit Start Date").target_field == "purchaseDate"
    assert rogers_mappings.get_mapping("Device Description").target_field == "model"
