import pytest

from arthavidhi.core.errors import ValidationError
from arthavidhi.models.company_model import Company
from arthavidhi.schemas.company_schema import COMPANY_PLACEHOLDER
from arthavidhi.services.company_service import get_company, get_company_details, upsert_company


def test_placeholder_when_no_profile(db):
    details = get_company_details(db, 1)

    assert details.name == "Your Company Name"
    assert details.address == "123 Business Rd, Kathmandu"
    assert details.vat_number == "987654321"
    assert details.id is None


def test_placeholder_is_a_copy(db):
    details = get_company_details(db, 1)
    details.name = "Changed"
    assert COMPANY_PLACEHOLDER.name == "Your Company Name"


def test_upsert_inserts_then_updates_in_place(db):
    created = upsert_company(
        db,
        1,
        {
            "name": "Haitomns Groups",
            "address": "Lakeside, Pokhara",
            "phone": "9856000000",
            "email": "billing@haitomns.com",
            "pan_number": "609876543",
            "vat_number": "300000001",
        },
    )
    updated = upsert_company(db, 1, {"name": "Haitomns Groups Pvt. Ltd.", "email": ""})

    assert updated.id == created.id
    assert updated.name == "Haitomns Groups Pvt. Ltd."
    assert updated.address is None
    assert db.query(Company).count() == 1
    assert get_company(db, 1).name == "Haitomns Groups Pvt. Ltd."


def test_saved_profile_replaces_placeholder(db):
    upsert_company(db, 1, {"name": "Haitomns Groups"})
    assert get_company_details(db, 1).name == "Haitomns Groups"


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "H"},
        {"name": "Haitomns Groups", "email": "not-an-email"},
        {},
    ],
)
def test_upsert_rejects_invalid_details(db, payload):
    with pytest.raises(ValidationError) as exc:
        upsert_company(db, 1, payload)

    assert exc.value.message.startswith("Invalid company details!")
    assert db.query(Company).count() == 0
