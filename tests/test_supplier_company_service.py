import pytest

from challanbook.exceptions import ConflictError, RecordNotFound, ValidationFailed
from challanbook.services import company_service, supplier_service


def supplier_data(**kwargs):
    data = {"name": "Sharma Yarns", "phone": "9876543210", "address": "12 Mill Road, Surat", "gst": ""}
    data.update(kwargs)
    return data


def company_data(**kwargs):
    data = {
        "name": "Acme Textiles",
        "address": "Ring Road, Surat",
        "phone": "0261234567",
        "email": "accounts@acme.in",
        "gst": "24AAACA1234A1Z5",
        "logo_url": "",
    }
    data.update(kwargs)
    return data


async def test_add_supplier_drops_empty_gst():
    supplier = await supplier_service.add_supplier(supplier_data(name="  Sharma Yarns "))

    assert supplier.name == "Sharma Yarns"
    assert supplier.gst is None
    assert supplier.version == 1


async def test_suppliers_listed_by_name():
    for name in ("Zeta Dyes", "Alpha Looms", "Mehta Fabrics"):
        await supplier_service.add_supplier(supplier_data(name=name))

    suppliers = await supplier_service.list_suppliers()

    assert [s.name for s in suppliers] == ["Alpha Looms", "Mehta Fabrics", "Zeta Dyes"]


async def test_invalid_supplier_is_not_stored():
    with pytest.raises(ValidationFailed) as exc_info:
        await supplier_service.add_supplier(supplier_data(phone="12345"))

    assert exc_info.value.errors == ["Phone number must be 10 digits"]
    assert await supplier_service.list_suppliers() == []


async def test_update_supplier_with_version_check():
    supplier = await supplier_service.add_supplier(supplier_data())

    updated = await supplier_service.update_supplier(supplier.id, {"gst": "24AAACA1234A1Z5"}, expected_version=1)
    assert updated.gst == "24AAACA1234A1Z5"
    assert updated.version == 2

    with pytest.raises(ConflictError):
        await supplier_service.update_supplier(supplier.id, {"address": "Elsewhere"}, expected_version=1)

    stored = await supplier_service.get_supplier(supplier.id)
    assert stored.address == "12 Mill Road, Surat"


async def test_clearing_gst_removes_it():
    supplier = await supplier_service.add_supplier(supplier_data(gst="24AAACA1234A1Z5"))

    updated = await supplier_service.update_supplier(supplier.id, {"gst": ""})

    assert updated.gst is None


async def test_delete_supplier():
    supplier = await supplier_service.add_supplier(supplier_data())

    await supplier_service.delete_supplier(supplier.id)

    with pytest.raises(RecordNotFound) as exc_info:
        await supplier_service.get_supplier(supplier.id)
    assert exc_info.value.message == "Supplier not found"


async def test_company_absent_until_saved(user):
    assert await company_service.get_company(user.uid) is None


async def test_company_save_creates_then_overwrites(user, mongo):
    await company_service.save_company(user.uid, company_data())
    await company_service.save_company(user.uid, company_data(name="Acme Textiles Pvt Ltd", gst=""))

    company = await company_service.get_company(user.uid)

    assert company.name == "Acme Textiles Pvt Ltd"
    assert company.gst is None
    assert company.logo_url is None
    assert await mongo["companies"].count_documents({}) == 1


async def test_company_profiles_are_per_user(user):
    await company_service.save_company(user.uid, company_data())

    assert await company_service.get_company("someone-else") is None


async def test_invalid_company_is_not_saved(user):
    with pytest.raises(ValidationFailed) as exc_info:
        await company_service.save_company(user.uid, company_data(email="not-an-email", phone=""))

    assert exc_info.value.errors == ["Phone number is required", "Email format invalid"]
    assert await company_service.get_company(user.uid) is None
