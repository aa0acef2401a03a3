import pytest

from challanbook.validators import (
    parse_iso_date,
    to_number,
    validate_challan,
    validate_company,
    validate_products,
    validate_supplier,
)


def valid_supplier(**kwargs):
    data = {"name": "Sharma Yarns", "phone": "9876543210", "address": "12 Mill Road, Surat"}
    data.update(kwargs)
    return data


def valid_company(**kwargs):
    data = {
        "name": "Acme Textiles",
        "address": "Ring Road, Surat",
        "phone": "0261234567",
        "email": "accounts@acme.in",
    }
    data.update(kwargs)
    return data


def test_valid_supplier_passes():
    assert validate_supplier(valid_supplier()) == []


def test_supplier_short_phone_is_rejected():
    errors = validate_supplier(valid_supplier(phone="12345"))
    assert len(errors) == 1
    assert "phone" in errors[0].lower()


@pytest.mark.parametrize("phone", ["98765 43210", "+919876543210", "98765432101", "abcdefghij"])
def test_supplier_phone_must_be_exactly_ten_digits(phone):
    assert validate_supplier(valid_supplier(phone=phone)) == ["Phone number must be 10 digits"]


def test_supplier_reports_every_problem():
    errors = validate_supplier({"name": " ", "phone": "", "address": "", "gst": "bad"})
    assert errors == [
        "Name is required",
        "Phone number is required",
        "Address is required",
        "GST number must be 15 characters (digits and capital letters)",
    ]


def test_supplier_gst_is_optional_but_checked():
    assert validate_supplier(valid_supplier(gst="")) == []
    assert validate_supplier(valid_supplier(gst="24AAACA1234A1Z5")) == []
    assert len(validate_supplier(valid_supplier(gst="24aaaca1234a1z5"))) == 1


def test_valid_company_passes():
    assert validate_company(valid_company()) == []


def test_company_requires_valid_email():
    assert validate_company(valid_company(email="")) == ["Email is required"]
    assert validate_company(valid_company(email="accounts@acme")) == ["Email format invalid"]


def test_company_missing_fields():
    errors = validate_company({})
    assert "Company name is required" in errors
    assert "Address is required" in errors
    assert "Phone number is required" in errors
    assert "Email is required" in errors


def test_valid_challan_passes(challan_form):
    assert validate_challan(challan_form()) == []


def test_challan_header_rules(challan_form):
    errors = validate_challan(challan_form(customer_name="", customer_phone="12345", date="10/01/2024"))
    assert errors == [
        "Customer name is required",
        "Invalid phone number format, it must be 10 digits",
        "Challan date must be a valid date (YYYY-MM-DD)",
    ]


def test_challan_needs_a_product(challan_form):
    assert validate_challan(challan_form(products=[])) == ["At least one product is required"]


def test_product_line_rules():
    errors = validate_products([
        {"name": "Cotton", "quantity": 0, "price": 10},
        {"name": "", "quantity": 1, "price": 10},
        {"name": "Silk", "quantity": "two", "price": -1},
        "not a product",
    ])
    assert errors == [
        "Invalid quantity for Cotton",
        "Product name is required for item 2",
        "Invalid quantity for Silk",
        "Invalid price for Silk",
        "Invalid product line for item 4",
    ]


def test_to_number():
    assert to_number("2.5") == 2.5
    assert to_number(3) == 3.0
    assert to_number("") is None
    assert to_number("nan") is None
    assert to_number(True) is None
    assert to_number(None) is None


def test_parse_iso_date():
    assert parse_iso_date("2024-02-29").isoformat() == "2024-02-29"
    assert parse_iso_date("2023-02-29") is None
    assert parse_iso_date("yesterday") is None


@pytest.mark.parametrize("value", ["inf", "-inf", "Infinity", float("inf"), "1e400"])
def test_to_number_rejects_non_finite(value):
    assert to_number(value) is None


def test_infinite_quantity_is_rejected():
    errors = validate_products([{"name": "Bolt", "quantity": "inf", "price": "10"}])
    assert errors == ["Invalid quantity for Bolt"]


def test_overflowing_line_total_is_rejected():
    errors = validate_products([{"name": "Bolt", "quantity": "1e308", "price": "1e308"}])
    assert errors == ["Amount is too large for Bolt"]


def test_overflowing_challan_total_is_rejected():
    errors = validate_products([
        {"name": "Bolt", "quantity": "1e308", "price": "1"},
        {"name": "Nut", "quantity": "1e308", "price": "1"},
    ])
    assert errors == ["Challan total is too large"]


@pytest.mark.parametrize("phone", ["१२३४५६७८९०", "٠١٢٣٤٥٦٧٨٩"])
def test_phone_accepts_ascii_digits_only(phone, challan_form):
    assert validate_supplier(valid_supplier(phone=phone)) == ["Phone number must be 10 digits"]
    assert validate_company(valid_company(phone=phone)) == ["Phone number must be 10 digits"]
    assert validate_challan(challan_form(customer_phone=phone)) == [
        "Invalid phone number format, it must be 10 digits"
    ]