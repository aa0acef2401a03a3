"""Input rules for challans, suppliers and the company profile.

Every validator returns the full list of violated rules so a single alert
can name all of them. An empty list means the data is acceptable.
"""
import math
import re
from datetime import date
from typing import Any, Dict, List, Optional

# Patterns are applied with fullmatch; ASCII digits only
PHONE_RE = re.compile(r'[0-9]{10}')
GST_RE = re.compile(r'[0-9A-Z]{15}')
EMAIL_RE = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return str(value).strip() if value is not None else ""


def to_number(value: Any) -> Optional[float]:
    """Coerce form/document input to a float, None when it isn't numeric."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_iso_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def _check_gst(data: Dict[str, Any], errors: List[str]):
    gst = _text(data, "gst")
    if gst and not GST_RE.fullmatch(gst):
        errors.append("GST number must be 15 characters (digits and capital letters)")


def validate_products(products: Any) -> List[str]:
    errors = []
    running_total = 0.0
    if not products:
        errors.append("At least one product is required")
        return errors

    for index, product in enumerate(products, start=1):
        if not isinstance(product, dict):
            errors.append(f"Invalid product line for item {index}")
            continue
        name = _text(product, "name")
        label = name or f"item {index}"
        if not name:
            errors.append(f"Product name is required for item {index}")
        quantity = to_number(product.get("quantity"))
        if quantity is None or quantity <= 0:
            errors.append(f"Invalid quantity for {label}")
        price = to_number(product.get("price"))
        if price is None or price <= 0:
            errors.append(f"Invalid price for {label}")
        elif quantity is not None and quantity > 0:
            line_total = quantity * price
            if not math.isfinite(line_total):
                errors.append(f"Amount is too large for {label}")
            else:
                running_total += line_total

    if not math.isfinite(running_total):
        errors.append("Challan total is too large")
    return errors


def validate_challan(data: Dict[str, Any]) -> List[str]:
    errors = []

    if not _text(data, "customer_name"):
        errors.append("Customer name is required")

    phone = _text(data, "customer_phone")
    if not phone:
        errors.append("Customer phone is required")
    elif not PHONE_RE.fullmatch(phone):
        errors.append("Invalid phone number format, it must be 10 digits")

    if not _text(data, "date"):
        errors.append("Challan date is required")
    elif parse_iso_date(data.get("date")) is None:
        errors.append("Challan date must be a valid date (YYYY-MM-DD)")

    errors.extend(validate_products(data.get("products")))
    return errors


def validate_supplier(data: Dict[str, Any]) -> List[str]:
    errors = []

    if not _text(data, "name"):
        errors.append("Name is required")

    phone = _text(data, "phone")
    if not phone:
        errors.append("Phone number is required")
    elif not PHONE_RE.fullmatch(phone):
        errors.append("Phone number must be 10 digits")

    if not _text(data, "address"):
        errors.append("Address is required")

    _check_gst(data, errors)
    return errors


def validate_company(data: Dict[str, Any]) -> List[str]:
    errors = []

    if not _text(data, "name"):
        errors.append("Company name is required")
    if not _text(data, "address"):
        errors.append("Address is required")

    phone = _text(data, "phone")
    if not phone:
        errors.append("Phone number is required")
    elif not PHONE_RE.fullmatch(phone):
        errors.append("Phone number must be 10 digits")

    email = _text(data, "email")
    if not email:
        errors.append("Email is required")
    elif not EMAIL_RE.fullmatch(email):
        errors.append("Email format invalid")

    _check_gst(data, errors)
    return errors
