from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping

FormErrors = Dict[str, str]


def _blank(value: Any) -> bool:
    if value is None:
        return True
    return not str(value).strip()


def parse_price(value: Any) -> Decimal:
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f"not a number: {value!r}")
    if not price.is_finite():
        raise ValueError(f"not a number: {value!r}")
    if price < 0:
        raise ValueError("price must be >= 0")
    return price


def validate_category_form(form: Mapping[str, Any]) -> FormErrors:
    errors: FormErrors = {}
    if _blank(form.get("name")):
        errors["name"] = "Category name is required"
    return errors


def validate_product_form(form: Mapping[str, Any]) -> FormErrors:
    errors: FormErrors = {}
    if _blank(form.get("name")):
        errors["name"] = "Name is required"
    if _blank(form.get("description")):
        errors["description"] = "Description is required"
    if _blank(form.get("price")):
        errors["price"] = "Price is required"
    else:
        try:
            parse_price(form["price"])
        except ValueError:
            errors["price"] = "Price must be a non-negative number"
    if not form.get("category_ids"):
        errors["category_ids"] = "Please select at least one category"
    return errors


def validate_order_form(form: Mapping[str, Any]) -> FormErrors:
    errors: FormErrors = {}
    if _blank(form.get("date")):
        errors["date"] = "Date is required"
    if not form.get("product_ids"):
        errors["product_ids"] = "Please select at least one product"
    return errors
