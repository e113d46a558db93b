from typing import List

INVOICE_TYPES = ("perform", "tax")
INVOICE_STATUSES = ("pending", "paid", "overdue")
PERFORM_TAX_RATE = 0.18


def validate_invoice_data(data: dict) -> List[str]:
    errors = []

    if not data.get("id"):
        errors.append("Invoice ID is required")
    if not data.get("client"):
        errors.append("Client name is required")
    if not data.get("date"):
        errors.append("Invoice date is required")
    if data.get("invoice_type") not in INVOICE_TYPES:
        errors.append("Valid invoice type is required")
    if not data.get("items"):
        errors.append("At least one item is required")
    if data.get("amount") is not None and data["amount"] <= 0:
        errors.append("Valid amount is required")

    return errors


def fill_item_amounts(items: List[dict]) -> List[dict]:
    for item in items:
        if not item.get("amount") and item.get("quantity") is not None and item.get("rate") is not None:
            item["amount"] = item["quantity"] * item["rate"]
    return items


def calculate_subtotal(items: List[dict]) -> float:
    return sum(item.get("amount") or 0 for item in items)


def apply_invoice_totals(data: dict) -> dict:
    """
    Fill in derived money fields on a new invoice.

    Item amounts default to quantity x rate, perform invoices default to 18%
    tax and the grand total adds management fees (tax invoices) and round up.
    Values sent by the client are kept as they are.
    """
    data["items"] = fill_item_amounts(data["items"])
    subtotal = calculate_subtotal(data["items"])
    data["subtotal"] = subtotal

    if data["invoice_type"] == "perform" and not data.get("tax"):
        data["tax"] = round(subtotal * PERFORM_TAX_RATE, 2)

    if not data.get("amount"):
        total = subtotal + (data.get("tax") or 0)
        if data["invoice_type"] == "tax" and data.get("management_fees_amount"):
            total += data["management_fees_amount"]
        if data.get("round_up"):
            total += data["round_up"]
        data["amount"] = round(total, 2)

    return data
