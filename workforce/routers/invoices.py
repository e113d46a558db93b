import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse
from pymongo import ReturnDocument

from workforce.db import invoices_collection
from workforce.exceptions import get_unknown_entity_exception
from workforce.models.invoices import Invoice
from workforce.schemas.invoice import CreateInvoice, EditInvoice
from workforce.utils.invoice_utils import (
    validate_invoice_data, apply_invoice_totals, INVOICE_TYPES, INVOICE_STATUSES
)
from workforce.utils.query_utils import to_datetime, serialize_document, serialize_documents, regex_filter

UTC = timezone.utc

logger = logging.getLogger(__name__)

router = APIRouter()

DATE_FIELDS = ("date", "due_date", "service_period_from", "service_period_to")


def with_datetimes(data: dict) -> dict:
    for field in DATE_FIELDS:
        if data.get(field) is not None:
            data[field] = to_datetime(data[field])
    return data


@router.get("/")
async def get_invoices():
    invoices = await invoices_collection.find().sort("created_at", -1).to_list(length=None)
    return {"success": True, "data": serialize_documents(invoices), "total": len(invoices)}


@router.get("/type/{invoice_type}")
async def get_invoices_by_type(invoice_type: str):
    if invoice_type not in INVOICE_TYPES:
        raise HTTPException(status_code=400, detail="Invalid invoice type")

    invoices = await invoices_collection.find({"invoice_type": invoice_type}).sort("created_at", -1).to_list(length=None)
    return {"success": True, "data": serialize_documents(invoices), "total": len(invoices)}


@router.get("/search/{query}")
async def search_invoices(query: str):
    pattern = regex_filter(query)
    invoices = await invoices_collection.find({
        "$or": [
            {"id": pattern},
            {"client": pattern},
            {"voucher_no": pattern},
            {"invoice_number": pattern},
            {"service_type": pattern},
        ]
    }).sort("created_at", -1).to_list(length=None)

    return {"success": True, "data": serialize_documents(invoices), "total": len(invoices)}


@router.get("/stats/summary")
async def get_invoice_stats():
    """Counts per status, billed totals overall and per invoice type, and the five latest invoices."""
    total = await invoices_collection.count_documents({})
    counts = {}
    for invoice_status in INVOICE_STATUSES:
        counts[invoice_status] = await invoices_collection.count_documents({"status": invoice_status})

    total_amount = await invoices_collection.aggregate([
        {"$group": {"_id": None, "total": {"$sum": "$amount"}}}
    ]).to_list(length=1)

    amount_by_type = await invoices_collection.aggregate([
        {"$group": {"_id": "$invoice_type", "total": {"$sum": "$amount"}, "count": {"$sum": 1}}}
    ]).to_list(length=None)

    recent_invoices = await invoices_collection.find(
        {}, {"id": 1, "client": 1, "amount": 1, "status": 1, "date": 1, "invoice_type": 1}
    ).sort("created_at", -1).limit(5).to_list(length=5)

    return {
        "success": True,
        "data": {
            "total": total,
            **counts,
            "total_amount": total_amount[0]["total"] if total_amount else 0,
            "amount_by_type": amount_by_type,
            "recent_invoices": serialize_documents(recent_invoices),
        },
    }


@router.get("/{invoice_id}")
async def get_invoice(invoice_id: str):
    invoice = await invoices_collection.find_one({"id": invoice_id})
    if not invoice:
        raise get_unknown_entity_exception("Invoice")
    return {"success": True, "data": serialize_document(invoice)}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_invoice(invoice_request: CreateInvoice):
    invoice_data = invoice_request.model_dump(exclude_none=True)

    errors = validate_invoice_data(invoice_data)
    if errors:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Validation failed", "errors": errors}
        )

    if await invoices_collection.find_one({"id": invoice_data["id"]}):
        raise HTTPException(status_code=400, detail="Invoice with this ID already exists")

    invoice = Invoice(**with_datetimes(apply_invoice_totals(invoice_data)))
    invoice_data = invoice.model_dump()
    result = await invoices_collection.insert_one(invoice_data)
    invoice_data["_id"] = result.inserted_id

    logger.info("Invoice %s created for %s (%s)", invoice.id, invoice.client, invoice.amount)

    return {"success": True, "message": "Invoice created successfully", "data": serialize_document(invoice_data)}


@router.put("/{invoice_id}")
async def update_invoice(invoice_id: str, invoice_update: EditInvoice):
    changes = with_datetimes(invoice_update.model_dump(exclude_unset=True))
    if "status" in changes and changes["status"] not in INVOICE_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid invoice status")
    changes["updated_at"] = datetime.now(UTC)

    invoice = await invoices_collection.find_one_and_update(
        {"id": invoice_id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER
    )
    if not invoice:
        raise get_unknown_entity_exception("Invoice")

    return {"success": True, "message": "Invoice updated successfully", "data": serialize_document(invoice)}


@router.patch("/{invoice_id}/mark-paid")
async def mark_invoice_paid(invoice_id: str):
    invoice = await invoices_collection.find_one_and_update(
        {"id": invoice_id},
        {"$set": {"status": "paid", "updated_at": datetime.now(UTC)}},
        return_document=ReturnDocument.AFTER
    )
    if not invoice:
        raise get_unknown_entity_exception("Invoice")

    return {"success": True, "message": "Invoice marked as paid", "data": serialize_document(invoice)}


@router.delete("/{invoice_id}")
async def delete_invoice(invoice_id: str):
    result = await invoices_collection.delete_one({"id": invoice_id})
    if result.deleted_count == 0:
        raise get_unknown_entity_exception("Invoice")

    return {"success": True, "message": "Invoice deleted successfully"}
