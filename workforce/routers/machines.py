import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from workforce.db import machines_collection
from workforce.exceptions import get_unknown_entity_exception
from workforce.models.machines import Machine, MaintenanceRecord
from workforce.schemas.machine import CreateMachine, EditMachine, CreateMaintenanceRecord
from workforce.utils.query_utils import to_object_id, to_datetime, serialize_document, serialize_documents

UTC = timezone.utc

logger = logging.getLogger(__name__)

router = APIRouter()

MACHINE_STATUSES = ("operational", "maintenance", "out-of-service")
DATE_FIELDS = ("purchase_date", "last_maintenance_date", "next_maintenance_date")


def with_datetimes(data: dict) -> dict:
    for field in DATE_FIELDS:
        if data.get(field) is not None:
            data[field] = to_datetime(data[field])
    return data


async def ensure_unique_serial(serial_number: Optional[str], exclude_id=None):
    if not serial_number:
        return
    query = {"serial_number": serial_number}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    if await machines_collection.find_one(query):
        raise HTTPException(status_code=400, detail="A machine with this serial number already exists")


@router.get("/")
async def get_machines():
    machines = await machines_collection.find().sort("created_at", -1).to_list(length=None)
    return {"success": True, "data": serialize_documents(machines), "total": len(machines)}


@router.get("/stats")
async def get_machine_stats():
    """Machine count, inventory value (cost x quantity) and a count per status."""
    machines = await machines_collection.find({}, {"cost": 1, "quantity": 1, "status": 1}).to_list(length=None)

    return {
        "success": True,
        "data": {
            "total_machines": len(machines),
            "total_machine_value": sum(machine.get("cost", 0) * machine.get("quantity", 0) for machine in machines),
            "operational_machines": sum(1 for machine in machines if machine.get("status") == "operational"),
            "maintenance_machines": sum(1 for machine in machines if machine.get("status") == "maintenance"),
            "out_of_service_machines": sum(1 for machine in machines if machine.get("status") == "out-of-service"),
        },
    }


@router.get("/{machine_id}")
async def get_machine(machine_id: str):
    machine = await machines_collection.find_one({"_id": to_object_id(machine_id, "machine")})
    if not machine:
        raise get_unknown_entity_exception("Machine")
    return {"success": True, "data": serialize_document(machine)}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_machine(machine_request: CreateMachine):
    await ensure_unique_serial(machine_request.serial_number)

    machine = Machine(**with_datetimes(machine_request.model_dump(exclude_none=True)))
    machine_data = machine.model_dump()
    if not machine_data.get("serial_number"):
        # the unique index is sparse, missing serials must not be stored as null
        machine_data.pop("serial_number", None)

    try:
        result = await machines_collection.insert_one(machine_data)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="A machine with this serial number already exists")
    machine_data["_id"] = result.inserted_id

    logger.info("Machine %s created", result.inserted_id)

    return {"success": True, "message": "Machine created successfully", "data": serialize_document(machine_data)}


@router.put("/{machine_id}")
async def update_machine(machine_id: str, machine_update: EditMachine):
    object_id = to_object_id(machine_id, "machine")
    changes = with_datetimes(machine_update.model_dump(exclude_unset=True))

    if "status" in changes and changes["status"] not in MACHINE_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status. Allowed: {', '.join(MACHINE_STATUSES)}")
    await ensure_unique_serial(changes.get("serial_number"), exclude_id=object_id)

    changes["updated_at"] = datetime.now(UTC)
    machine = await machines_collection.find_one_and_update(
        {"_id": object_id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER
    )
    if not machine:
        raise get_unknown_entity_exception("Machine")

    return {"success": True, "message": "Machine updated successfully", "data": serialize_document(machine)}


@router.delete("/{machine_id}")
async def delete_machine(machine_id: str):
    result = await machines_collection.delete_one({"_id": to_object_id(machine_id, "machine")})
    if result.deleted_count == 0:
        raise get_unknown_entity_exception("Machine")
    return {"success": True, "message": "Machine deleted successfully"}


@router.post("/{machine_id}/maintenance")
async def add_maintenance_record(machine_id: str, record_request: CreateMaintenanceRecord):
    object_id = to_object_id(machine_id, "machine")
    record_data = record_request.model_dump(exclude_none=True)
    if "date" in record_data:
        record_data["date"] = to_datetime(record_data["date"])
    record = MaintenanceRecord(**record_data).model_dump()

    machine = await machines_collection.find_one_and_update(
        {"_id": object_id},
        {
            "$push": {"maintenance_history": record},
            "$set": {"last_maintenance_date": record["date"], "updated_at": datetime.now(UTC)},
        },
        return_document=ReturnDocument.AFTER
    )
    if not machine:
        raise get_unknown_entity_exception("Machine")

    return {"success": True, "message": "Maintenance record added", "data": serialize_document(machine)}
