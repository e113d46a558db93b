import re
from typing import Optional

from workforce.db import employees_collection
from workforce.utils.query_utils import to_object_id
from bson import ObjectId

EMPLOYEE_ID_PATTERN = re.compile(r"^(?:SK)?EMP(\d+)$")


def parse_employee_number(employee_id: Optional[str]) -> int:
    """Numeric part of ``SKEMP0001`` or legacy ``EMP0001`` ids, 0 otherwise."""
    match = EMPLOYEE_ID_PATTERN.match(employee_id or "")
    return int(match.group(1)) if match else 0


def format_employee_id(number: int) -> str:
    return f"SKEMP{number:04d}"


async def generate_employee_id() -> str:
    highest = 0
    async for employee in employees_collection.find({}, {"employee_id": 1}):
        highest = max(highest, parse_employee_number(employee.get("employee_id")))
    return format_employee_id(highest + 1)


def employee_lookup(identifier: str) -> dict:
    """Employees are addressed either by ObjectId or by their ``SKEMP`` id."""
    if ObjectId.is_valid(identifier):
        return {"_id": to_object_id(identifier, "employee")}
    return {"employee_id": identifier}
