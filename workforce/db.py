import logging
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from workforce.config import settings

logger = logging.getLogger(__name__)


client = AsyncIOMotorClient(settings.MONGODB_URL)
db = client[settings.MONGODB_DB_NAME]


users_collection = db.users
employees_collection = db.employees
leaves_collection = db.leaves
admin_leaves_collection = db.admin_leaves
manager_leaves_collection = db.manager_leaves
attendance_collection = db.attendance
invoices_collection = db.invoices
machines_collection = db.machines
work_queries_collection = db.work_queries
supervisors_collection = db.supervisors
epf_forms_collection = db.epf_forms


async def ensure_indexes():
    await users_collection.create_index("email", unique=True)
    await employees_collection.create_index("employee_id", unique=True)
    await leaves_collection.create_index([("department", ASCENDING), ("status", ASCENDING)])
    await leaves_collection.create_index([("employee_id", ASCENDING), ("status", ASCENDING)])
    await leaves_collection.create_index([("from_date", ASCENDING), ("to_date", ASCENDING)])
    await leaves_collection.create_index([("created_at", DESCENDING)])
    await admin_leaves_collection.create_index([("employee_id", ASCENDING), ("status", ASCENDING)])
    await admin_leaves_collection.create_index([("status", ASCENDING), ("applied_date", DESCENDING)])
    await manager_leaves_collection.create_index([("manager_id", ASCENDING), ("status", ASCENDING)])
    await manager_leaves_collection.create_index([("applied_date", DESCENDING)])
    await attendance_collection.create_index([("employee_id", ASCENDING), ("date", ASCENDING)], unique=True)
    await invoices_collection.create_index("id", unique=True)
    await machines_collection.create_index("serial_number", unique=True, sparse=True)
    await work_queries_collection.create_index("query_id", unique=True)
    await work_queries_collection.create_index([("supervisor_id", ASCENDING), ("created_at", DESCENDING)])
    await supervisors_collection.create_index("email", unique=True)
    await epf_forms_collection.create_index("employee_id", unique=True)
    logger.info("MongoDB indexes ensured on %s", settings.MONGODB_DB_NAME)


async def ping_database() -> bool:
    try:
        await client.admin.command("ping")
        return True
    except Exception as e:
        logger.warning("MongoDB ping failed: %s", e)
        return False
