import logging
from datetime import datetime, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from workforce.db import invoices_collection

logger = logging.getLogger(__name__)

# Create a shared scheduler instance
scheduler = AsyncIOScheduler()


async def mark_overdue_invoices():
    now = datetime.now(timezone.utc)
    try:
        result = await invoices_collection.update_many(
            {"status": "pending", "due_date": {"$ne": None, "$lt": now}},
            {"$set": {"status": "overdue", "updated_at": now}}
        )
        logger.info("Marked %d invoices as overdue", result.modified_count)
    except Exception as e:
        logger.error("Error marking overdue invoices: %s", e)


# Add overdue invoice job to scheduler
scheduler.add_job(
    mark_overdue_invoices,
    "interval",
    hours=1,
    id="mark_overdue_invoices",
)
