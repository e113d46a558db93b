import logging
from collections import defaultdict
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status, Depends
from pymongo import ReturnDocument

from workforce.db import users_collection
from workforce.exceptions import get_unknown_entity_exception
from workforce.models.user import User
from workforce.schemas.user import CreateUser, EditUser, RoleUpdate
from workforce.utils.app_utils import require_roles, hash_password
from workforce.utils.query_utils import to_object_id, to_datetime, serialize_document, serialize_documents

UTC = timezone.utc

logger = logging.getLogger(__name__)

router = APIRouter()

ROLES = ("superadmin", "admin", "manager", "supervisor", "employee")
ASSIGNABLE_ROLES = ("admin", "manager", "supervisor", "employee")
HIDDEN_FIELDS = {"password": 0}

admin_only = require_roles("superadmin", "admin")


def split_name(name: str) -> dict:
    first_name, _, last_name = name.strip().partition(" ")
    return {"first_name": first_name, "last_name": last_name.strip()}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_user(user_request: CreateUser, user_and_type: tuple = Depends(admin_only)):
    """
    Create a console user.

    The username defaults to the local part of the email and only one
    superadmin may exist at a time.
    """
    if user_request.role not in ROLES:
        raise HTTPException(status_code=400, detail=f"Invalid role. Allowed: {', '.join(ROLES)}")

    if user_request.role == "superadmin" and await users_collection.find_one({"role": "superadmin"}):
        raise HTTPException(status_code=400, detail="Only one superadmin is allowed. A superadmin already exists.")

    email = user_request.email.lower()
    username = user_request.username or email.split("@")[0]

    if await users_collection.find_one({"email": email}):
        raise HTTPException(status_code=400, detail="email already exists")
    if await users_collection.find_one({"username": username}):
        raise HTTPException(status_code=400, detail="username already exists")

    user = User(
        **user_request.model_dump(exclude={"username", "email", "password", "site", "join_date"}),
        username=username,
        email=email,
        password=hash_password(user_request.password),
        name=f"{user_request.first_name} {user_request.last_name or ''}".strip(),
        site=user_request.site or "Mumbai Office",
        join_date=to_datetime(user_request.join_date) or datetime.now(UTC),
    )
    user_data = user.model_dump()
    result = await users_collection.insert_one(user_data)
    user_data["_id"] = result.inserted_id

    logger.info("User %s created with role %s", email, user.role)

    return {"success": True, "user": serialize_document(user_data), "message": "User created successfully"}


@router.get("/")
async def get_all_users(user_and_type: tuple = Depends(admin_only)):
    users = serialize_documents(
        await users_collection.find({}, HIDDEN_FIELDS).sort("created_at", -1).to_list(length=None)
    )

    grouped_by_role = defaultdict(list)
    for user in users:
        grouped_by_role[user.get("role")].append(user)
    active = sum(1 for user in users if user.get("is_active"))

    return {
        "success": True,
        "all_users": users,
        "grouped_by_role": grouped_by_role,
        "total": len(users),
        "active": active,
        "inactive": len(users) - active,
    }


@router.get("/stats")
async def get_user_stats(user_and_type: tuple = Depends(admin_only)):
    stats = await users_collection.aggregate([
        {"$group": {"_id": "$role", "count": {"$sum": 1}}},
        {"$sort": {"_id": 1}},
    ]).to_list(length=None)
    return {"success": True, "data": stats}


@router.get("/superadmin-status")
async def get_superadmin_status(user_and_type: tuple = Depends(admin_only)):
    superadmin = await users_collection.find_one({"role": "superadmin"}, HIDDEN_FIELDS)
    return {"success": True, "exists": superadmin is not None, "superadmin": serialize_document(superadmin)}


@router.patch("/{user_id}/toggle-status")
async def toggle_user_status(user_id: str, user_and_type: tuple = Depends(admin_only)):
    object_id = to_object_id(user_id, "user")
    user = await users_collection.find_one({"_id": object_id})
    if not user:
        raise get_unknown_entity_exception("User")

    user = await users_collection.find_one_and_update(
        {"_id": object_id},
        {"$set": {"is_active": not user.get("is_active", True), "updated_at": datetime.now(UTC)}},
        projection=HIDDEN_FIELDS,
        return_document=ReturnDocument.AFTER
    )

    state = "activated" if user["is_active"] else "deactivated"
    return {"success": True, "message": f"User {state} successfully", "user": serialize_document(user)}


@router.put("/{user_id}/role")
async def update_user_role(user_id: str, role_update: RoleUpdate, user_and_type: tuple = Depends(admin_only)):
    if role_update.role not in ASSIGNABLE_ROLES:
        raise HTTPException(status_code=400, detail=f"Invalid role. Allowed: {', '.join(ASSIGNABLE_ROLES)}")

    user = await users_collection.find_one_and_update(
        {"_id": to_object_id(user_id, "user")},
        {"$set": {"role": role_update.role, "updated_at": datetime.now(UTC)}},
        projection=HIDDEN_FIELDS,
        return_document=ReturnDocument.AFTER
    )
    if not user:
        raise get_unknown_entity_exception("User")

    return {"success": True, "message": "User role updated successfully", "user": serialize_document(user)}


@router.put("/{user_id}")
async def update_user(user_id: str, user_update: EditUser, user_and_type: tuple = Depends(admin_only)):
    object_id = to_object_id(user_id, "user")
    changes = user_update.model_dump(exclude_unset=True)

    if changes.get("name"):
        changes.update(split_name(changes["name"]))
    elif "first_name" in changes or "last_name" in changes:
        current = await users_collection.find_one({"_id": object_id}) or {}
        first_name = changes.get("first_name", current.get("first_name", ""))
        last_name = changes.get("last_name", current.get("last_name", ""))
        changes["name"] = f"{first_name} {last_name or ''}".strip()

    if changes.get("email"):
        changes["email"] = changes["email"].lower()
        if await users_collection.find_one({"email": changes["email"], "_id": {"$ne": object_id}}):
            raise HTTPException(status_code=400, detail="email already exists")
    if "join_date" in changes:
        changes["join_date"] = to_datetime(changes["join_date"])

    changes["updated_at"] = datetime.now(UTC)
    user = await users_collection.find_one_and_update(
        {"_id": object_id},
        {"$set": changes},
        projection=HIDDEN_FIELDS,
        return_document=ReturnDocument.AFTER
    )
    if not user:
        raise get_unknown_entity_exception("User")

    return {"success": True, "message": "User updated successfully", "user": serialize_document(user)}


@router.delete("/{user_id}")
async def delete_user(user_id: str, user_and_type: tuple = Depends(admin_only)):
    result = await users_collection.delete_one({"_id": to_object_id(user_id, "user")})
    if result.deleted_count == 0:
        raise get_unknown_entity_exception("User")
    return {"success": True, "message": "User deleted successfully"}
