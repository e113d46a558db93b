import io
import logging
import os
import re
import time
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import cloudinary
import cloudinary.uploader
from fastapi import HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool

from workforce.config import settings

UTC = timezone.utc

logger = logging.getLogger(__name__)

cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
    secure=True,
)

WORK_QUERY_FOLDER = "work-query-proofs"
MAX_WORK_QUERY_FILE_SIZE = 25 * 1024 * 1024
MAX_WORK_QUERY_FILES = 10
MAX_EMPLOYEE_IMAGE_SIZE = 5 * 1024 * 1024

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "bmp"}
VIDEO_EXTENSIONS = {"mp4", "mov", "avi", "webm"}
DOCUMENT_EXTENSIONS = {"pdf", "doc", "docx", "txt", "xlsx", "xls", "ppt", "pptx"}

DOCUMENT_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}


def get_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[-1].lower().replace(".", "")


def get_resource_type(content_type: str) -> str:
    if content_type.startswith("image/"):
        return "image"
    if content_type.startswith("video/"):
        return "video"
    return "raw"


def get_file_type(content_type: str) -> str:
    if content_type.startswith("image/"):
        return "image"
    if content_type.startswith("video/"):
        return "video"
    if content_type in DOCUMENT_MIME_TYPES:
        return "document"
    return "other"


def resource_type_for_file_type(file_type: str) -> str:
    return {"image": "image", "video": "video"}.get(file_type, "raw")


def validate_work_query_file(content_type: str, filename: str) -> bool:
    extension = get_extension(filename)
    if content_type.startswith("image/"):
        return extension in IMAGE_EXTENSIONS
    if content_type.startswith("video/"):
        return extension in VIDEO_EXTENSIONS
    return content_type in DOCUMENT_MIME_TYPES and extension in DOCUMENT_EXTENSIONS


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def safe_public_name(filename: str) -> str:
    stem = os.path.splitext(filename)[0]
    return f"{int(time.time() * 1000)}_{re.sub(r'[^a-zA-Z0-9.-]', '_', stem)}"


async def upload_bytes(content: bytes, folder: str, resource_type: str = "image",
                       public_id: Optional[str] = None, tags: Optional[List[str]] = None) -> dict:
    options = {"folder": folder, "resource_type": resource_type}
    if public_id:
        options["public_id"] = public_id
    if tags:
        options["tags"] = tags
    if resource_type == "image":
        options["transformation"] = [
            {"width": 1200, "height": 800, "crop": "limit", "quality": "auto:good"}
        ]

    try:
        return await run_in_threadpool(cloudinary.uploader.upload, io.BytesIO(content), **options)
    except Exception as e:
        logger.error("Cloudinary upload to %s failed: %s", folder, e)
        raise HTTPException(status_code=502, detail=f"Failed to upload file to Cloudinary - {e}")


async def delete_asset(public_id: str, resource_type: str = "image") -> dict:
    try:
        return await run_in_threadpool(cloudinary.uploader.destroy, public_id, resource_type=resource_type)
    except Exception as e:
        logger.error("Cloudinary delete of %s failed: %s", public_id, e)
        raise HTTPException(status_code=502, detail=f"Failed to delete file from Cloudinary - {e}")


async def discard_assets(assets: List[Tuple[str, str]]) -> None:
    """Destroy ``(public_id, resource_type)`` pairs, logging failures instead of raising."""
    for public_id, resource_type in assets:
        try:
            await delete_asset(public_id, resource_type)
        except HTTPException:
            logger.warning("Could not clean up Cloudinary asset %s", public_id)


async def read_employee_image(file: UploadFile) -> bytes:
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed!")

    content = await file.read()
    if len(content) > MAX_EMPLOYEE_IMAGE_SIZE:
        raise HTTPException(status_code=400, detail="File too large. Maximum file size is 5MB.")
    return content


async def upload_employee_image(content: bytes, folder: str) -> Tuple[str, str]:
    result = await upload_bytes(content, folder=folder, resource_type="image", tags=["employee"])
    return result["secure_url"], result["public_id"]


async def read_proof_file(file: UploadFile) -> bytes:
    content_type = file.content_type or "application/octet-stream"
    if not validate_work_query_file(content_type, file.filename):
        raise HTTPException(
            status_code=400,
            detail=(
                f"File type {content_type} ({file.filename}) is not allowed. "
                "Allowed: Images (jpg, png, gif, webp, bmp), Videos (mp4, mov, avi, webm), "
                "Documents (pdf, doc, docx, txt, xlsx, ppt)"
            )
        )

    content = await file.read()
    if len(content) > MAX_WORK_QUERY_FILE_SIZE:
        raise HTTPException(status_code=400, detail="File too large. Maximum file size is 25MB.")
    return content


async def upload_proof_file(file: UploadFile, content: bytes, folder: str = WORK_QUERY_FOLDER) -> dict:
    content_type = file.content_type or "application/octet-stream"
    result = await upload_bytes(
        content,
        folder=folder,
        resource_type=get_resource_type(content_type),
        public_id=safe_public_name(file.filename),
        tags=["work-query", "proof", "supervisor"],
    )

    return {
        "name": file.filename,
        "type": get_file_type(content_type),
        "url": result["secure_url"],
        "public_id": result["public_id"],
        "size": format_file_size(len(content)),
        "format": result.get("format"),
        "bytes": result.get("bytes", len(content)),
        "upload_date": datetime.now(UTC),
    }


async def upload_proof_files(files: List[UploadFile], folder: str = WORK_QUERY_FOLDER) -> List[dict]:
    """
    Validate every file, then upload them all.

    Nothing is uploaded when any file is rejected, and files already uploaded
    are destroyed again when a later upload fails.
    """
    if len(files) > MAX_WORK_QUERY_FILES:
        raise HTTPException(status_code=400, detail="Too many files. Maximum 10 files allowed per query.")

    contents = [await read_proof_file(file) for file in files]

    uploaded = []
    try:
        for file, content in zip(files, contents):
            uploaded.append(await upload_proof_file(file, content, folder=folder))
    except HTTPException:
        await discard_proof_files(uploaded)
        raise

    logger.info("Uploaded %d proof files to %s", len(uploaded), folder)
    return uploaded


def proof_file_assets(proof_files: List[dict]) -> List[Tuple[str, str]]:
    return [
        (proof_file["public_id"], resource_type_for_file_type(proof_file.get("type", "other")))
        for proof_file in proof_files
    ]


async def delete_proof_files(proof_files: List[dict]) -> None:
    for public_id, resource_type in proof_file_assets(proof_files):
        await delete_asset(public_id, resource_type)


async def discard_proof_files(proof_files: List[dict]) -> None:
    await discard_assets(proof_file_assets(proof_files))
