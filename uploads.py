# Local file storage for blog images and attachments
import logging
import os
import secrets
import time

from errors import FileTooLarge, InvalidOperation, RejectedFileType

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "pdf"}
ALLOWED_MIME_TYPES = {"image/jpg", "image/jpeg", "image/png", "application/pdf"}
MAX_SIZE = 5 * 1024 * 1024  # 5MB


def check_file_type(filename, mimetype):
    """Both the extension and the declared MIME type must be whitelisted."""
    extension = os.path.splitext(filename or "")[1].lower().lstrip(".")
    return extension in ALLOWED_EXTENSIONS and (mimetype or "").lower() in ALLOWED_MIME_TYPES


def generate_filename(field_name, original_name):
    # Only whitelisted extensions reach here, so the raw suffix is safe to keep
    extension = os.path.splitext(original_name or "")[1].lower()
    millis = int(time.time() * 1000)
    return f"{field_name}-{millis}-{secrets.token_hex(4)}{extension}"


def save_upload(file, upload_folder, field_name="file"):
    """Store an uploaded FileStorage and return its public relative path."""
    if file is None or not file.filename:
        raise InvalidOperation("No file uploaded")

    if not check_file_type(file.filename, file.mimetype):
        logger.warning("Rejected upload %s (%s)", file.filename, file.mimetype)
        raise RejectedFileType("Only JPG, JPEG, PNG, or PDF files allowed!")

    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    if size > MAX_SIZE:
        logger.warning("Rejected upload %s: %d bytes", file.filename, size)
        raise FileTooLarge("File exceeds the 5MB limit")

    os.makedirs(upload_folder, exist_ok=True)
    filename = generate_filename(field_name, file.filename)
    file.save(os.path.join(upload_folder, filename))

    logger.info("Stored upload %s (%d bytes)", filename, size)
    return f"/uploads/{filename}"
