import logging
import os

logger = logging.getLogger("app.services.storage")

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
UPLOAD_URL_PREFIX = "/uploads"
SUBMISSION_FOLDER = "assignments"
SUBMISSION_DIR = os.path.join(UPLOAD_DIR, SUBMISSION_FOLDER)


# Public reference of a stored submission, served by the /uploads mount
def submission_url(filename: str) -> str:
    return f"{UPLOAD_URL_PREFIX}/{SUBMISSION_FOLDER}/{filename}"


# Disk path behind a stored reference, never outside SUBMISSION_DIR
def url_to_path(file_url: str) -> str:
    return os.path.join(SUBMISSION_DIR, os.path.basename(file_url))


def remove_file(file_url: str):
    if not file_url:
        return
    filepath = url_to_path(file_url)
    try:
        if os.path.exists(filepath):
            os.remove(filepath)
            logger.debug("Deleted file path=%s", filepath)
    except OSError as e:
        logger.error("Error deleting file path=%s: %s", filepath, str(e))


def remove_files(file_urls):
    for file_url in file_urls:
        remove_file(file_url)
