"""
Uploaded report helpers
"""
import logging
from typing import Tuple

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ('text/plain', 'text/tab-separated-values', 'application/octet-stream')


def validate_report_file(file) -> Tuple[bool, str]:
    """
    Validate that an uploaded file is a plain-text marker report

    Returns:
        (is_valid, error_message)
    """
    name = file.name or ''
    if not name.lower().endswith('.txt'):
        logger.warning(f"Invalid report file uploaded: {name}")
        return False, f"Only .txt marker reports are allowed: {name}"

    content_type = getattr(file, 'content_type', None)
    if content_type and content_type not in ALLOWED_CONTENT_TYPES:
        logger.warning(f"Invalid content type for {name}: {content_type}")
        return False, f"Unsupported file type for {name}"

    return True, ""


def read_uploaded_text(file, encoding: str = 'utf-8') -> str:
    """
    Read an uploaded file fully into a string

    Args:
        file: Uploaded file object (Django / ninja UploadedFile)
        encoding: Text encoding of the report

    Returns:
        Decoded content; undecodable bytes are replaced
    """
    content = b''.join(file.chunks())
    text = content.decode(encoding, errors='replace')
    logger.debug(f"File content sample ({file.name}): {text[:200]!r}")
    return text
