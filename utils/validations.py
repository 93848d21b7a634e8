"""
Input validation utilities
"""
from typing import Iterable
import re

from utils.helpers import parse_amount


def validate_amount(amount) -> bool:
    """Validate a bill total: must be a finite number greater than zero"""
    parsed = parse_amount(amount)
    return parsed is not None and parsed > 0


def validate_name(name) -> bool:
    """Validate a room or occupant name"""
    return bool(name) and bool(str(name).strip())


def find_duplicates(ids: Iterable[str]) -> list:
    """Return ids that appear more than once, in first-seen order"""
    seen = set()
    duplicates = []
    for item in ids:
        if item in seen and item not in duplicates:
            duplicates.append(item)
        seen.add(item)
    return duplicates


def validate_collection(collection: str, allowed: Iterable[str]) -> bool:
    """Validate a history collection name"""
    return collection in tuple(allowed)


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe file operations"""
    # Remove or replace unsafe characters
    filename = re.sub(r'[<>:"/\\|?*]', '_', filename)
    # Remove leading/trailing spaces and dots
    filename = filename.strip('. ')
    # Limit length
    if len(filename) > 255:
        filename = filename[:255]

    return filename or 'unnamed'


def validate_file_extension(filename: str, allowed_extensions: list) -> bool:
    """Validate file extension"""
    if not filename:
        return False

    extension = filename.lower().split('.')[-1]
    return extension in [ext.lower().lstrip('.') for ext in allowed_extensions]
