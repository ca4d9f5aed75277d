"""Utility helper functions for the document server."""

import random
import re
import time
from typing import Optional

from common.constants import NAMESPACES, ROOT_FOLDER_SENTINEL
from docserver.exceptions import ValidationError

# NAME_MAX on common filesystems
MAX_STORED_NAME_BYTES = 255

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def generate_stored_name(display_name: str) -> str:
    """
    Build a unique on-disk name for an uploaded file.

    Control characters are dropped and the basename is shortened, keeping
    its extension, so the result fits in MAX_STORED_NAME_BYTES of UTF-8.

    Args:
        display_name: Name the client uploaded the file under

    Returns:
        "<epoch-ms>-<random>-<basename>"
    """
    basename = display_name.replace("\\", "/").rsplit("/", 1)[-1]
    basename = _CONTROL_CHARS.sub("", basename).strip() or "file"
    prefix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}-"
    budget = MAX_STORED_NAME_BYTES - len(prefix.encode("utf-8"))

    if len(basename.encode("utf-8")) > budget:
        stem, dot, extension = basename.rpartition(".")
        suffix = dot + extension
        if not stem or len(suffix.encode("utf-8")) > budget // 2:
            stem, suffix = basename, ""
        basename = _truncate_utf8(stem, budget - len(suffix.encode("utf-8"))) + suffix

    return prefix + basename


def _truncate_utf8(text: str, max_bytes: int) -> str:
    return text.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")


def validate_namespace(namespace: Optional[str]) -> str:
    """
    Check a namespace tag.

    Raises:
        ValidationError: If namespace is not one of NAMESPACES
    """
    if namespace not in NAMESPACES:
        raise ValidationError(
            f"Invalid namespace {namespace!r}; expected one of: {', '.join(NAMESPACES)}"
        )
    return namespace


def parse_optional_id(value: Optional[str], field: str) -> Optional[int]:
    """
    Parse an optional folder id sent as a form or JSON value.

    "", "null" and "root" mean no folder.

    Raises:
        ValidationError: If value is neither empty nor an integer
    """
    if value is None:
        return None
    text = str(value).strip()
    if text in ("", "null", ROOT_FOLDER_SENTINEL):
        return None
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value!r}")
