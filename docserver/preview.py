"""Decides how a stored file is previewed and renders placeholder pages."""

import html
from pathlib import PurePath
from typing import Optional

from common.formatting import format_file_size
from docserver.repositories.file_repository import File

PREVIEW_INLINE = "inline"
PREVIEW_OFFICE = "office"
PREVIEW_UNAVAILABLE = "unavailable"

OFFICE_EXTENSIONS = {
    ".doc": "Word document",
    ".docx": "Word document",
    ".xls": "Excel spreadsheet",
    ".xlsx": "Excel spreadsheet",
    ".ppt": "PowerPoint presentation",
    ".pptx": "PowerPoint presentation",
    ".hwp": "Hangul document",
}

OFFICE_CONTENT_TYPES = {
    "application/msword": "Word document",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "Word document",
    "application/vnd.ms-excel": "Excel spreadsheet",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "Excel spreadsheet",
    "application/vnd.ms-powerpoint": "PowerPoint presentation",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "PowerPoint presentation",
    "application/x-hwp": "Hangul document",
    "application/haansofthwp": "Hangul document",
}


def office_kind(file: File) -> Optional[str]:
    """
    Label of the Office format a file is in, or None.
    """
    content_type = (file.content_type or "").lower()
    if content_type in OFFICE_CONTENT_TYPES:
        return OFFICE_CONTENT_TYPES[content_type]
    return OFFICE_EXTENSIONS.get(PurePath(file.display_name).suffix.lower())


def classify_preview(file: File) -> str:
    content_type = (file.content_type or "").lower()
    if content_type == "application/pdf" or content_type.startswith(("image/", "text/")):
        return PREVIEW_INLINE
    if office_kind(file) is not None:
        return PREVIEW_OFFICE
    return PREVIEW_UNAVAILABLE


_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: sans-serif; margin: 2rem; color: #333; }}
.card {{ border: 1px solid #ddd; border-radius: 8px; padding: 1.5rem; max-width: 40rem; }}
.meta {{ color: #777; }}
</style>
</head>
<body>
<div class="card">
<h1>{title}</h1>
<p class="meta">{kind} &middot; {size} &middot; uploaded {uploaded}</p>
<p>{message}</p>
<p><a href="/api/download/{file_id}">Download</a></p>
</div>
</body>
</html>
"""


def _render(file: File, kind: str, message: str) -> str:
    return _PAGE.format(
        title=html.escape(file.display_name),
        kind=html.escape(kind),
        size=format_file_size(file.size_bytes),
        uploaded=file.created_at.strftime("%Y-%m-%d %H:%M"),
        message=html.escape(message),
        file_id=file.id,
    )


def render_office_placeholder(file: File) -> str:
    """
    Placeholder page for an Office document; the file itself is never read.
    """
    kind = office_kind(file) or "Office document"
    return _render(file, kind, f"This {kind} cannot be rendered in the browser. Download it to view the contents.")


def render_unavailable(file: File) -> str:
    kind = file.content_type or "Unknown type"
    return _render(file, kind, "Preview is not available for this file type.")
