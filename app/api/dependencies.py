"""
app/api/dependencies.py

Shared FastAPI dependencies for upload validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

CSV_EXTENSIONS: tuple[str, ...] = (".csv",)

# Analytics exports are often served as plain text or with the Excel MIME type.
CSV_CONTENT_TYPES = {
    "text/csv",
    "text/plain",
    "application/csv",
    "application/vnd.ms-excel",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Accept an analytics export when its name or MIME type marks it as CSV.
    """

    filename = (file.filename or "").strip()
    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()

    if filename.lower().endswith(CSV_EXTENSIONS) or content_type in CSV_CONTENT_TYPES:
        return file

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Only CSV files are allowed (received {filename or 'unnamed file'!r}).",
    )
