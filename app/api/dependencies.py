"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

SALES_FILE_EXTENSIONS = (".csv", ".txt", ".tsv")

SALES_CONTENT_TYPES = {
    "text/csv",
    "text/plain",
    "text/tab-separated-values",
    "application/csv",
    "application/vnd.ms-excel",
}


def get_sales_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a text sales export by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").split(";")[0].strip().lower()

    is_text_filename = filename.endswith(SALES_FILE_EXTENSIONS)
    is_text_content_type = content_type in SALES_CONTENT_TYPES

    if not is_text_filename and not is_text_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV, TSV or plain-text sales files are allowed.",
        )

    return file
