"""Batch upload response model."""

from typing import List, Optional

from pydantic import BaseModel

NO_FILES_UPLOADED_MESSAGE = (
    "No files were uploaded. Either the files already exist "
    "or the file format are not supported."
)


class UploadDocumentsResponse(BaseModel):
    """Outcome of one batch ingestion call: written keys or an error."""

    uploaded_files: List[str] = []
    is_successful: bool = True
    error: Optional[str] = None

    @classmethod
    def from_uploaded(cls, uploaded_files: List[str]) -> "UploadDocumentsResponse":
        return cls(uploaded_files=list(uploaded_files))

    @classmethod
    def from_error(cls, error: str) -> "UploadDocumentsResponse":
        return cls(uploaded_files=[], is_successful=False, error=error)
