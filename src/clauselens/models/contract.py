"""
Contract models for representing uploaded legal documents.
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import ConfigDict, Field, model_validator

from clauselens.exceptions import ContractStateError
from clauselens.models.analysis import ContractAnalysis
from clauselens.models.base import CamelModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContractStatus(str, Enum):
    """Processing status for a contract."""

    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class FileType(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"


# Completed and failed contracts may be re-analyzed.
ALLOWED_TRANSITIONS: dict[ContractStatus, set[ContractStatus]] = {
    ContractStatus.UPLOADING: {ContractStatus.PROCESSING},
    ContractStatus.PROCESSING: {ContractStatus.COMPLETED, ContractStatus.FAILED},
    ContractStatus.COMPLETED: {ContractStatus.PROCESSING},
    ContractStatus.FAILED: {ContractStatus.PROCESSING},
}


class Contract(CamelModel):
    """
    Represents an uploaded contract document.

    Owns zero or one analysis. The analysis is present exactly when the
    contract is completed, and is only ever set by `complete()`.
    """

    model_config = ConfigDict(frozen=False)

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str | None = None
    file_name: str = Field(..., description="Original filename")
    file_type: FileType
    file_size: int | None = Field(default=None, ge=0)

    status: ContractStatus = Field(default=ContractStatus.UPLOADING)
    analysis: ContractAnalysis | None = None
    error_message: str | None = None

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def check_analysis_matches_status(self) -> "Contract":
        if self.status == ContractStatus.COMPLETED and self.analysis is None:
            raise ValueError("completed contract must carry an analysis")
        if self.status != ContractStatus.COMPLETED and self.analysis is not None:
            raise ValueError(f"{self.status.value} contract cannot carry an analysis")
        return self

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _transition(self, status: ContractStatus) -> None:
        if status not in ALLOWED_TRANSITIONS[self.status]:
            raise ContractStateError(
                f"Contract {self.id} cannot move from {self.status.value} to {status.value}"
            )
        self.status = status
        self.updated_at = _utcnow()

    def start_processing(self) -> None:
        """Mark text extraction and analysis as started."""
        self._transition(ContractStatus.PROCESSING)
        self.analysis = None
        self.error_message = None

    def complete(self, analysis: ContractAnalysis) -> None:
        """Attach the finished analysis and mark the contract completed."""
        if self.status != ContractStatus.PROCESSING:
            raise ContractStateError(
                f"Contract {self.id} cannot complete from {self.status.value}"
            )
        self.analysis = analysis
        self._transition(ContractStatus.COMPLETED)

    def fail(self, error: str) -> None:
        """Mark processing as failed; no analysis is exposed."""
        self._transition(ContractStatus.FAILED)
        self.analysis = None
        self.error_message = error

    @property
    def is_completed(self) -> bool:
        return self.status == ContractStatus.COMPLETED

    @property
    def is_failed(self) -> bool:
        return self.status == ContractStatus.FAILED
