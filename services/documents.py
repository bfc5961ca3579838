"""
Document checklist helpers: slot reconciliation and the per-case upload ceiling.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from constants import MAX_TOTAL_UPLOAD_BYTES
from schemas.loan_case import CaseDocumentSchema
from services.errors import UploadLimitExceededError


@dataclass(frozen=True)
class DocumentAttachment:
    """A file chosen for one document slot, not yet uploaded."""

    document_type: str
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


def reconcile_documents(
    documents: Iterable[CaseDocumentSchema], active_types: Sequence[str]
) -> list[CaseDocumentSchema]:
    """
    Align a case's slots with the configured document types.

    Every active type gets exactly one slot (existing one kept, missing ones
    added as not uploaded). Slots for types no longer configured survive only
    if a file was uploaded for them.
    """
    documents = list(documents)
    by_type = {d.type: d for d in documents}
    reconciled = [by_type.get(t) or CaseDocumentSchema(type=t, uploaded=False) for t in active_types]
    active = set(active_types)
    seen: set[str] = set()
    for doc in documents:
        if doc.type in active or doc.type in seen or not doc.uploaded:
            continue
        seen.add(doc.type)
        reconciled.append(by_type[doc.type])
    return reconciled


def merge_document(documents: Iterable[CaseDocumentSchema], document: CaseDocumentSchema) -> list[CaseDocumentSchema]:
    """Replace the slot of the same type, or append it."""
    merged = [d for d in documents if d.type != document.type]
    merged.append(document)
    return merged


def total_uploaded_bytes(documents: Iterable[CaseDocumentSchema], exclude_type: Optional[str] = None) -> int:
    """Sum of known file sizes; a slot being replaced (exclude_type) does not count."""
    return sum(
        d.size or 0
        for d in documents
        if d.uploaded and d.type != exclude_type
    )


def ensure_within_upload_limit(current_bytes: int, incoming_bytes: int, limit_bytes: int = MAX_TOTAL_UPLOAD_BYTES) -> None:
    total = current_bytes + incoming_bytes
    if total > limit_bytes:
        raise UploadLimitExceededError(total, limit_bytes)
