"""
Process-wide case store.

Holds the in-memory case list and the active configuration options, and is
the only write path for both: each mutation persists through the gateway
first and reflects the result in memory only after the gateway succeeded.
Mutations run one at a time behind a single lock.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional, Protocol, Sequence

from constants import (
    APPROVAL_STATUSES,
    BANK_NAME,
    CATEGORIES,
    DEFAULT_OPTIONS,
    DOCUMENT_TYPE,
    MAX_TOTAL_UPLOAD_BYTES,
    OTHER_BANK,
    TEAM_MEMBER,
)
from schemas.configuration import ConfigItemCreate, ConfigItemSchema
from schemas.loan_case import ApprovalDetails, CaseDocumentSchema, CaseUpdateSchema, LoanCaseCreate, LoanCaseSchema
from services.documents import (
    DocumentAttachment,
    ensure_within_upload_limit,
    merge_document,
    reconcile_documents,
    total_uploaded_bytes,
)
from services.errors import (
    CaseNotFoundError,
    CaseValidationError,
    DocumentUploadError,
    DuplicateValueError,
    GatewayError,
    OptionNotFoundError,
    UnknownCategoryError,
)
from services.validation import validate_status_update

logger = logging.getLogger(__name__)


class CaseGatewayProtocol(Protocol):
    async def list_cases(self) -> list[LoanCaseSchema]: ...

    async def create_case(self, draft: LoanCaseCreate, case_id: Optional[str] = None) -> LoanCaseSchema: ...

    async def update_case_status(
        self, case_id: str, status: str, remarks: str, details: Optional[ApprovalDetails] = None
    ) -> CaseUpdateSchema: ...

    async def upsert_document(
        self, case_id: str, document_type: str, file_url: str, file_size: Optional[int] = None
    ) -> CaseDocumentSchema: ...

    async def rename_case_value(self, field: str, old: str, new: str) -> int: ...

    async def list_config_items(self, active_only: bool = True) -> list[ConfigItemSchema]: ...

    async def count_config_items(self) -> int: ...

    async def add_config_item(self, category: str, value: str) -> ConfigItemSchema: ...

    async def delete_config_item(self, category: str, value: str) -> bool: ...

    async def rename_config_item(self, category: str, old: str, new: str) -> bool: ...

    async def seed_configuration(self, items: Sequence[ConfigItemCreate]) -> int: ...


class DocumentTransport(Protocol):
    async def upload(self, case_id: str, document_type: str, attachment: DocumentAttachment) -> str: ...


def default_config_items() -> list[ConfigItemCreate]:
    return [
        ConfigItemCreate(category=category, value=value, display_order=order)
        for category in CATEGORIES
        for order, value in enumerate(DEFAULT_OPTIONS[category])
    ]


def build_options(items: Iterable[ConfigItemSchema]) -> dict[str, list[str]]:
    """Group active configuration rows into per-category value lists in display order."""
    options: dict[str, list[str]] = {category: [] for category in CATEGORIES}
    for item in sorted(items, key=lambda i: (i.category, i.display_order)):
        if not item.is_active:
            continue
        values = options.setdefault(item.category, [])
        if item.value not in values:
            values.append(item.value)
    return options


class CaseStore:
    def __init__(
        self,
        gateway: CaseGatewayProtocol,
        transport: DocumentTransport,
        max_total_upload_bytes: int = MAX_TOTAL_UPLOAD_BYTES,
    ):
        self._gateway = gateway
        self._transport = transport
        self._max_total_upload_bytes = max_total_upload_bytes
        self._cases: list[LoanCaseSchema] = []
        self._options: dict[str, list[str]] = {c: list(v) for c, v in DEFAULT_OPTIONS.items()}
        self._lock = asyncio.Lock()
        self.error: Optional[str] = None
        self.loaded = False

    # --- Read side ---

    @property
    def cases(self) -> list[LoanCaseSchema]:
        return list(self._cases)

    @property
    def options(self) -> dict[str, list[str]]:
        return {category: list(values) for category, values in self._options.items()}

    @property
    def officers(self) -> list[str]:
        return list(self._options.get(TEAM_MEMBER, []))

    @property
    def banks(self) -> list[str]:
        return list(self._options.get(BANK_NAME, []))

    @property
    def document_types(self) -> list[str]:
        return list(self._options.get(DOCUMENT_TYPE, []))

    def get_by_id(self, case_id: str) -> Optional[LoanCaseSchema]:
        return next((c for c in self._cases if c.id == case_id), None)

    def filter_cases(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        team_member: Optional[str] = None,
    ) -> list[LoanCaseSchema]:
        """List-view filter: free-text search over name, phone and loan type, plus exact status/officer."""
        term = (search or "").strip().lower()
        matches = []
        for case in self._cases:
            if term and not (
                term in case.applicant_name.lower()
                or term in case.contact_number
                or term in case.loan_type.lower()
            ):
                continue
            if status and case.status != status:
                continue
            if team_member and case.team_member != team_member:
                continue
            matches.append(case)
        return matches

    def _require_case(self, case_id: str) -> LoanCaseSchema:
        case = self.get_by_id(case_id)
        if case is None:
            raise CaseNotFoundError(case_id)
        return case

    def _record_error(self, action: str, exc: Exception) -> None:
        self.error = f"{action}: {exc}"
        logger.error("%s: %s", action, exc)

    def _reconcile_all(self) -> None:
        for case in self._cases:
            case.documents = reconcile_documents(case.documents, self._options[DOCUMENT_TYPE])

    def _next_local_id(self) -> str:
        taken = {c.id for c in self._cases}
        n = len(self._cases) + 1
        while f"LC-{n:03d}" in taken:
            n += 1
        return f"LC-{n:03d}"

    # --- Loading ---

    async def load(self) -> None:
        """
        Replace in-memory cases and options with the persisted state.

        A configuration table that has never held rows is seeded with the built-in
        options first; deleted values stay as inactive rows, so it is seeded once.
        On failure the previous data is kept untouched.
        """
        async with self._lock:
            self.error = None
            try:
                items = await self._gateway.list_config_items()
                if not items and await self._gateway.count_config_items() == 0:
                    await self._gateway.seed_configuration(default_config_items())
                    items = await self._gateway.list_config_items()
                cases = await self._gateway.list_cases()
            except GatewayError as e:
                self._record_error("Failed to load loan cases", e)
                raise
            options = build_options(items)
            for case in cases:
                case.documents = reconcile_documents(case.documents, options[DOCUMENT_TYPE])
            self._options = options
            self._cases = cases
            self.loaded = True
        logger.info("Loaded %d loan cases", len(cases))

    # --- Cases ---

    async def add_case(
        self, draft: LoanCaseCreate, attachments: Sequence[DocumentAttachment] = ()
    ) -> LoanCaseSchema:
        """
        Persist a new case, then upload its attachments one by one.

        A failure part-way leaves the already-created rows in place; the
        in-memory list catches up on the next load().
        """
        attachments = list(attachments)
        types = [a.document_type for a in attachments]
        unknown = sorted(set(types) - set(self._options[DOCUMENT_TYPE]))
        if unknown:
            raise CaseValidationError({"documents": [f"Unknown document type: {t}" for t in unknown]})
        repeated = sorted({t for t in types if types.count(t) > 1})
        if repeated:
            raise CaseValidationError({"documents": [f"Only one file per document type: {t}" for t in repeated]})
        ensure_within_upload_limit(0, sum(a.size for a in attachments), self._max_total_upload_bytes)

        async with self._lock:
            self.error = None
            try:
                created = await self._gateway.create_case(draft)
            except GatewayError as e:
                self._record_error("Failed to create loan case", e)
                raise
            if not created.id:
                created.id = self._next_local_id()

            for attachment in attachments:
                try:
                    url = await self._transport.upload(created.id, attachment.document_type, attachment)
                    document = await self._gateway.upsert_document(
                        created.id, attachment.document_type, url, attachment.size
                    )
                except (GatewayError, DocumentUploadError) as e:
                    logger.warning(
                        "Case %s was created but uploading %s failed; created rows are kept",
                        created.id,
                        attachment.document_type,
                    )
                    self._record_error(f"Failed to upload {attachment.document_type}", e)
                    raise
                created.documents = merge_document(created.documents, document)

            created.documents = reconcile_documents(created.documents, self._options[DOCUMENT_TYPE])
            self._cases.insert(0, created)
        logger.info("Added loan case %s for %s", created.id, created.applicant_name)
        return created

    async def update_case_status(
        self,
        case_id: str,
        status: str,
        remarks: str,
        details: Optional[ApprovalDetails] = None,
    ) -> LoanCaseSchema:
        """
        Move a case to any status, appending a history entry.

        Approval details are applied only for Approved/Disbursed, and only the
        fields supplied; earlier values are never cleared.
        """
        payload = {"status": status, "remarks": remarks}
        if details is not None:
            payload.update(details.supplied())
        update = validate_status_update(payload, self._options)
        details = update.approval_details() if update.status in APPROVAL_STATUSES else None

        async with self._lock:
            case = self._require_case(case_id)
            self.error = None
            try:
                entry = await self._gateway.update_case_status(case_id, update.status, update.remarks, details)
            except GatewayError as e:
                self._record_error(f"Failed to update status of case {case_id}", e)
                raise
            case.status = update.status
            case.history.append(entry)
            if details is not None:
                for field, value in details.supplied().items():
                    setattr(case, field, value)
        logger.info("Case %s moved to %s", case_id, update.status)
        return case

    async def update_case_document(
        self, case_id: str, document_type: str, attachment: DocumentAttachment
    ) -> CaseDocumentSchema:
        """Upload a file into one slot; rejected before upload if it breaks the size ceiling."""
        async with self._lock:
            case = self._require_case(case_id)
            if document_type not in self._options[DOCUMENT_TYPE]:
                raise CaseValidationError({"documentType": [f"Unknown document type: {document_type}"]})
            ensure_within_upload_limit(
                total_uploaded_bytes(case.documents, exclude_type=document_type),
                attachment.size,
                self._max_total_upload_bytes,
            )
            self.error = None
            try:
                url = await self._transport.upload(case_id, document_type, attachment)
                document = await self._gateway.upsert_document(case_id, document_type, url, attachment.size)
            except (GatewayError, DocumentUploadError) as e:
                self._record_error(f"Failed to upload {document_type} for case {case_id}", e)
                raise
            case.documents = reconcile_documents(
                merge_document(case.documents, document), self._options[DOCUMENT_TYPE]
            )
        return document

    # --- Configuration ---

    def _check_category(self, category: str) -> None:
        if category not in CATEGORIES:
            raise UnknownCategoryError(f"Unknown configuration category: {category}")

    @staticmethod
    def _clean_value(value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise CaseValidationError({"value": ["Value is required."]})
        return value

    async def add_config_item(self, category: str, value: str) -> ConfigItemSchema:
        self._check_category(category)
        value = self._clean_value(value)
        async with self._lock:
            if value in self._options[category]:
                raise DuplicateValueError(f"{value!r} already exists in {category}")
            self.error = None
            try:
                item = await self._gateway.add_config_item(category, value)
            except GatewayError as e:
                self._record_error(f"Failed to add {category} value", e)
                raise
            self._options[category].append(item.value)
            if category == DOCUMENT_TYPE:
                self._reconcile_all()
        return item

    async def delete_config_item(self, category: str, value: str) -> None:
        self._check_category(category)
        async with self._lock:
            if value not in self._options[category]:
                raise OptionNotFoundError(f"{value!r} is not a {category} value")
            self.error = None
            try:
                await self._gateway.delete_config_item(category, value)
            except GatewayError as e:
                self._record_error(f"Failed to delete {category} value", e)
                raise
            self._options[category].remove(value)
            if category == DOCUMENT_TYPE:
                self._reconcile_all()

    async def _rename_option(self, category: str, case_field: str, old: str, new: str) -> int:
        new = self._clean_value(new)
        async with self._lock:
            values = self._options[category]
            if old not in values:
                raise OptionNotFoundError(f"{old!r} is not a {category} value")
            if new == old:
                return 0
            if new in values:
                raise DuplicateValueError(f"{new!r} already exists in {category}")
            self.error = None
            try:
                await self._gateway.rename_config_item(category, old, new)
                changed = await self._gateway.rename_case_value(case_field, old, new)
            except GatewayError as e:
                self._record_error(f"Failed to rename {category} value", e)
                raise
            values[values.index(old)] = new
            for case in self._cases:
                if getattr(case, case_field) == old:
                    setattr(case, case_field, new)
        logger.info("Renamed %s %r to %r on %d cases", category, old, new, changed)
        return changed

    async def add_officer(self, name: str) -> ConfigItemSchema:
        return await self.add_config_item(TEAM_MEMBER, name)

    async def update_officer(self, old_name: str, new_name: str) -> int:
        return await self._rename_option(TEAM_MEMBER, "team_member", old_name, new_name)

    async def remove_officer(self, name: str) -> None:
        await self.delete_config_item(TEAM_MEMBER, name)

    async def add_bank(self, name: str) -> ConfigItemSchema:
        return await self.add_config_item(BANK_NAME, name)

    async def update_bank(self, old_name: str, new_name: str) -> int:
        if old_name == OTHER_BANK:
            raise CaseValidationError({"value": [f'The "{OTHER_BANK}" bank option cannot be renamed.']})
        return await self._rename_option(BANK_NAME, "bank_name", old_name, new_name)

    async def remove_bank(self, name: str) -> None:
        if name == OTHER_BANK:
            raise CaseValidationError({"value": [f'The "{OTHER_BANK}" bank option cannot be removed.']})
        await self.delete_config_item(BANK_NAME, name)

    async def seed_configuration(self) -> int:
        """Seed the built-in options into an empty configuration table and reload them."""
        async with self._lock:
            self.error = None
            try:
                count = await self._gateway.seed_configuration(default_config_items())
                items = await self._gateway.list_config_items()
            except GatewayError as e:
                self._record_error("Failed to seed configuration", e)
                raise
            self._options = build_options(items)
            self._reconcile_all()
        return count

    def validation_context(self) -> dict[str, dict[str, list[str]]]:
        return {"options": self.options}