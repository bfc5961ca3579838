"""
In-memory stand-ins for the persistence gateway and the document transport,
so case-store rules can be tested without a database or object storage.
"""
from __future__ import annotations

import itertools
from datetime import datetime, timezone
from typing import Optional, Sequence

from constants import CASE_CREATED_REMARKS
from schemas.configuration import ConfigItemCreate, ConfigItemSchema
from schemas.loan_case import ApprovalDetails, CaseDocumentSchema, CaseUpdateSchema, LoanCaseCreate, LoanCaseSchema
from services.documents import DocumentAttachment
from services.errors import (
    CaseNotFoundError,
    ConfigurationAlreadySeededError,
    DocumentUploadError,
    GatewayError,
)
from services.gateway import case_to_row_values


class InMemoryGateway:
    def __init__(self, assign_ids: bool = True):
        self.assign_ids = assign_ids
        self.cases: dict[str, LoanCaseSchema] = {}
        self.config: list[ConfigItemSchema] = []
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self._ids = itertools.count(1)

    def _call(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise GatewayError(f"{name} failed")

    async def list_cases(self) -> list[LoanCaseSchema]:
        self._call("list_cases")
        return [c.model_copy(deep=True) for c in reversed(list(self.cases.values()))]

    async def create_case(self, draft: LoanCaseCreate, case_id: Optional[str] = None) -> LoanCaseSchema:
        self._call("create_case")
        if case_id is None and self.assign_ids:
            case_id = f"CASE-{next(self._ids)}"
        now = datetime.now(timezone.utc)
        case = LoanCaseSchema(
            id=case_id or "",
            history=[CaseUpdateSchema(timestamp=now, status=draft.status, remarks=CASE_CREATED_REMARKS)],
            **case_to_row_values(draft),
        )
        if case.id:
            self.cases[case.id] = case.model_copy(deep=True)
        return case

    async def update_case_status(
        self, case_id: str, status: str, remarks: str, details: Optional[ApprovalDetails] = None
    ) -> CaseUpdateSchema:
        self._call("update_case_status")
        stored = self.cases.get(case_id)
        if stored is None:
            raise CaseNotFoundError(case_id)
        entry = CaseUpdateSchema(timestamp=datetime.now(timezone.utc), status=status, remarks=remarks)
        stored.status = status
        stored.history.append(entry)
        if details is not None:
            for field, value in details.supplied().items():
                setattr(stored, field, value)
        return entry

    async def upsert_document(
        self, case_id: str, document_type: str, file_url: str, file_size: Optional[int] = None
    ) -> CaseDocumentSchema:
        self._call("upsert_document")
        document = CaseDocumentSchema(type=document_type, uploaded=True, file=file_url, size=file_size)
        stored = self.cases.get(case_id)
        if stored is not None:
            stored.documents = [d for d in stored.documents if d.type != document_type] + [document]
        return document

    async def rename_case_value(self, field: str, old: str, new: str) -> int:
        self._call("rename_case_value")
        changed = 0
        for case in self.cases.values():
            if getattr(case, field) == old:
                setattr(case, field, new)
                changed += 1
        return changed

    async def list_config_items(self, active_only: bool = True) -> list[ConfigItemSchema]:
        self._call("list_config_items")
        return [i for i in self.config if i.is_active or not active_only]

    async def count_config_items(self) -> int:
        self._call("count_config_items")
        return len(self.config)

    def _find_config(self, category: str, value: str) -> Optional[ConfigItemSchema]:
        return next((i for i in self.config if i.category == category and i.value == value), None)

    async def add_config_item(self, category: str, value: str) -> ConfigItemSchema:
        self._call("add_config_item")
        order = max((i.display_order for i in self.config if i.category == category), default=-1) + 1
        item = self._find_config(category, value)
        if item is not None and not item.is_active:
            item.is_active = True
            item.display_order = order
            return item
        item = ConfigItemSchema(id=f"cfg-{len(self.config)}", category=category, value=value, display_order=order)
        self.config.append(item)
        return item

    async def delete_config_item(self, category: str, value: str) -> bool:
        self._call("delete_config_item")
        item = self._find_config(category, value)
        if item is None or not item.is_active:
            return False
        item.is_active = False
        return True

    async def rename_config_item(self, category: str, old: str, new: str) -> bool:
        self._call("rename_config_item")
        self.config = [
            i for i in self.config if not (i.category == category and i.value == new and not i.is_active)
        ]
        item = self._find_config(category, old)
        if item is None or not item.is_active:
            return False
        item.value = new
        return True

    async def seed_configuration(self, items: Sequence[ConfigItemCreate]) -> int:
        self._call("seed_configuration")
        if self.config:
            raise ConfigurationAlreadySeededError()
        self.config = [
            ConfigItemSchema(id=f"cfg-{n}", category=i.category, value=i.value, display_order=i.display_order)
            for n, i in enumerate(items)
        ]
        return len(items)


class FakeTransport:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploads: list[tuple[str, str, int]] = []

    async def upload(self, case_id: str, document_type: str, attachment: DocumentAttachment) -> str:
        if self.fail:
            raise DocumentUploadError("storage unavailable")
        self.uploads.append((case_id, document_type, attachment.size))
        return f"https://files.example.com/{case_id}/{attachment.filename}"


def valid_draft_data(**overrides) -> dict:
    data = {
        "applicantName": "Alice Johnson",
        "loanAmount": 5000,
        "loanType": "Personal",
        "caseType": "New",
        "tenure": 24,
        "obligation": 500,
        "contactNumber": "123-456-7890",
        "email": "alice.j@example.com",
        "address": "123 Main St, Anytown",
        "applicationDate": "2024-03-01",
        "teamMember": "John Doe",
        "status": "Document Pending",
        "notes": "",
        "salary": 60000,
        "location": "Anytown",
        "dob": "1990-05-15",
        "panCardNumber": "ABCDE1234F",
        "jobProfile": "Private",
        "jobDesignation": "Software Engineer",
        "referenceName": "Bob Johnson",
        "bankName": "HDFC Bank",
        "bankOfficeSm": "SM-1",
    }
    data.update(overrides)
    return data
