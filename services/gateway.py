"""
Persistence gateway: maps loan cases to the loan_cases / case_history /
case_documents tables and configuration options to app_configuration.

Every database failure is logged and re-raised as GatewayError carrying the
driver's message unchanged.
"""
from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Iterable, Optional, Sequence, Union

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from constants import CASE_CREATED_REMARKS, OTHER_BANK
from models import AppConfiguration, CaseDocument, CaseHistory, LoanCase
from schemas.configuration import ConfigItemCreate, ConfigItemSchema
from schemas.loan_case import (
    ApprovalDetails,
    CaseDocumentSchema,
    CaseUpdateSchema,
    LoanCaseCreate,
    LoanCaseSchema,
)
from services.errors import CaseNotFoundError, ConfigurationAlreadySeededError, GatewayError

logger = logging.getLogger(__name__)

# Scalar columns shared by the loan_cases table and the case schemas.
CASE_COLUMNS = (
    "applicant_name",
    "loan_amount",
    "loan_type",
    "case_type",
    "contact_number",
    "email",
    "address",
    "application_date",
    "team_member",
    "status",
    "notes",
    "salary",
    "location",
    "dob",
    "pan_card_number",
    "job_profile",
    "job_designation",
    "reference_name",
    "bank_name",
    "other_bank_name",
    "bank_office_sm",
    "tenure",
    "obligation",
    "approved_amount",
    "roi",
    "approved_tenure",
    "processing_fee",
    "insurance_amount",
)

# Case fields an officer/bank rename cascades into.
RENAMEABLE_CASE_FIELDS = {
    "team_member": LoanCase.team_member,
    "bank_name": LoanCase.bank_name,
}

# Keep IN (...) lists below SQLite's bound-parameter limit.
_IN_CHUNK = 500


def new_case_id() -> str:
    return f"LC-{uuid.uuid4().hex[:12]}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes for timezone-aware columns.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def history_to_schema(row: CaseHistory) -> CaseUpdateSchema:
    return CaseUpdateSchema(timestamp=_as_utc(row.timestamp), status=row.status, remarks=row.remarks)


def document_to_schema(row: CaseDocument) -> CaseDocumentSchema:
    return CaseDocumentSchema(
        type=row.document_type,
        uploaded=bool(row.uploaded),
        file=row.file_url,
        size=row.file_size,
    )


def row_to_case(
    row: LoanCase,
    history: Iterable[CaseHistory] = (),
    documents: Iterable[CaseDocument] = (),
) -> LoanCaseSchema:
    """Assemble one case from its row plus its (already ordered) history and document rows."""
    values = {name: getattr(row, name) for name in CASE_COLUMNS}
    values["notes"] = values["notes"] or ""
    return LoanCaseSchema(
        id=row.id,
        history=[history_to_schema(h) for h in history],
        documents=[document_to_schema(d) for d in documents],
        **values,
    )


def case_to_row_values(case: Union[LoanCaseCreate, LoanCaseSchema]) -> dict:
    """Inverse of row_to_case for the scalar columns; absent optionals become NULL."""
    values = {name: getattr(case, name, None) for name in CASE_COLUMNS}
    if values["bank_name"] != OTHER_BANK:
        values["other_bank_name"] = None
    return values


def config_to_schema(row: AppConfiguration) -> ConfigItemSchema:
    return ConfigItemSchema(
        id=row.id,
        category=row.category,
        value=row.value,
        is_active=row.is_active,
        display_order=row.display_order,
    )


def _chunks(ids: Sequence[str], size: Optional[int] = None) -> Iterable[Sequence[str]]:
    size = size or _IN_CHUNK
    for start in range(0, len(ids), size):
        yield ids[start:start + size]


class CaseGateway:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, action: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as e:
            message = str(getattr(e, "orig", None) or e)
            logger.error("Error %s: %s", action, message)
            raise GatewayError(message) from e

    async def _history_for(self, session: AsyncSession, case_ids: Sequence[str]) -> dict[str, list[CaseHistory]]:
        grouped: dict[str, list[CaseHistory]] = {}
        for chunk in _chunks(case_ids):
            result = await session.execute(
                select(CaseHistory)
                .where(CaseHistory.case_id.in_(chunk))
                .order_by(CaseHistory.timestamp, CaseHistory.id)
            )
            for h in result.scalars().all():
                grouped.setdefault(h.case_id, []).append(h)
        return grouped

    async def _documents_for(self, session: AsyncSession, case_ids: Sequence[str]) -> dict[str, list[CaseDocument]]:
        grouped: dict[str, list[CaseDocument]] = {}
        for chunk in _chunks(case_ids):
            result = await session.execute(
                select(CaseDocument)
                .where(CaseDocument.case_id.in_(chunk))
                .order_by(CaseDocument.id)
            )
            for d in result.scalars().all():
                grouped.setdefault(d.case_id, []).append(d)
        return grouped

    # --- Cases ---

    async def list_cases(self) -> list[LoanCaseSchema]:
        """All cases, newest first, with history and documents fetched in batches."""
        async with self._transaction("fetching loan cases") as session:
            result = await session.execute(select(LoanCase).order_by(LoanCase.created_at.desc(), LoanCase.id))
            rows = result.scalars().all()
            ids = [r.id for r in rows]
            history = await self._history_for(session, ids) if ids else {}
            documents = await self._documents_for(session, ids) if ids else {}
        return [row_to_case(r, history.get(r.id, []), documents.get(r.id, [])) for r in rows]

    async def get_case(self, case_id: str) -> Optional[LoanCaseSchema]:
        async with self._transaction(f"fetching loan case {case_id}") as session:
            result = await session.execute(select(LoanCase).where(LoanCase.id == case_id))
            row = result.scalar_one_or_none()
            if row is None:
                return None
            history = await self._history_for(session, [case_id])
            documents = await self._documents_for(session, [case_id])
        return row_to_case(row, history.get(case_id, []), documents.get(case_id, []))

    async def create_case(self, draft: LoanCaseCreate, case_id: Optional[str] = None) -> LoanCaseSchema:
        """Insert the case row and its opening history entry in one transaction."""
        now = _utcnow()
        row = LoanCase(
            id=case_id or new_case_id(),
            created_at=now,
            updated_at=now,
            **case_to_row_values(draft),
        )
        entry = CaseHistory(case_id=row.id, timestamp=now, status=draft.status, remarks=CASE_CREATED_REMARKS)
        async with self._transaction("creating loan case") as session:
            session.add(row)
            await session.flush()
            session.add(entry)
        logger.info("Created loan case %s", row.id)
        return row_to_case(row, [entry], [])

    async def update_case_status(
        self,
        case_id: str,
        status: str,
        remarks: str,
        details: Optional[ApprovalDetails] = None,
    ) -> CaseUpdateSchema:
        """Update the case row and append its history entry atomically; returns the new entry."""
        now = _utcnow()
        values = {"status": status, "updated_at": now}
        if details is not None:
            values.update(details.supplied())
        entry = CaseHistory(case_id=case_id, timestamp=now, status=status, remarks=remarks)
        async with self._transaction(f"updating status of case {case_id}") as session:
            result = await session.execute(update(LoanCase).where(LoanCase.id == case_id).values(**values))
            if result.rowcount == 0:
                raise CaseNotFoundError(case_id)
            session.add(entry)
        return history_to_schema(entry)

    async def upsert_document(
        self,
        case_id: str,
        document_type: str,
        file_url: str,
        file_size: Optional[int] = None,
    ) -> CaseDocumentSchema:
        """Record an uploaded file against (case_id, document_type)."""
        async with self._transaction(f"saving {document_type} for case {case_id}") as session:
            exists = await session.execute(select(LoanCase.id).where(LoanCase.id == case_id))
            if exists.scalar_one_or_none() is None:
                raise CaseNotFoundError(case_id)
            result = await session.execute(
                select(CaseDocument).where(
                    CaseDocument.case_id == case_id,
                    CaseDocument.document_type == document_type,
                )
            )
            doc = result.scalar_one_or_none()
            if doc is None:
                doc = CaseDocument(case_id=case_id, document_type=document_type)
                session.add(doc)
            doc.uploaded = True
            doc.file_url = file_url
            doc.file_size = file_size
            doc.updated_at = _utcnow()
            await session.flush()
        return document_to_schema(doc)

    async def rename_case_value(self, field: str, old: str, new: str) -> int:
        """Rewrite team_member or bank_name on every case holding the old value; returns rows changed."""
        try:
            column = RENAMEABLE_CASE_FIELDS[field]
        except KeyError:
            raise ValueError(f"Cannot cascade a rename into {field!r}") from None
        async with self._transaction(f"renaming {field} {old!r} to {new!r}") as session:
            result = await session.execute(
                update(LoanCase).where(column == old).values({column: new, LoanCase.updated_at: _utcnow()})
            )
        return result.rowcount or 0

    # --- Configuration ---

    async def list_config_items(self, active_only: bool = True) -> list[ConfigItemSchema]:
        stmt = select(AppConfiguration).order_by(
            AppConfiguration.category, AppConfiguration.display_order, AppConfiguration.created_at
        )
        if active_only:
            stmt = stmt.where(AppConfiguration.is_active.is_(True))
        async with self._transaction("fetching app configuration") as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [config_to_schema(r) for r in rows]

    async def count_config_items(self) -> int:
        async with self._transaction("counting app configuration") as session:
            result = await session.execute(select(func.count()).select_from(AppConfiguration))
            return int(result.scalar_one())

    async def _find_config_row(
        self, session: AsyncSession, category: str, value: str
    ) -> Optional[AppConfiguration]:
        result = await session.execute(
            select(AppConfiguration).where(
                AppConfiguration.category == category,
                AppConfiguration.value == value,
            )
        )
        return result.scalar_one_or_none()

    async def add_config_item(self, category: str, value: str) -> ConfigItemSchema:
        """Append a value to a category; a previously deactivated row is revived instead of duplicated."""
        async with self._transaction(f"adding {category} value {value!r}") as session:
            result = await session.execute(
                select(func.max(AppConfiguration.display_order)).where(AppConfiguration.category == category)
            )
            last = result.scalar_one_or_none()
            next_order = (last + 1) if last is not None else 0
            row = await self._find_config_row(session, category, value)
            if row is not None and not row.is_active:
                row.is_active = True
                row.display_order = next_order
            else:
                row = AppConfiguration(
                    id=uuid.uuid4().hex,
                    category=category,
                    value=value,
                    is_active=True,
                    display_order=next_order,
                )
                session.add(row)
            await session.flush()
        return config_to_schema(row)

    async def delete_config_item(self, category: str, value: str) -> bool:
        """Deactivate a value. Rows are kept so an emptied table is never mistaken for a fresh one."""
        async with self._transaction(f"deleting {category} value {value!r}") as session:
            row = await self._find_config_row(session, category, value)
            if row is None or not row.is_active:
                return False
            row.is_active = False
        return True

    async def rename_config_item(self, category: str, old: str, new: str) -> bool:
        async with self._transaction(f"renaming {category} value {old!r}") as session:
            stale = await self._find_config_row(session, category, new)
            if stale is not None and not stale.is_active:
                await session.delete(stale)
                await session.flush()
            result = await session.execute(
                update(AppConfiguration)
                .where(
                    AppConfiguration.category == category,
                    AppConfiguration.value == old,
                    AppConfiguration.is_active.is_(True),
                )
                .values(value=new)
            )
        return bool(result.rowcount)

    async def seed_configuration(self, items: Sequence[ConfigItemCreate]) -> int:
        """Bulk insert options; refuses when the table already holds any row."""
        async with self._transaction("seeding app configuration") as session:
            result = await session.execute(select(func.count()).select_from(AppConfiguration))
            if result.scalar_one() > 0:
                raise ConfigurationAlreadySeededError()
            session.add_all(
                AppConfiguration(
                    id=uuid.uuid4().hex,
                    category=item.category,
                    value=item.value,
                    is_active=True,
                    display_order=item.display_order,
                )
                for item in items
            )
        logger.info("Seeded app configuration with %d values", len(items))
        return len(items)
