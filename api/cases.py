import json
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, Query, UploadFile

from api.dependencies import get_store, to_http_exception
from services.case_store import CaseStore
from services.documents import DocumentAttachment
from services.errors import CaseStoreError
from services.validation import validate_case_draft, validate_status_update
from utils.serialization import model_to_camel

router = APIRouter(prefix="/api/cases", tags=["cases"])

MSG_CASE_NOT_FOUND = "Loan case not found"


@router.get("")
async def list_cases(
    search: Optional[str] = Query(None, description="Matches applicant name, contact number or loan type"),
    status: Optional[str] = None,
    team_member: Optional[str] = Query(None, alias="teamMember"),
    store: CaseStore = Depends(get_store),
):
    return [model_to_camel(c) for c in store.filter_cases(search, status, team_member)]


@router.get("/{case_id}")
async def get_case(case_id: str, store: CaseStore = Depends(get_store)):
    case = store.get_by_id(case_id)
    if not case:
        raise HTTPException(status_code=404, detail=MSG_CASE_NOT_FOUND)
    return model_to_camel(case)


@router.post("", status_code=201)
async def create_case(body: dict[str, Any] = Body(...), store: CaseStore = Depends(get_store)):
    try:
        draft = validate_case_draft(body, store.options)
        case = await store.add_case(draft)
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return model_to_camel(case)


@router.post("/with-documents", status_code=201)
async def create_case_with_documents(
    case: str = Form(..., description="Case draft as a JSON object"),
    files: list[UploadFile] = File(default=[], description="One file per document type"),
    document_types: list[str] = Form(default=[], alias="documentTypes"),
    store: CaseStore = Depends(get_store),
):
    """
    Create a case and upload its documents in one multipart request:
    files[i] is stored under documentTypes[i].
    """
    try:
        body = json.loads(case)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=422, detail={"errors": {"form": [f"Case draft is not valid JSON: {e.msg}"]}}) from e
    if not isinstance(body, dict):
        raise HTTPException(status_code=422, detail={"errors": {"form": ["Case draft must be a JSON object."]}})
    if len(files) != len(document_types):
        raise HTTPException(status_code=422, detail={"errors": {"documents": ["Each file needs a document type."]}})

    attachments = []
    for upload, document_type in zip(files, document_types):
        content = await upload.read()
        if not content:
            raise HTTPException(status_code=400, detail=f"File for {document_type} is empty.")
        attachments.append(
            DocumentAttachment(
                document_type=document_type,
                filename=upload.filename or "document",
                content=content,
                content_type=upload.content_type,
            )
        )
    try:
        draft = validate_case_draft(body, store.options)
        created = await store.add_case(draft, attachments)
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return model_to_camel(created)


@router.post("/{case_id}/status")
async def update_case_status(case_id: str, body: dict[str, Any] = Body(...), store: CaseStore = Depends(get_store)):
    """Move the case to any status; remarks are required, approval terms optional."""
    try:
        update = validate_status_update(body, store.options)
        case = await store.update_case_status(case_id, update.status, update.remarks, update.approval_details())
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return model_to_camel(case)


@router.get("/{case_id}/history")
async def get_case_history(case_id: str, store: CaseStore = Depends(get_store)):
    case = store.get_by_id(case_id)
    if not case:
        raise HTTPException(status_code=404, detail=MSG_CASE_NOT_FOUND)
    return [model_to_camel(h) for h in case.history]
