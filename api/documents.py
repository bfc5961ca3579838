from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from api.dependencies import get_store, to_http_exception
from services.case_store import CaseStore
from services.documents import DocumentAttachment
from services.errors import CaseStoreError
from utils.serialization import model_to_camel

router = APIRouter(prefix="/api/case-documents", tags=["documents"])


@router.post("", response_model=dict)
async def upload_case_document(
    file: UploadFile = File(..., description="Document file"),
    case_id: str = Form(..., alias="caseId"),
    document_type: str = Form(..., alias="documentType"),
    store: CaseStore = Depends(get_store),
):
    """
    Upload one document for a case: the file goes to object storage and the
    (case, document type) slot is marked uploaded with the file URL.
    """
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="File is empty.")
    attachment = DocumentAttachment(
        document_type=document_type,
        filename=file.filename or "document",
        content=content,
        content_type=file.content_type,
    )
    try:
        document = await store.update_case_document(case_id, document_type, attachment)
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return {"document": {"caseId": case_id, **model_to_camel(document)}}
