from fastapi import HTTPException, Request

from services.case_store import CaseStore
from services.errors import (
    CaseNotFoundError,
    CaseStoreError,
    CaseValidationError,
    ConfigurationAlreadySeededError,
    DocumentUploadError,
    DuplicateValueError,
    GatewayError,
    OptionNotFoundError,
    UnknownCategoryError,
    UploadLimitExceededError,
)


def get_store(request: Request) -> CaseStore:
    return request.app.state.store


def to_http_exception(exc: CaseStoreError) -> HTTPException:
    """Map a failed store operation to the HTTP status the dashboard expects."""
    if isinstance(exc, CaseValidationError):
        return HTTPException(status_code=422, detail={"errors": exc.errors})
    if isinstance(exc, (CaseNotFoundError, OptionNotFoundError)):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, UploadLimitExceededError):
        return HTTPException(status_code=413, detail=str(exc))
    if isinstance(exc, (DuplicateValueError, ConfigurationAlreadySeededError)):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, UnknownCategoryError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, (GatewayError, DocumentUploadError)):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
