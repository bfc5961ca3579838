from schemas.configuration import ConfigItemCreate, ConfigItemSchema, ConfigurationResponse, ConfigValueIn
from schemas.loan_case import (
    ApprovalDetails,
    CaseDocumentSchema,
    CaseUpdateSchema,
    LoanCaseCreate,
    LoanCaseSchema,
    StatusUpdate,
)
from schemas.suggestion import ApplicantProfile, LoanSuggestion, SuggestionInput

__all__ = [
    "ApplicantProfile",
    "ApprovalDetails",
    "CaseDocumentSchema",
    "CaseUpdateSchema",
    "ConfigItemCreate",
    "ConfigItemSchema",
    "ConfigurationResponse",
    "ConfigValueIn",
    "LoanCaseCreate",
    "LoanCaseSchema",
    "LoanSuggestion",
    "StatusUpdate",
    "SuggestionInput",
]
