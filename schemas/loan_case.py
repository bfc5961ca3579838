from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from constants import (
    BANK_NAME,
    CASE_STATUS,
    CASE_TYPE,
    DEFAULT_OPTIONS,
    DEFAULT_STATUS,
    JOB_PROFILE,
    LOAN_TYPE,
    OTHER_BANK,
    TEAM_MEMBER,
)

PHONE_PATTERN = r"^([+]?[\s0-9]+)?(\d{3}|[(]\d{3}[)])?[\s-]?(\d{3})[\s-]?(\d{4})$"
PAN_PATTERN = r"^[A-Z]{5}[0-9]{4}[A-Z]{1}$"

# Option-backed fields and the configuration category holding their allowed values.
OPTION_FIELDS = {
    "loan_type": LOAN_TYPE,
    "case_type": CASE_TYPE,
    "job_profile": JOB_PROFILE,
    "team_member": TEAM_MEMBER,
    "status": CASE_STATUS,
    "bank_name": BANK_NAME,
}

APPROVAL_FIELDS = ("approved_amount", "roi", "approved_tenure", "processing_fee", "insurance_amount")

# One human-readable message per field, whatever rule failed.
FIELD_MESSAGES = {
    "applicant_name": "Applicant name must be at least 2 characters.",
    "loan_amount": "Loan amount must be a positive number.",
    "loan_type": "Please select a valid loan type.",
    "case_type": "Please select a valid case type.",
    "tenure": "Tenure must be a positive number (in months).",
    "obligation": "Obligation cannot be negative.",
    "contact_number": "Invalid phone number format.",
    "email": "Please enter a valid email address.",
    "address": "Address must be at least 5 characters.",
    "application_date": "An application date is required.",
    "team_member": "Please select a valid team member.",
    "status": "Please select a valid status.",
    "salary": "Salary must be a positive number.",
    "location": "Location is required.",
    "dob": "Date of birth is required.",
    "pan_card_number": "Invalid PAN card number format.",
    "job_profile": "Please select a valid job profile.",
    "job_designation": "Job designation is required.",
    "reference_name": "Reference name is required.",
    "bank_name": "Please select a valid bank.",
    "other_bank_name": 'Please specify the bank name when "Other" is selected.',
    "bank_office_sm": "Bank Office/SM is required.",
    "remarks": "Remarks are required for a status update.",
}


def allowed_options(info: ValidationInfo, category: str) -> list[str]:
    """Active values for a category from the validation context, else the built-in defaults."""
    options = (info.context or {}).get("options") or {}
    if category in options:
        return list(options[category])
    return list(DEFAULT_OPTIONS[category])


class CaseUpdateSchema(BaseModel):
    """One status-change entry in a case's history."""

    timestamp: datetime
    status: str
    remarks: str


class CaseDocumentSchema(BaseModel):
    """A document checklist slot; file holds the stored file URL once uploaded."""

    type: str
    uploaded: bool = False
    file: Optional[str] = None
    size: Optional[int] = None


class LoanCaseSchema(BaseModel):
    id: str
    applicant_name: str
    loan_amount: float
    loan_type: str
    case_type: str
    contact_number: str
    email: str
    address: str
    application_date: date
    team_member: str
    status: str
    notes: str = ""
    history: list[CaseUpdateSchema] = Field(default_factory=list)
    salary: float
    location: str
    dob: date
    pan_card_number: str
    job_profile: str
    job_designation: str
    reference_name: str
    bank_name: str
    other_bank_name: Optional[str] = None
    bank_office_sm: str
    documents: list[CaseDocumentSchema] = Field(default_factory=list)
    tenure: int
    obligation: float = 0
    approved_amount: Optional[float] = None
    roi: Optional[float] = None
    approved_tenure: Optional[int] = None
    processing_fee: Optional[float] = None
    insurance_amount: Optional[float] = None


class LoanCaseCreate(BaseModel):
    """
    Draft of a new loan case as submitted by the case form.

    Option fields are checked against the active configuration passed as
    validation context: LoanCaseCreate.model_validate(data, context={"options": {...}}).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    applicant_name: str = Field(..., min_length=2)
    loan_amount: float = Field(..., gt=0)
    loan_type: str
    case_type: str
    tenure: int = Field(..., gt=0)
    obligation: float = Field(0, ge=0)
    contact_number: str = Field(..., pattern=PHONE_PATTERN)
    email: EmailStr
    address: str = Field(..., min_length=5)
    application_date: date
    team_member: str
    status: str = Field(DEFAULT_STATUS, validate_default=True)
    notes: str = ""
    salary: float = Field(..., gt=0)
    location: str = Field(..., min_length=2)
    dob: date
    pan_card_number: str = Field(..., pattern=PAN_PATTERN)
    job_profile: str
    job_designation: str = Field(..., min_length=2)
    reference_name: str = Field(..., min_length=2)
    bank_name: str
    # Declared after bank_name so the cross-field check can see it.
    other_bank_name: Optional[str] = Field(None, validate_default=True)
    bank_office_sm: str = Field(..., min_length=2)
    approved_amount: Optional[float] = None
    roi: Optional[float] = None
    approved_tenure: Optional[int] = None
    processing_fee: Optional[float] = None
    insurance_amount: Optional[float] = None

    @field_validator("loan_type", "case_type", "job_profile", "team_member", "status", "bank_name")
    @classmethod
    def _check_configured_option(cls, value: str, info: ValidationInfo) -> str:
        category = OPTION_FIELDS[info.field_name]
        if value not in allowed_options(info, category):
            raise ValueError(f"{value!r} is not an allowed {category} value")
        return value

    @field_validator("other_bank_name")
    @classmethod
    def _check_other_bank_name(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if info.data.get("bank_name") != OTHER_BANK:
            return None
        if not value or len(value) <= 2:
            raise ValueError("other bank name must be longer than 2 characters")
        return value


class ApprovalDetails(BaseModel):
    """Loan terms recorded when a case reaches Approved or Disbursed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    approved_amount: Optional[float] = None
    roi: Optional[float] = None
    approved_tenure: Optional[int] = None
    processing_fee: Optional[float] = None
    insurance_amount: Optional[float] = None

    def supplied(self) -> dict[str, Any]:
        """Only the fields that were actually given."""
        return self.model_dump(include=set(APPROVAL_FIELDS), exclude_none=True)


class StatusUpdate(ApprovalDetails):
    status: str
    remarks: str = Field(..., min_length=1)

    @field_validator("status")
    @classmethod
    def _check_status(cls, value: str, info: ValidationInfo) -> str:
        if value not in allowed_options(info, CASE_STATUS):
            raise ValueError(f"{value!r} is not an allowed {CASE_STATUS} value")
        return value

    @field_validator("remarks")
    @classmethod
    def _strip_remarks(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("remarks must not be blank")
        return value.strip()

    def approval_details(self) -> Optional[ApprovalDetails]:
        supplied = self.supplied()
        return ApprovalDetails(**supplied) if supplied else None
