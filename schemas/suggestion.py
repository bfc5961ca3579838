from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_RATIONALE_SENTENCES = 5

_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


class ApplicantProfile(BaseModel):
    """Applicant figures entered on the suggestions form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    credit_score: int = Field(..., ge=300, le=850)
    income: float = Field(..., gt=0)
    employment_history: str = Field(..., min_length=1)


class SuggestionInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    applicant_data: str = Field(..., description="JSON string with applicant figures (credit score, income, employment)")
    approval_history_data: str = Field(..., description="JSON string with past cases: loan amount, loan type, outcome")


class LoanSuggestion(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    suggested_loan_amount: float
    suggested_loan_type: str
    suggested_repayment_terms: str
    rationale: str

    @field_validator("rationale")
    @classmethod
    def _limit_rationale(cls, value: str) -> str:
        sentences = [s for s in _SENTENCE_END.split(value.strip()) if s]
        return " ".join(sentences[:MAX_RATIONALE_SENTENCES])
