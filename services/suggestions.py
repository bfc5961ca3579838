"""
Loan feature suggestions from an OpenAI chat model.

The model receives the applicant's figures and a digest of past cases and must
answer with the LoanSuggestion JSON shape; anything else is a SuggestionError.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from config import settings
from schemas.loan_case import LoanCaseSchema
from schemas.suggestion import ApplicantProfile, LoanSuggestion, SuggestionInput
from services.errors import SuggestionError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a loan expert advising loan officers. Reply with a single JSON object."

SUGGESTION_PROMPT = """Given the applicant data and the historical loan approval data below, suggest the
combination of loan features (loan amount, loan type, repayment terms) most likely to be approved
while keeping risk low.

Applicant Data: {applicant_data}
Approval History Data: {approval_history_data}

Rules:
- Suggest only realistic loan amounts, loan types and repayment terms.
- Keep the rationale to at most 5 sentences.
- Use both the applicant data and the approval history; where they conflict, be cautious.

Respond with JSON in exactly this shape:
{{
  "suggestedLoanAmount": <number>,
  "suggestedLoanType": "<loan type>",
  "suggestedRepaymentTerms": "<repayment terms>",
  "rationale": "<why these features are suggested>"
}}
"""


def build_applicant_data(profile: ApplicantProfile) -> str:
    return json.dumps(profile.model_dump(by_alias=True))


def build_approval_history(cases: Iterable[LoanCaseSchema]) -> str:
    """Digest of past outcomes: amount, type and current status of each case."""
    return json.dumps(
        [{"loanAmount": c.loan_amount, "loanType": c.loan_type, "status": c.status} for c in cases]
    )


def _get_client() -> AsyncOpenAI:
    if not settings.openai_api_key:
        raise SuggestionError("OPENAI_API_KEY is not configured")
    return AsyncOpenAI(api_key=settings.openai_api_key)


def parse_suggestion(content: Optional[str]) -> LoanSuggestion:
    if not content:
        raise SuggestionError("Model returned an empty response")
    try:
        return LoanSuggestion.model_validate_json(content)
    except ValidationError as e:
        logger.warning("Suggestion output failed validation: %s", e)
        raise SuggestionError(f"Model output did not match the suggestion schema: {e.error_count()} error(s)") from e


async def suggest_optimal_loan_features(
    request: SuggestionInput,
    client: Any = None,
    model: Optional[str] = None,
) -> LoanSuggestion:
    client = client or _get_client()
    prompt = SUGGESTION_PROMPT.format(
        applicant_data=request.applicant_data,
        approval_history_data=request.approval_history_data,
    )
    try:
        response = await client.chat.completions.create(
            model=model or settings.openai_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            temperature=0.2,
        )
    except OpenAIError as e:
        logger.error("Suggestion request failed: %s", e)
        raise SuggestionError(str(e)) from e
    return parse_suggestion(response.choices[0].message.content)
