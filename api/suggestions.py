from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_store
from schemas.suggestion import ApplicantProfile, SuggestionInput
from services.case_store import CaseStore
from services.errors import SuggestionError
from services.suggestions import build_applicant_data, build_approval_history, suggest_optimal_loan_features

router = APIRouter(prefix="/api/suggestions", tags=["suggestions"])


@router.post("", response_model=dict)
async def suggest_loan_features(body: ApplicantProfile, store: CaseStore = Depends(get_store)):
    """Suggest loan amount, type and repayment terms from the applicant and past case outcomes."""
    request = SuggestionInput(
        applicant_data=build_applicant_data(body),
        approval_history_data=build_approval_history(store.cases),
    )
    try:
        suggestion = await suggest_optimal_loan_features(request)
    except SuggestionError as e:
        raise HTTPException(status_code=502, detail=f"Failed to generate suggestions: {e}") from e
    return suggestion.model_dump(by_alias=True)
