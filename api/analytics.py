from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_store
from constants import CASE_STATUS, STATUS_OPTIONS
from services.analytics import build_dashboard
from services.case_store import CaseStore
from utils.serialization import camelize

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("")
async def get_analytics(
    start: Optional[date] = Query(None, alias="from", description="First application date (inclusive)"),
    end: Optional[date] = Query(None, alias="to", description="Last application date (inclusive)"),
    store: CaseStore = Depends(get_store),
):
    if start and end and start > end:
        raise HTTPException(status_code=400, detail="'from' must not be after 'to'")
    statuses = store.options.get(CASE_STATUS) or STATUS_OPTIONS
    return camelize(build_dashboard(store.cases, start, end, statuses))
