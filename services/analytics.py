"""
Dashboard aggregations over loan cases: headline counts, status breakdown,
monthly volume, disbursed amounts and officer workload.
"""
from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from constants import APPROVAL_STATUSES, DISBURSED_STATUS, STATUS_OPTIONS
from schemas.loan_case import LoanCaseSchema

REJECTED_STATUS = "Reject"


def month_label(d: date) -> str:
    """e.g. date(2024, 3, 9) -> 'Mar 24'."""
    return d.strftime("%b %y")


def filter_by_date_range(
    cases: Iterable[LoanCaseSchema],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[LoanCaseSchema]:
    """Cases whose application date lies in [start, end]; either bound may be open."""
    return [
        c
        for c in cases
        if (start is None or c.application_date >= start) and (end is None or c.application_date <= end)
    ]


def summarize(cases: Sequence[LoanCaseSchema]) -> dict[str, int]:
    approved = sum(1 for c in cases if c.status in APPROVAL_STATUSES)
    rejected = sum(1 for c in cases if c.status == REJECTED_STATUS)
    return {
        "total": len(cases),
        "approved": approved,
        "disbursed": sum(1 for c in cases if c.status == DISBURSED_STATUS),
        "rejected": rejected,
        "open": len(cases) - approved - rejected,
    }


def cases_by_status(
    cases: Iterable[LoanCaseSchema], statuses: Sequence[str] = STATUS_OPTIONS
) -> list[dict[str, Any]]:
    """Count per status in display order; statuses outside the list follow in first-seen order."""
    counts = Counter(c.status for c in cases)
    ordered = list(statuses) + [s for s in counts if s not in statuses]
    return [{"status": s, "count": counts.get(s, 0)} for s in ordered]


def _by_month(pairs: Iterable[tuple[date, float]]) -> list[tuple[str, float]]:
    totals: dict[tuple[int, int], float] = {}
    for d, value in pairs:
        key = (d.year, d.month)
        totals[key] = totals.get(key, 0) + value
    return [(month_label(date(y, m, 1)), totals[(y, m)]) for y, m in sorted(totals)]


def cases_over_time(cases: Iterable[LoanCaseSchema]) -> list[dict[str, Any]]:
    return [
        {"month": month, "count": int(count)}
        for month, count in _by_month((c.application_date, 1) for c in cases)
    ]


def disbursal_by_month(cases: Iterable[LoanCaseSchema]) -> list[dict[str, Any]]:
    """Approved amount of disbursed cases, summed per application month."""
    return [
        {"month": month, "amount": amount}
        for month, amount in _by_month(
            (c.application_date, c.approved_amount)
            for c in cases
            if c.status == DISBURSED_STATUS and c.approved_amount
        )
    ]


def officer_performance(cases: Iterable[LoanCaseSchema]) -> list[dict[str, Any]]:
    counts = Counter(c.team_member for c in cases)
    return [{"name": name, "total": total} for name, total in counts.items()]


def build_dashboard(
    cases: Iterable[LoanCaseSchema],
    start: Optional[date] = None,
    end: Optional[date] = None,
    statuses: Sequence[str] = STATUS_OPTIONS,
) -> dict[str, Any]:
    selected = filter_by_date_range(cases, start, end)
    return {
        "stats": summarize(selected),
        "cases_by_status": cases_by_status(selected, statuses),
        "cases_over_time": cases_over_time(selected),
        "disbursal_by_month": disbursal_by_month(selected),
        "officer_performance": officer_performance(selected),
    }
