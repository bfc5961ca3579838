"""
Dashboard aggregations.
"""
import unittest
from datetime import date

from fakes import valid_draft_data
from schemas.loan_case import LoanCaseSchema
from services.analytics import (
    build_dashboard,
    cases_by_status,
    cases_over_time,
    disbursal_by_month,
    filter_by_date_range,
    month_label,
    officer_performance,
    summarize,
)
from services.gateway import case_to_row_values
from services.validation import validate_case_draft


def _case(case_id, application_date, status="Document Pending", team_member="John Doe", approved_amount=None):
    draft = validate_case_draft(
        valid_draft_data(applicationDate=application_date, teamMember=team_member)
    )
    values = case_to_row_values(draft)
    values.update(status=status, approved_amount=approved_amount)
    return LoanCaseSchema(id=case_id, **values)


def _cases():
    return [
        _case("LC-001", "2024-01-10", "Disbursed", approved_amount=4000),
        _case("LC-002", "2024-01-20", "Approved", team_member="Jane Smith", approved_amount=9000),
        _case("LC-003", "2024-02-05", "Reject"),
        _case("LC-004", "2024-03-15", "Disbursed", team_member="Jane Smith", approved_amount=6000),
        _case("LC-005", "2024-03-18", "Login"),
    ]


class TestAnalytics(unittest.TestCase):
    def test_month_label(self):
        self.assertEqual(month_label(date(2024, 3, 9)), "Mar 24")

    def test_summary(self):
        self.assertEqual(
            summarize(_cases()),
            {"total": 5, "approved": 3, "disbursed": 2, "rejected": 1, "open": 1},
        )

    def test_date_range_inclusive(self):
        selected = filter_by_date_range(_cases(), date(2024, 1, 20), date(2024, 3, 15))
        self.assertEqual([c.id for c in selected], ["LC-002", "LC-003", "LC-004"])
        self.assertEqual(len(filter_by_date_range(_cases(), start=date(2024, 3, 1))), 2)

    def test_status_breakdown_in_display_order(self):
        breakdown = cases_by_status(_cases())
        self.assertEqual(breakdown[0], {"status": "Document Pending", "count": 0})
        counts = {row["status"]: row["count"] for row in breakdown}
        self.assertEqual(counts["Disbursed"], 2)
        self.assertEqual(counts["Login"], 1)
        self.assertEqual(sum(counts.values()), 5)

    def test_unlisted_status_appended(self):
        breakdown = cases_by_status(_cases(), ["Login"])
        self.assertEqual([row["status"] for row in breakdown], ["Login", "Disbursed", "Approved", "Reject"])

    def test_monthly_series(self):
        self.assertEqual(
            cases_over_time(_cases()),
            [{"month": "Jan 24", "count": 2}, {"month": "Feb 24", "count": 1}, {"month": "Mar 24", "count": 2}],
        )
        self.assertEqual(
            disbursal_by_month(_cases()),
            [{"month": "Jan 24", "amount": 4000}, {"month": "Mar 24", "amount": 6000}],
        )

    def test_officer_counts(self):
        self.assertEqual(
            officer_performance(_cases()),
            [{"name": "John Doe", "total": 3}, {"name": "Jane Smith", "total": 2}],
        )

    def test_dashboard(self):
        dashboard = build_dashboard(_cases(), start=date(2024, 3, 1))
        self.assertEqual(dashboard["stats"]["total"], 2)
        self.assertEqual(set(dashboard), {
            "stats", "cases_by_status", "cases_over_time", "disbursal_by_month", "officer_performance",
        })

    def test_empty(self):
        dashboard = build_dashboard([])
        self.assertEqual(dashboard["stats"]["total"], 0)
        self.assertEqual(dashboard["cases_over_time"], [])


if __name__ == "__main__":
    unittest.main()
