"""
Case-form and status-update validation: field rules, configured options and
the "Other" bank rule.
Run from backend dir: python -m pytest tests/test_validation.py -v
"""
import unittest

from constants import BANK_NAME, CASE_STATUS, DEFAULT_OPTIONS, TEAM_MEMBER
from fakes import valid_draft_data
from services.errors import CaseValidationError
from services.validation import validate_case_draft, validate_status_update


class TestCaseDraftValidation(unittest.TestCase):
    def test_valid_draft(self):
        draft = validate_case_draft(valid_draft_data())
        self.assertEqual(draft.applicant_name, "Alice Johnson")
        self.assertEqual(draft.loan_amount, 5000)
        self.assertEqual(draft.status, "Document Pending")
        self.assertIsNone(draft.other_bank_name)

    def test_status_defaults_to_document_pending(self):
        data = valid_draft_data()
        del data["status"]
        self.assertEqual(validate_case_draft(data).status, "Document Pending")

    def test_default_status_checked_against_configuration(self):
        options = {c: list(v) for c, v in DEFAULT_OPTIONS.items()}
        options[CASE_STATUS].remove("Document Pending")
        data = valid_draft_data()
        del data["status"]
        with self.assertRaises(CaseValidationError) as ctx:
            validate_case_draft(data, options)
        self.assertIn("status", ctx.exception.errors)

    def test_non_positive_loan_amount_rejected(self):
        for amount in (0, -100):
            with self.assertRaises(CaseValidationError) as ctx:
                validate_case_draft(valid_draft_data(loanAmount=amount))
            self.assertEqual(list(ctx.exception.errors), ["loanAmount"])
            self.assertEqual(ctx.exception.errors["loanAmount"], ["Loan amount must be a positive number."])

    def test_invalid_email_rejected(self):
        with self.assertRaises(CaseValidationError) as ctx:
            validate_case_draft(valid_draft_data(email="not-an-email"))
        self.assertEqual(list(ctx.exception.errors), ["email"])

    def test_invalid_pan_rejected(self):
        for pan in ("abcde1234f", "ABCD1234F", "ABCDE12345"):
            with self.assertRaises(CaseValidationError) as ctx:
                validate_case_draft(valid_draft_data(panCardNumber=pan))
            self.assertEqual(ctx.exception.errors, {"panCardNumber": ["Invalid PAN card number format."]})

    def test_phone_formats(self):
        for phone in ("123-456-7890", "(123) 456-7890", "+91 9876543210", "1234567890"):
            validate_case_draft(valid_draft_data(contactNumber=phone))
        with self.assertRaises(CaseValidationError) as ctx:
            validate_case_draft(valid_draft_data(contactNumber="12-34"))
        self.assertIn("contactNumber", ctx.exception.errors)

    def test_negative_obligation_rejected_zero_allowed(self):
        validate_case_draft(valid_draft_data(obligation=0))
        with self.assertRaises(CaseValidationError) as ctx:
            validate_case_draft(valid_draft_data(obligation=-1))
        self.assertIn("obligation", ctx.exception.errors)

    def test_every_failing_field_reported(self):
        with self.assertRaises(CaseValidationError) as ctx:
            validate_case_draft(valid_draft_data(applicantName="A", tenure=0, address="x"))
        self.assertEqual(set(ctx.exception.errors), {"applicantName", "tenure", "address"})

    def test_missing_required_field(self):
        data = valid_draft_data()
        del data["dob"]
        with self.assertRaises(CaseValidationError) as ctx:
            validate_case_draft(data)
        self.assertEqual(ctx.exception.errors, {"dob": ["Date of birth is required."]})

    def test_other_bank_requires_name(self):
        with self.assertRaises(CaseValidationError) as ctx:
            validate_case_draft(valid_draft_data(bankName="Other"))
        self.assertIn("otherBankName", ctx.exception.errors)

        with self.assertRaises(CaseValidationError):
            validate_case_draft(valid_draft_data(bankName="Other", otherBankName="AB"))

        draft = validate_case_draft(valid_draft_data(bankName="Other", otherBankName="Local Co-op Bank"))
        self.assertEqual(draft.other_bank_name, "Local Co-op Bank")

    def test_other_bank_name_dropped_for_listed_bank(self):
        draft = validate_case_draft(valid_draft_data(otherBankName="Ignored Bank"))
        self.assertIsNone(draft.other_bank_name)

    def test_options_come_from_configuration(self):
        options = {c: list(v) for c, v in DEFAULT_OPTIONS.items()}
        options[TEAM_MEMBER] = ["Ravi Kumar"]
        with self.assertRaises(CaseValidationError) as ctx:
            validate_case_draft(valid_draft_data(), options)
        self.assertEqual(list(ctx.exception.errors), ["teamMember"])

        draft = validate_case_draft(valid_draft_data(teamMember="Ravi Kumar"), options)
        self.assertEqual(draft.team_member, "Ravi Kumar")

    def test_unknown_bank_rejected(self):
        options = {c: list(v) for c, v in DEFAULT_OPTIONS.items()}
        options[BANK_NAME].remove("HDFC Bank")
        with self.assertRaises(CaseValidationError) as ctx:
            validate_case_draft(valid_draft_data(), options)
        self.assertEqual(ctx.exception.errors, {"bankName": ["Please select a valid bank."]})


class TestStatusUpdateValidation(unittest.TestCase):
    def test_valid_update_with_details(self):
        update = validate_status_update(
            {"status": "Approved", "remarks": "  Sanctioned  ", "approvedAmount": 5000, "roi": 8.5}
        )
        self.assertEqual(update.remarks, "Sanctioned")
        self.assertEqual(update.approval_details().supplied(), {"approved_amount": 5000, "roi": 8.5})

    def test_blank_remarks_rejected(self):
        for remarks in ("", "   "):
            with self.assertRaises(CaseValidationError) as ctx:
                validate_status_update({"status": "Hold", "remarks": remarks})
            self.assertEqual(ctx.exception.errors, {"remarks": ["Remarks are required for a status update."]})

    def test_unknown_status_rejected(self):
        with self.assertRaises(CaseValidationError) as ctx:
            validate_status_update({"status": "Lost", "remarks": "gone"})
        self.assertIn("status", ctx.exception.errors)

    def test_no_details_without_figures(self):
        update = validate_status_update({"status": "Disbursed", "remarks": "Paid out"})
        self.assertIsNone(update.approval_details())


if __name__ == "__main__":
    unittest.main()
