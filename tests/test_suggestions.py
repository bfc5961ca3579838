"""
Loan feature suggestions with a mocked OpenAI client.
"""
import json
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from pydantic import ValidationError

from schemas.suggestion import ApplicantProfile, LoanSuggestion, SuggestionInput
from services.errors import SuggestionError
from services.suggestions import build_applicant_data, parse_suggestion, suggest_optimal_loan_features


def _client(content):
    response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


def _request():
    profile = ApplicantProfile(credit_score=720, income=60000, employment_history="5 years, salaried")
    return SuggestionInput(applicant_data=build_applicant_data(profile), approval_history_data="[]")


class TestSuggestions(unittest.IsolatedAsyncioTestCase):
    async def test_returns_parsed_suggestion(self):
        content = json.dumps({
            "suggestedLoanAmount": 250000,
            "suggestedLoanType": "Personal",
            "suggestedRepaymentTerms": "36 months at a fixed rate",
            "rationale": "Good credit score. Stable income.",
        })
        client = _client(content)
        suggestion = await suggest_optimal_loan_features(_request(), client=client, model="test-model")
        self.assertEqual(suggestion.suggested_loan_amount, 250000)
        self.assertEqual(suggestion.suggested_loan_type, "Personal")

        kwargs = client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "test-model")
        self.assertEqual(kwargs["response_format"], {"type": "json_object"})
        self.assertIn('"creditScore": 720', kwargs["messages"][1]["content"])

    async def test_malformed_output_raises(self):
        with self.assertRaises(SuggestionError):
            await suggest_optimal_loan_features(_request(), client=_client('{"suggestedLoanType": "Home"}'))

    async def test_empty_output_raises(self):
        with self.assertRaises(SuggestionError):
            await suggest_optimal_loan_features(_request(), client=_client(None))


class TestSuggestionSchemas(unittest.TestCase):
    def test_rationale_trimmed_to_five_sentences(self):
        suggestion = parse_suggestion(json.dumps({
            "suggestedLoanAmount": 1,
            "suggestedLoanType": "Car",
            "suggestedRepaymentTerms": "12 months",
            "rationale": "One. Two. Three! Four? Five. Six. Seven.",
        }))
        self.assertEqual(suggestion.rationale, "One. Two. Three! Four? Five.")

    def test_profile_bounds(self):
        with self.assertRaises(ValidationError):
            ApplicantProfile(credit_score=900, income=1, employment_history="x")
        with self.assertRaises(ValidationError):
            ApplicantProfile(credit_score=700, income=0, employment_history="x")

    def test_camel_case_output(self):
        suggestion = LoanSuggestion(
            suggested_loan_amount=1, suggested_loan_type="Car", suggested_repayment_terms="t", rationale="r"
        )
        self.assertIn("suggestedLoanAmount", suggestion.model_dump(by_alias=True))


if __name__ == "__main__":
    unittest.main()
