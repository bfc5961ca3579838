from models.configuration import AppConfiguration
from models.loan_case import CaseDocument, CaseHistory, LoanCase

__all__ = [
    "AppConfiguration",
    "CaseDocument",
    "CaseHistory",
    "LoanCase",
]
