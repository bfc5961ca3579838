"""Exceptions raised by the case store, the persistence gateway and the integrations."""
from __future__ import annotations


class CaseStoreError(Exception):
    """Base class for failed case-store operations."""


class GatewayError(CaseStoreError):
    """The backing database rejected a query; message is passed through unchanged."""


class CaseNotFoundError(CaseStoreError):
    def __init__(self, case_id: str):
        super().__init__(f"Loan case {case_id} not found")
        self.case_id = case_id


class CaseValidationError(CaseStoreError):
    """Field-keyed validation failures: {fieldName: [message, ...]}."""

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__("; ".join(f"{k}: {', '.join(v)}" for k, v in errors.items()))
        self.errors = errors


class UploadLimitExceededError(CaseStoreError):
    def __init__(self, total_bytes: int, limit_bytes: int):
        super().__init__(
            f"Total file size cannot exceed {limit_bytes // (1024 * 1024)} MB "
            f"(would be {total_bytes} bytes)."
        )
        self.total_bytes = total_bytes
        self.limit_bytes = limit_bytes


class DocumentUploadError(CaseStoreError):
    pass


class ConfigurationAlreadySeededError(CaseStoreError):
    def __init__(self):
        super().__init__("Configuration already initialized (table not empty).")


class DuplicateValueError(CaseStoreError):
    pass


class OptionNotFoundError(CaseStoreError):
    pass


class UnknownCategoryError(CaseStoreError):
    pass


class SuggestionError(Exception):
    """The language model call failed or returned output outside the schema."""
