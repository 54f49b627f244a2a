from typing import Dict, List
from pydantic import BaseModel, Field
from .invoice import InvoiceDraft

class ValidationIssue(BaseModel):
    field: str          # e.g. "items[3].price" or "client_id"
    code: str           # e.g. "CLIENT_NOT_FOUND"
    message: str        # shown to the user as-is

class ValidationReport(BaseModel):
    """Outcome of checking an invoice draft before save.

    Errors block the save; warnings are returned next to the saved invoice.
    """
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)
    normalized_draft: InvoiceDraft  # whitespace trimmed, otherwise the input

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def error_detail(self) -> List[Dict[str, str]]:
        # body of the 422 response when the save is refused
        return [issue.model_dump() for issue in self.errors]
