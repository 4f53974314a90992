"""Per-item outcomes and the JSON envelope every workflow returns."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from crm_seeder.models.base import CamelModel


class CreateResult(CamelModel):
    local_id: str
    remote_id: str
    success: bool = True


class CreateError(CamelModel):
    local_id: str
    error: str
    success: bool = False


class BatchResult(CamelModel):
    """Outcome of submitting a batch; every item lands in exactly one list."""

    results: List[CreateResult] = Field(default_factory=list)
    errors: List[CreateError] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results) + len(self.errors)

    def summary(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "successful": len(self.results),
            "failed": len(self.errors),
        }


class WorkflowResult(CamelModel):
    """Response body for a successful (possibly partially failed) run."""

    success: bool = True
    message: Optional[str] = None
    results: List[Any] = Field(default_factory=list)
    errors: List[Any] = Field(default_factory=list)
    matches: Optional[List[Any]] = None
    associations: Optional[List[Any]] = None
    companies: Optional[List[Any]] = None
    records: Optional[List[Any]] = None
    summary: Dict[str, int] = Field(default_factory=dict)
    logs: List[str] = Field(default_factory=list)
