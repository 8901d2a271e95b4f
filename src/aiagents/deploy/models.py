"""Deployment result models — per-spec outcomes, progress events, and the report."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from aiagents.manifest.models import ResourceKind  # noqa: TC001


class DeployMode(StrEnum):
    VALIDATE_ONLY = "validate-only"
    DRY_RUN = "dry-run"
    APPLY = "apply"


class ResultStatus(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


class DeployResult(BaseModel):
    """Outcome of one spec, or the terminating record of a cancelled run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: ResourceKind | None = None
    name: str = ""
    status: ResultStatus
    message: str
    resource_id: str | None = None
    error: Exception | None = Field(default=None, exclude=True)

    @property
    def success(self) -> bool:
        return self.status is ResultStatus.SUCCESS


class ProgressEvent(BaseModel):
    """Streaming signal emitted after each spec is processed.

    ``index`` is 1-based over all specs of the run, ``total`` counts them.
    """

    index: int
    total: int
    kind: ResourceKind | None
    name: str
    status: ResultStatus
    message: str


class DeployReport(BaseModel):
    """Every result of one run, in apply order, plus aggregate counts."""

    mode: DeployMode
    results: list[DeployResult] = []

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.status is ResultStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status is ResultStatus.FAILURE)

    @property
    def total(self) -> int:
        return self.successful + self.failed

    @property
    def cancelled(self) -> bool:
        return any(r.status is ResultStatus.CANCELLED for r in self.results)

    @property
    def ok(self) -> bool:
        return self.failed == 0 and not self.cancelled

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1
