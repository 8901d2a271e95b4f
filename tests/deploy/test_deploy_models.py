"""Tests for deployment result models."""

from __future__ import annotations

from aiagents.deploy.models import DeployMode, DeployReport, DeployResult, ResultStatus
from aiagents.errors import CapabilityError


def _result(status: ResultStatus, name: str = "postgres") -> DeployResult:
    return DeployResult(name=name, status=status, message=name)


class TestDeployReport:
    def test_empty_report_is_ok(self) -> None:
        report = DeployReport(mode=DeployMode.APPLY)
        assert (report.successful, report.failed, report.total) == (0, 0, 0)
        assert report.ok
        assert report.exit_code == 0

    def test_counts(self) -> None:
        report = DeployReport(
            mode=DeployMode.APPLY,
            results=[
                _result(ResultStatus.SUCCESS),
                _result(ResultStatus.FAILURE),
                _result(ResultStatus.SUCCESS),
            ],
        )
        assert (report.successful, report.failed, report.total) == (2, 1, 3)
        assert report.exit_code == 1

    def test_cancelled_record_is_not_counted(self) -> None:
        report = DeployReport(
            mode=DeployMode.APPLY,
            results=[_result(ResultStatus.SUCCESS), DeployResult(status=ResultStatus.CANCELLED, message="stop")],
        )
        assert report.total == 1
        assert report.cancelled
        assert report.exit_code == 1


class TestDeployResult:
    def test_error_is_excluded_from_dump(self) -> None:
        result = DeployResult(
            name="postgres",
            status=ResultStatus.FAILURE,
            message="failed",
            error=CapabilityError("create mcpServers", "boom"),
        )
        assert "error" not in result.model_dump()
        assert not result.success
