"""Reconciler — apply typed specs to the remote API, one spec at a time.

Kinds are applied in the fixed order MCP servers → agents → agent systems,
because each kind may reference the one before it by name.  Within a kind
the document order is kept.  Every spec succeeds or fails on its own; a
failure is recorded and the run moves on to the next spec.  Nothing is
rolled back.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from aiagents.deploy.catalog import (
    DEFAULT_PAGE_SIZE,
    Catalog,
    create_operation,
    load_catalog,
    pending_id,
)
from aiagents.deploy.context import DeployContext
from aiagents.deploy.models import (
    DeployMode,
    DeployReport,
    DeployResult,
    ProgressEvent,
    ResultStatus,
)
from aiagents.deploy.resolver import resolve_references
from aiagents.errors import (
    CapabilityError,
    ConfigurationError,
    DeployCancelledError,
    NameResolutionError,
)
from aiagents.manifest.models import APPLY_ORDER, Manifest, ResourceKind, Spec
from aiagents.utils.telemetry import (
    ATTR_MODE,
    ATTR_OUTCOME,
    ATTR_RESOURCE_ID,
    ATTR_RESOURCE_KIND,
    ATTR_RESOURCE_NAME,
    ATTR_SPEC_COUNT,
    get_tracer,
)

if TYPE_CHECKING:
    from aiagents.api.provider import ResourceCapability

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


class Reconciler:
    """Drive one deployment run against a :class:`ResourceCapability`.

    Steps of :meth:`apply`:
    1. Short-circuit in ``validate-only`` mode without touching the capability.
    2. Seed the catalogs of every kind that applied specs refer to.  This is
       the only phase that may fail fatally, and it happens before any create.
    3. For each kind in apply order, resolve references against the live
       catalog, then process each spec: skip if unresolved, simulate in
       ``dry-run``, create in ``apply``.  Successful specs extend the catalog
       of their own kind.
    4. Check for cancellation between specs; a cancelled run ends with a
       single ``cancelled`` record.  Cancelling the task that awaits
       :meth:`apply` has the same effect: the report is returned, not lost.
    """

    def __init__(
        self,
        capability: ResourceCapability | None,
        *,
        mode: DeployMode = DeployMode.APPLY,
        context: DeployContext | None = None,
        on_progress: ProgressCallback | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.capability = capability
        self.mode = mode
        self.context = context or DeployContext()
        self._on_progress = on_progress
        self._page_size = page_size
        self._catalogs: dict[ResourceKind, Catalog] = {}
        self._resolution_errors: dict[str, NameResolutionError] = {}

    @property
    def catalogs(self) -> dict[ResourceKind, Catalog]:
        """Catalogs of the current (or last) run, keyed by kind."""
        return self._catalogs

    async def apply(
        self,
        manifest: Manifest,
        kinds: tuple[ResourceKind, ...] = APPLY_ORDER,
    ) -> DeployReport:
        """Apply the sections of *manifest* named in *kinds*.

        Raises:
            ConfigurationError: If a capability is needed but none was given.
            CapabilityError: If seeding a catalog fails (no create has run yet).
        """
        report = DeployReport(mode=self.mode)
        if self.mode is DeployMode.VALIDATE_ONLY:
            return report

        capability = self._require_capability()
        self.context.start()
        total = len(manifest.specs(kinds))

        with _tracer.start_as_current_span("deploy.run") as span:
            span.set_attribute(ATTR_MODE, self.mode.value)
            span.set_attribute(ATTR_SPEC_COUNT, total)

            try:
                await self._run(report, manifest, kinds, capability, total)
            except DeployCancelledError as exc:
                self._finish_cancelled(report, exc, total)
            except asyncio.CancelledError:
                # the caller's task was cancelled; keep what was already done
                self.context.cancel()
                self._finish_cancelled(report, DeployCancelledError(self.context.reason), total)

        return report

    async def _run(
        self,
        report: DeployReport,
        manifest: Manifest,
        kinds: tuple[ResourceKind, ...],
        capability: ResourceCapability,
        total: int,
    ) -> None:
        self._catalogs = await self._seed_catalogs(manifest, kinds, capability)

        index = 0
        for kind in APPLY_ORDER:
            if kind not in kinds:
                continue
            for spec in self._resolve(manifest, kind):
                if self.context.cancelled:
                    raise DeployCancelledError(self.context.reason)
                index += 1
                result = await self._apply_spec(spec, capability)
                self._record(report, result, index, total)
                if isinstance(result.error, DeployCancelledError):
                    raise result.error

    def _require_capability(self) -> ResourceCapability:
        if self.capability is None:
            msg = f"{self.mode.value} needs an API client but none was configured"
            raise ConfigurationError(msg)
        return self.capability

    async def _seed_catalogs(
        self,
        manifest: Manifest,
        kinds: tuple[ResourceKind, ...],
        capability: ResourceCapability,
    ) -> dict[ResourceKind, Catalog]:
        catalogs = {kind: Catalog(kind) for kind in APPLY_ORDER}
        for kind in kinds:
            referenced = kind.reference_kind
            if referenced is None or not any(spec.references for spec in manifest.of_kind(kind)):
                continue
            catalogs[referenced] = await load_catalog(
                referenced, capability, self.context, page_size=self._page_size
            )
        return catalogs

    def _resolve(self, manifest: Manifest, kind: ResourceKind) -> list[Spec]:
        specs: list[Spec] = list(manifest.of_kind(kind))
        referenced = kind.reference_kind
        if referenced is None:
            return specs
        resolved, errors = resolve_references(specs, self._catalogs[referenced])
        self._resolution_errors = {error.spec_name: error for error in errors}
        return resolved

    async def _apply_spec(self, spec: Spec, capability: ResourceCapability) -> DeployResult:
        label = spec.kind.label

        with _tracer.start_as_current_span("deploy.spec") as span:
            span.set_attribute(ATTR_RESOURCE_KIND, spec.kind.value)
            span.set_attribute(ATTR_RESOURCE_NAME, spec.name)

            if not spec.is_resolved:
                error = self._resolution_errors[spec.name]
                span.set_attribute(ATTR_OUTCOME, ResultStatus.FAILURE.value)
                return self._failure(spec, f"Skipped {label} {spec.name}: {error}", error)

            if self.mode is DeployMode.DRY_RUN:
                self._catalogs[spec.kind].add(spec.name, pending_id(spec.name))
                span.set_attribute(ATTR_OUTCOME, ResultStatus.SUCCESS.value)
                return DeployResult(
                    kind=spec.kind,
                    name=spec.name,
                    status=ResultStatus.SUCCESS,
                    message=f"Would deploy {label}: {spec.name}",
                )

            create = create_operation(capability, spec.kind)
            try:
                resource_id = await self.context.call(create, spec.payload())
            except DeployCancelledError as exc:
                span.set_attribute(ATTR_OUTCOME, ResultStatus.FAILURE.value)
                return self._failure(spec, f"Failed to create {label} {spec.name}: {exc}", exc)
            except Exception as exc:
                error = exc if isinstance(exc, CapabilityError) else _wrap(exc, f"create {label}")
                span.set_attribute(ATTR_OUTCOME, ResultStatus.FAILURE.value)
                span.record_exception(exc)
                return self._failure(spec, f"Failed to create {label} {spec.name}: {error}", error)

            self._catalogs[spec.kind].add(spec.name, resource_id)
            span.set_attribute(ATTR_OUTCOME, ResultStatus.SUCCESS.value)
            span.set_attribute(ATTR_RESOURCE_ID, resource_id)
            return DeployResult(
                kind=spec.kind,
                name=spec.name,
                status=ResultStatus.SUCCESS,
                message=f"Successfully deployed {label} {spec.name} (ID: {resource_id[:8]})",
                resource_id=resource_id,
            )

    @staticmethod
    def _failure(spec: Spec, message: str, error: Exception) -> DeployResult:
        logger.warning("%s", message)
        return DeployResult(
            kind=spec.kind,
            name=spec.name,
            status=ResultStatus.FAILURE,
            message=message,
            error=error,
        )

    def _finish_cancelled(self, report: DeployReport, error: DeployCancelledError, total: int) -> None:
        result = DeployResult(
            status=ResultStatus.CANCELLED,
            message=f"Deployment stopped: {error.reason}",
            error=error,
        )
        logger.warning("%s", result.message)
        self._record(report, result, len(report.results) + 1, total)

    def _record(self, report: DeployReport, result: DeployResult, index: int, total: int) -> None:
        report.results.append(result)
        if result.success:
            logger.info("[%d/%d] %s", index, total, result.message)
        if self._on_progress is not None:
            self._on_progress(
                ProgressEvent(
                    index=index,
                    total=total,
                    kind=result.kind,
                    name=result.name,
                    status=result.status,
                    message=result.message,
                )
            )


def _wrap(exc: Exception, operation: str) -> CapabilityError:
    error = CapabilityError(operation, str(exc) or type(exc).__name__)
    error.__cause__ = exc
    return error


async def apply_manifest(
    manifest: Manifest,
    mode: DeployMode,
    capability: ResourceCapability | None,
    *,
    kinds: tuple[ResourceKind, ...] = APPLY_ORDER,
    context: DeployContext | None = None,
    on_progress: ProgressCallback | None = None,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> DeployReport:
    """Apply *manifest* in *mode* and return the report."""
    reconciler = Reconciler(
        capability,
        mode=mode,
        context=context,
        on_progress=on_progress,
        page_size=page_size,
    )
    return await reconciler.apply(manifest, kinds)
