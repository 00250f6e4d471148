#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Walk the component registry and apply the failure policy.

- a disabled component is SKIPPED
- a ComponentDegradedError makes the component FAILED_NON_FATAL; the walk continues
- any other failure (ComponentFatalError, ActionError, missing entrypoint,
  unmet dependency, unexpected exception) makes it FAILED_FATAL and halts the
  walk; later components are recorded as not attempted and nothing is rolled back
"""

import traceback
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from socbox.installer.configs.constants.enums import ComponentOutcome
from socbox.installer.core.registry import ComponentDescriptor, ComponentRegistry
from socbox.installer.utils.exceptions import (
    ActionError,
    ComponentDegradedError,
    ComponentFatalError,
)
from socbox.installer.utils.logger_utils import InstallerLogger, SkipReasons


@dataclass
class ComponentResult:
    name: str
    label: str
    outcome: ComponentOutcome
    messages: List[str] = field(default_factory=list)


@dataclass
class RunReport:
    """Per-component outcomes of one walk, in the order they were decided."""

    results: List[ComponentResult] = field(default_factory=list)
    not_attempted: List[str] = field(default_factory=list)

    @property
    def outcome(self) -> ComponentOutcome:
        """Aggregate outcome: fatal beats non-fatal beats success."""
        outcomes = {r.outcome for r in self.results}
        if ComponentOutcome.FAILED_FATAL in outcomes:
            return ComponentOutcome.FAILED_FATAL
        if ComponentOutcome.FAILED_NON_FATAL in outcomes:
            return ComponentOutcome.FAILED_NON_FATAL
        return ComponentOutcome.SUCCEEDED

    @property
    def exit_code(self) -> int:
        return 1 if self.outcome == ComponentOutcome.FAILED_FATAL else 0

    def outcome_of(self, name: str) -> Optional[ComponentOutcome]:
        for result in self.results:
            if result.name == name:
                return result.outcome
        return None

    def attempted(self) -> List[str]:
        return [r.name for r in self.results if r.outcome != ComponentOutcome.SKIPPED]


class Orchestrator:
    """Runs the components of a registry against an InstallContext."""

    def __init__(self, registry: ComponentRegistry):
        self.registry = registry

    def run(self, ctx) -> RunReport:
        """Install every enabled component in dependency order."""
        return self._walk(self.registry.install_order(), ctx, teardown=False)

    def run_selected(self, names: Sequence[str], ctx) -> RunReport:
        """Tear down the named components in reverse dependency order."""
        return self._walk(self.registry.teardown_order(names), ctx, teardown=True)

    def _walk(self, descriptors: List[ComponentDescriptor], ctx, teardown: bool) -> RunReport:
        report = RunReport()
        for index, descriptor in enumerate(descriptors):
            result = self._run_component(descriptor, ctx, report, teardown)
            report.results.append(result)
            if result.outcome == ComponentOutcome.FAILED_FATAL:
                report.not_attempted = [d.name for d in descriptors[index + 1 :]]
                if report.not_attempted:
                    InstallerLogger.error(f"Halting; not attempted: {', '.join(report.not_attempted)}")
                break
        return report

    def _run_component(
        self,
        descriptor: ComponentDescriptor,
        ctx,
        report: RunReport,
        teardown: bool,
    ) -> ComponentResult:
        if not teardown and not descriptor.is_enabled(ctx.env):
            reason = SkipReasons.DISABLED.format(flag=descriptor.enable_key)
            InstallerLogger.end(descriptor.label, ComponentOutcome.SKIPPED, reason)
            return ComponentResult(descriptor.name, descriptor.label, ComponentOutcome.SKIPPED, [reason])

        InstallerLogger.start(descriptor.label)
        entry = descriptor.teardown if teardown else descriptor.entrypoint
        try:
            if entry is None:
                raise ComponentFatalError(
                    descriptor.name, f"{'removal' if teardown else 'installer'} entrypoint not found"
                )
            if not teardown:
                self._check_dependencies(descriptor, report)
            entry(ctx)
        except ComponentDegradedError as e:
            InstallerLogger.end(descriptor.label, ComponentOutcome.FAILED_NON_FATAL, "; ".join(e.messages))
            return ComponentResult(descriptor.name, descriptor.label, ComponentOutcome.FAILED_NON_FATAL, e.messages)
        except (ComponentFatalError, ActionError) as e:
            InstallerLogger.error(str(e))
            InstallerLogger.end(descriptor.label, ComponentOutcome.FAILED_FATAL)
            return ComponentResult(descriptor.name, descriptor.label, ComponentOutcome.FAILED_FATAL, [str(e)])
        except Exception as e:
            InstallerLogger.error(f"{descriptor.label}: unexpected error: {e}")
            InstallerLogger.debug(traceback.format_exc())
            InstallerLogger.end(descriptor.label, ComponentOutcome.FAILED_FATAL)
            return ComponentResult(descriptor.name, descriptor.label, ComponentOutcome.FAILED_FATAL, [str(e)])

        InstallerLogger.end(descriptor.label, ComponentOutcome.SUCCEEDED)
        return ComponentResult(descriptor.name, descriptor.label, ComponentOutcome.SUCCEEDED)

    @staticmethod
    def _check_dependencies(descriptor: ComponentDescriptor, report: RunReport) -> None:
        for dependency in descriptor.depends_on:
            outcome = report.outcome_of(dependency)
            if outcome is None or not outcome.satisfies_dependency():
                state = outcome.value if outcome else "not run"
                raise ComponentFatalError(descriptor.name, f"required component '{dependency}' is unavailable ({state})")
