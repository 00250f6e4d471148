#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


"""Build and format run summaries for console display."""

from enum import Enum
from typing import List, Optional, Tuple

from socbox.socbox_constants import InstallerRole
from socbox.installer.configs.constants.constants import DEFAULT_CREDENTIAL_REMINDERS
from socbox.installer.configs.constants.enums import ComponentOutcome

SUMMARY_RULE = "=" * 80

OUTCOME_MARKS = {
    ComponentOutcome.SUCCEEDED: "[ok]",
    ComponentOutcome.SKIPPED: "[--]",
    ComponentOutcome.FAILED_NON_FATAL: "[!!]",
    ComponentOutcome.FAILED_FATAL: "[XX]",
}


def format_summary_value(label: str, value) -> str:
    """Format a value for display, masking passwords and naming empty values.

    Args:
        label: the item label
        value: the value to format

    Returns:
        Formatted string suitable for display
    """
    if "password" in label.lower() and value:
        return "********"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, Enum):
        return str(value.value)
    if value is None or value == "":
        return "Not set"
    return str(value)


def build_configuration_summary_items(env, platform=None) -> List[Tuple[str, str]]:
    """(label, value) pairs describing what this run was configured to do."""
    items = [
        ("Site", f"{env.site_name} ({env.environment})" if env.site_name else None),
        ("Role", env.role),
    ]
    if platform is not None:
        items.append(("Platform", f"{platform.name or platform.os_id} {platform.version} ({platform.family.value})"))
    if env.role == InstallerRole.SERVER:
        items += [
            ("Hostname", env.server_hostname),
            ("Database", env.database.db_type),
            ("Database Root Password", env.database.root_password),
        ]
    else:
        items += [
            ("SOC Server", env.soc_ip),
            ("Wazuh Manager", env.wazuh_agent.manager if env.wazuh_agent.enabled else None),
            ("Zabbix Server", env.zabbix_agent.server if env.zabbix_agent.enabled else None),
        ]
    return items


def build_run_summary(
    report,
    registry,
    env,
    platform=None,
    log_file: Optional[str] = None,
    planned_actions: Optional[List[str]] = None,
    title: str = "Installation Summary",
    removal: bool = False,
) -> List[str]:
    """Lines of the end-of-run summary.

    Args:
        report: RunReport of the walk
        registry: ComponentRegistry the walk used (labels and endpoints)
        env: EnvironmentConfig of the run
        platform: PlatformInfo, when detected
        log_file: run log path, when one was written
        planned_actions: described actions of a dry run
        title: heading
        removal: summarize a teardown (no endpoints or credential reminders)

    Returns:
        list of lines, without trailing newlines
    """
    lines = ["", SUMMARY_RULE, f"  {title}", SUMMARY_RULE, ""]

    for label, value in build_configuration_summary_items(env, platform):
        lines.append(f"  {label + ':':<24} {format_summary_value(label, value)}")

    lines += ["", "  Components:"]
    for result in report.results:
        detail = f" - {'; '.join(result.messages)}" if result.messages else ""
        lines.append(f"    {OUTCOME_MARKS[result.outcome]} {result.label}: {result.outcome.value}{detail}")
    for name in report.not_attempted:
        lines.append(f"    [  ] {registry.get(name).label}: not attempted")

    endpoints = []
    reminders = []
    completed = [] if removal else [r for r in report.results if r.outcome.satisfies_dependency()]
    for result in completed:
        descriptor = registry.get(result.name)
        if descriptor.endpoints is not None:
            endpoints.extend(descriptor.endpoints(env))
        if result.name in DEFAULT_CREDENTIAL_REMINDERS:
            reminders.append(DEFAULT_CREDENTIAL_REMINDERS[result.name])

    if endpoints and planned_actions is None:
        lines += ["", "  Access:"]
        for label, value in endpoints:
            lines.append(f"    {label + ':':<20} {value}")

    if reminders:
        lines += ["", "  Change these default credentials before production use:"]
        lines += [f"    - {reminder}" for reminder in reminders]

    if planned_actions is not None:
        lines += ["", f"  Planned actions ({len(planned_actions)}):"]
        width = len(str(len(planned_actions)))
        lines += [f"    {i:>{width}}. {action}" for i, action in enumerate(planned_actions, start=1)]

    if log_file:
        lines += ["", f"  Log file: {log_file}"]
    lines += ["", SUMMARY_RULE, ""]
    return lines
