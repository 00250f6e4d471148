#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Whole-stack runs: re-runs converge and a dry run plans what a live run does."""

import copy
import os
import sys
import unittest
from unittest.mock import patch

# Add the project root directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "..", "..")))

from socbox.socbox_constants import InstallerRole
from socbox.installer.components import build_registry
from socbox.installer.configs.constants.constants import WAZUH_CONFIG_BUNDLE
from socbox.installer.configs.constants.enums import ComponentOutcome, ExecutionMode, OSFamily
from socbox.installer.core.orchestrator import Orchestrator
from socbox.installer.tests.mock.test_dry_run import CLIENT_ALL_ENABLED, SERVER_ALL_ENABLED
from socbox.installer.tests.mock.test_framework import BaseInstallerTest, FakeHost

CLEAN_OUTCOMES = (ComponentOutcome.SUCCEEDED, ComponentOutcome.SKIPPED)

FIREWALL_COMMANDS = {
    OSFamily.DEBIAN_LIKE: "ufw",
    OSFamily.RHEL_LIKE: "firewall-cmd",
}

INTERRUPTED_STEP = "bash wazuh-install.sh --wazuh-server"


def fresh_host(family: OSFamily) -> FakeHost:
    host = FakeHost(family)
    host.commands.add(FIREWALL_COMMANDS[family])
    return host


def all_enabled(role: InstallerRole) -> dict:
    return dict(SERVER_ALL_ENABLED if role == InstallerRole.SERVER else CLIENT_ALL_ENABLED)


class StackTest(BaseInstallerTest):
    def run_stack(self, role, family, mode=ExecutionMode.LIVE, **values):
        ctx = self.create_context(role, family, mode, **values)
        return Orchestrator(build_registry(role)).run(ctx)

    def assert_clean(self, report):
        self.assertTrue(report.results)
        for result in report.results:
            self.assertIn(result.outcome, CLEAN_OUTCOMES, f"{result.name}: {result.messages}")
        self.assertEqual(report.not_attempted, [])


@patch("socbox.installer.components.zabbix_agent.socket.getfqdn", return_value="web01.example.org")
class TestRepeatedInstall(StackTest):
    """A second live run on the same host changes nothing and fails nothing."""

    def assert_converges(self, role, family, **overrides):
        values = all_enabled(role)
        values.update(overrides)
        self.host = fresh_host(family)

        first = self.run_stack(role, family, **values)
        self.assert_clean(first)
        state = self.host.state()

        second = self.run_stack(role, family, **values)
        self.assert_clean(second)
        self.assertEqual(self.host.state(), state)

    def test_server_debian(self, _getfqdn):
        self.assert_converges(InstallerRole.SERVER, OSFamily.DEBIAN_LIKE)

    def test_server_rhel(self, _getfqdn):
        self.assert_converges(InstallerRole.SERVER, OSFamily.RHEL_LIKE)

    def test_server_rhel_postgresql(self, _getfqdn):
        self.assert_converges(InstallerRole.SERVER, OSFamily.RHEL_LIKE, DB_TYPE="postgresql")

    def test_client_debian(self, _getfqdn):
        self.assert_converges(InstallerRole.CLIENT, OSFamily.DEBIAN_LIKE)

    def test_client_rhel(self, _getfqdn):
        self.assert_converges(InstallerRole.CLIENT, OSFamily.RHEL_LIKE)

    def test_rerun_after_interrupted_wazuh_install(self, _getfqdn):
        values = all_enabled(InstallerRole.SERVER)
        host = self.host = fresh_host(OSFamily.DEBIAN_LIKE)
        host.set_command_result(INTERRUPTED_STEP, 1, ["ERROR: wazuh-manager installation failed."])

        first = self.run_stack(InstallerRole.SERVER, OSFamily.DEBIAN_LIKE, **values)
        self.assertEqual(first.outcome_of("wazuh-manager"), ComponentOutcome.FAILED_FATAL)
        self.assertIn("wazuh-indexer", host.packages)
        self.assertNotIn("wazuh-manager", host.packages)
        self.assertIn(WAZUH_CONFIG_BUNDLE, host.files)

        del host.run_process_results[INTERRUPTED_STEP]
        host.executed.clear()
        second = self.run_stack(InstallerRole.SERVER, OSFamily.DEBIAN_LIKE, **values)
        self.assert_clean(second)
        self.assert_no_command_executed("--generate-config-files")
        self.assert_no_command_executed("--wazuh-indexer")
        self.assert_command_executed("bash wazuh-install.sh --wazuh-server soc01")
        self.assertTrue({"wazuh-indexer", "wazuh-manager", "wazuh-dashboard"} <= host.packages)

        state = host.state()
        third = self.run_stack(InstallerRole.SERVER, OSFamily.DEBIAN_LIKE, **values)
        self.assert_clean(third)
        self.assertEqual(host.state(), state)


@patch("socbox.installer.components.zabbix_agent.socket.getfqdn", return_value="web01.example.org")
class TestPlanMatchesInstall(StackTest):
    """A dry run lists the same actions, in the same order, as a live run on an identical host."""

    def action_sequence(self, start, role, family, mode, **values):
        self.host = copy.deepcopy(start)
        report = self.run_stack(role, family, mode, **values)
        return report, [(action.verb, action.target) for action in self.gateway.actions]

    def assert_plan_matches(self, role, family, start=None, **overrides):
        values = all_enabled(role)
        values.update(overrides)
        start = start or fresh_host(family)

        planned_report, planned = self.action_sequence(start, role, family, ExecutionMode.SIMULATE, **values)
        self.assert_host_untouched()
        performed_report, performed = self.action_sequence(start, role, family, ExecutionMode.LIVE, **values)

        self.assertTrue(planned)
        self.assertEqual(planned, performed)
        self.assertEqual(
            [(r.name, r.outcome) for r in planned_report.results],
            [(r.name, r.outcome) for r in performed_report.results],
        )
        self.assert_clean(performed_report)

    def test_server_debian(self, _getfqdn):
        self.assert_plan_matches(InstallerRole.SERVER, OSFamily.DEBIAN_LIKE)

    def test_server_rhel(self, _getfqdn):
        self.assert_plan_matches(InstallerRole.SERVER, OSFamily.RHEL_LIKE)

    def test_server_rhel_postgresql(self, _getfqdn):
        self.assert_plan_matches(InstallerRole.SERVER, OSFamily.RHEL_LIKE, DB_TYPE="postgresql")

    def test_client_debian(self, _getfqdn):
        self.assert_plan_matches(InstallerRole.CLIENT, OSFamily.DEBIAN_LIKE)

    def test_client_rhel(self, _getfqdn):
        self.assert_plan_matches(InstallerRole.CLIENT, OSFamily.RHEL_LIKE)

    def test_server_with_partial_wazuh_install(self, _getfqdn):
        start = fresh_host(OSFamily.DEBIAN_LIKE)
        start.install("wazuh-indexer", active=True)
        start.add_file(WAZUH_CONFIG_BUNDLE, "tar")
        self.assert_plan_matches(InstallerRole.SERVER, OSFamily.DEBIAN_LIKE, start=start)


if __name__ == "__main__":
    unittest.main()
