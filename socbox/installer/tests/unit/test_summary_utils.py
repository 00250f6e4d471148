#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Unit tests for the end-of-run summary."""

import os
import sys
import unittest

# Add the project root directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "..", "..")))

from socbox.socbox_constants import InstallerRole
from socbox.installer.components import build_registry
from socbox.installer.configs.constants.enums import ComponentOutcome, DatabaseType, OSFamily
from socbox.installer.core.orchestrator import ComponentResult, RunReport
from socbox.installer.tests.mock.test_framework import PLATFORMS, SERVER_VALUES, make_env
from socbox.installer.utils.summary_utils import build_run_summary, format_summary_value


def server_report(*outcomes, not_attempted=()):
    registry = build_registry(InstallerRole.SERVER)
    report = RunReport()
    for name, outcome in outcomes:
        report.results.append(ComponentResult(name, registry.get(name).label, outcome))
    report.not_attempted = list(not_attempted)
    return report, registry


class TestFormatSummaryValue(unittest.TestCase):
    def test_password_is_masked(self):
        self.assertEqual(format_summary_value("Database Root Password", "hunter2"), "********")

    def test_empty_values(self):
        self.assertEqual(format_summary_value("Hostname", ""), "Not set")
        self.assertEqual(format_summary_value("Database Root Password", ""), "Not set")
        self.assertEqual(format_summary_value("Hostname", None), "Not set")

    def test_typed_values(self):
        self.assertEqual(format_summary_value("Firewall", True), "Yes")
        self.assertEqual(format_summary_value("Firewall", False), "No")
        self.assertEqual(format_summary_value("Database", DatabaseType.POSTGRESQL), "postgresql")
        self.assertEqual(format_summary_value("Port", 443), "443")


class TestBuildRunSummary(unittest.TestCase):
    def setUp(self):
        self.env = make_env(InstallerRole.SERVER, ZABBIX_ENABLED="true", WAZUH_ENABLED="true")

    def test_successful_run(self):
        report, registry = server_report(
            ("database", ComponentOutcome.SUCCEEDED),
            ("wazuh-manager", ComponentOutcome.SKIPPED),
            ("zabbix-server", ComponentOutcome.SUCCEEDED),
        )
        lines = build_run_summary(report, registry, self.env, platform=PLATFORMS[OSFamily.DEBIAN_LIKE])
        text = "\n".join(lines)

        self.assertIn("Installation Summary", text)
        self.assertIn("[ok] Database: succeeded", text)
        self.assertIn("[--] Wazuh Manager: skipped", text)
        self.assertIn("http://soc.example.org/zabbix", text)
        self.assertIn("Admin / zabbix", text)
        self.assertIn("Ubuntu 22.04 (debian)", text)
        # wazuh was skipped: no dashboard URL or reminder
        self.assertNotIn(":5601", text)
        self.assertNotIn("wazuh-passwords.txt", text)

    def test_secrets_never_printed(self):
        report, registry = server_report(("database", ComponentOutcome.SUCCEEDED))
        text = "\n".join(build_run_summary(report, registry, self.env))
        for key in ("DB_ROOT_PASSWORD", "ZABBIX_DB_PASSWORD", "WAZUH_API_PASSWORD"):
            self.assertNotIn(SERVER_VALUES[key], text)
        self.assertIn("********", text)

    def test_halted_run(self):
        report, registry = server_report(
            ("database", ComponentOutcome.SUCCEEDED),
            ("wazuh-manager", ComponentOutcome.FAILED_FATAL),
            not_attempted=["zabbix-server", "nginx", "firewall"],
        )
        report.results[1].messages.append("wazuh-manager: download failed")
        text = "\n".join(build_run_summary(report, registry, self.env))
        self.assertIn("[XX] Wazuh Manager: failed (fatal) - wazuh-manager: download failed", text)
        self.assertIn("[  ] Zabbix Server: not attempted", text)
        self.assertIn("[  ] Nginx Reverse Proxy: not attempted", text)

    def test_degraded_component_still_lists_endpoints(self):
        report, registry = server_report(
            ("database", ComponentOutcome.SUCCEEDED),
            ("zabbix-server", ComponentOutcome.FAILED_NON_FATAL),
        )
        text = "\n".join(build_run_summary(report, registry, self.env))
        self.assertIn("[!!] Zabbix Server", text)
        self.assertIn("http://soc.example.org/zabbix", text)

    def test_planned_actions(self):
        report, registry = server_report(("database", ComponentOutcome.SUCCEEDED))
        lines = build_run_summary(
            report,
            registry,
            self.env,
            planned_actions=["apt-get install -y mariadb-server", "systemctl restart mariadb"],
        )
        self.assertIn("  Planned actions (2):", lines)
        self.assertIn("    1. apt-get install -y mariadb-server", lines)
        self.assertIn("    2. systemctl restart mariadb", lines)
        self.assertNotIn("  Access:", lines)

    def test_removal_summary(self):
        report, registry = server_report(("zabbix-server", ComponentOutcome.SUCCEEDED))
        lines = build_run_summary(report, registry, self.env, title="Uninstall Summary", removal=True)
        self.assertIn("  Uninstall Summary", lines)
        self.assertNotIn("  Access:", lines)
        self.assertNotIn("Admin / zabbix", "\n".join(lines))

    def test_log_file(self):
        report, registry = server_report()
        lines = build_run_summary(report, registry, self.env, log_file="/var/log/soc-server-install.log")
        self.assertIn("  Log file: /var/log/soc-server-install.log", lines)

    def test_client_items(self):
        env = make_env(InstallerRole.CLIENT, WAZUH_ENABLED="true")
        registry = build_registry(InstallerRole.CLIENT)
        text = "\n".join(build_run_summary(RunReport(), registry, env))
        self.assertIn("SOC Server:", text)
        self.assertIn("10.0.0.5", text)
        self.assertNotIn("Database Root Password", text)


if __name__ == "__main__":
    unittest.main()
