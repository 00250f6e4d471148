#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Selective removal against the fake host."""

import os
import sys
import unittest
from unittest.mock import patch

# Add the project root directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "..", "..")))

from socbox.socbox_constants import InstallerRole
from socbox.installer.components import build_registry
from socbox.installer.configs.constants.enums import ComponentOutcome, OSFamily
from socbox.installer.core.uninstaller import Uninstaller
from socbox.installer.tests.mock.test_framework import BaseInstallerTest
from socbox.installer.utils.exceptions import RegistryError
from socbox.installer.utils.logger_utils import InstallerLogger

NGINX_SITE = "/etc/nginx/sites-available/soc-proxy.conf"
NGINX_SITE_LINK = "/etc/nginx/sites-enabled/soc-proxy.conf"


class TestUninstaller(BaseInstallerTest):
    def setUp(self):
        super().setUp()
        self.registry = build_registry(InstallerRole.SERVER)
        self.uninstaller = Uninstaller(self.registry)

    def test_resolve_selection(self):
        all_names = ["database", "wazuh-manager", "zabbix-server", "nginx", "firewall"]
        self.assertEqual(self.uninstaller.resolve_selection("all"), all_names)
        self.assertEqual(self.uninstaller.resolve_selection([]), all_names)
        self.assertEqual(self.uninstaller.resolve_selection(["nginx", "all"]), all_names)
        self.assertEqual(self.uninstaller.resolve_selection(["nginx", "nginx"]), ["nginx"])
        self.assertEqual(self.uninstaller.resolve_selection("firewall"), ["firewall"])

    def test_unknown_component(self):
        ctx = self.create_context()
        with self.assertRaises(RegistryError):
            self.uninstaller.remove(["kibana"], ctx)

    def test_empty_host_is_untouched(self):
        ctx = self.create_context()
        report = self.uninstaller.remove("all", ctx)
        self.assert_host_untouched()
        self.assertEqual(
            [r.name for r in report.results],
            ["firewall", "nginx", "zabbix-server", "wazuh-manager", "database"],
        )
        self.assertTrue(all(r.outcome == ComponentOutcome.SUCCEEDED for r in report.results))
        self.assertEqual(report.exit_code, 0)

    def test_remove_nginx(self):
        host = self.create_host()
        host.install("nginx", "nginx-common", active=True)
        host.add_file(NGINX_SITE, "server {}")
        host.add_file(NGINX_SITE_LINK, "server {}")
        ctx = self.create_context()

        report = self.uninstaller.remove(["nginx"], ctx)

        self.assertEqual(report.outcome_of("nginx"), ComponentOutcome.SUCCEEDED)
        self.assertEqual(
            host.executed_commands(),
            [
                "systemctl stop nginx",
                "systemctl disable nginx",
                "apt-get remove -y -qq nginx nginx-common",
            ],
        )
        self.assertNotIn(NGINX_SITE, host.files)
        self.assertNotIn(NGINX_SITE_LINK, host.files)
        self.assertNotIn("nginx", host.packages)

    def test_second_removal_is_a_no_op(self):
        host = self.create_host()
        host.install("nginx", "nginx-common", active=True)
        host.add_file(NGINX_SITE, "server {}")
        self.uninstaller.remove(["nginx"], self.create_context())

        host.executed.clear()
        host.mutations.clear()
        report = self.uninstaller.remove(["nginx"], self.create_context())
        self.assertEqual(report.outcome_of("nginx"), ComponentOutcome.SUCCEEDED)
        self.assert_host_untouched()

    def test_selective_removal_keeps_other_components(self):
        host = self.create_host()
        host.install("nginx", "zabbix-server-mysql", "zabbix-agent", active=True)
        ctx = self.create_context()

        report = self.uninstaller.remove(["nginx"], ctx)

        self.assertEqual([r.name for r in report.results], ["nginx"])
        self.assertIn("zabbix-server-mysql", host.packages)
        self.assertTrue(host.units["zabbix-server"])
        self.assert_no_command_executed("zabbix")

    def test_reverse_dependency_order(self):
        host = self.create_host()
        host.install("mariadb-server", "zabbix-server-mysql", active=True)
        ctx = self.create_context()

        report = self.uninstaller.remove(["database", "zabbix-server"], ctx)

        self.assertEqual([r.name for r in report.results], ["zabbix-server", "database"])
        executed = host.executed_commands()
        self.assertLess(executed.index("systemctl stop zabbix-server"), executed.index("systemctl stop mariadb"))

    def test_database_keeps_packages_and_data(self):
        host = self.create_host()
        host.install("mariadb-server", "mariadb-client", active=True)
        host.add_file("/var/lib/mysql/ibdata1", "data")
        ctx = self.create_context()

        with patch.object(InstallerLogger, "warning") as mock_warning:
            report = self.uninstaller.remove(["database"], ctx)

        self.assertEqual(report.outcome_of("database"), ComponentOutcome.SUCCEEDED)
        self.assert_command_executed("systemctl stop mariadb")
        self.assert_no_command_executed("apt-get remove")
        self.assertIn("mariadb-server", host.packages)
        self.assertIn("/var/lib/mysql/ibdata1", host.files)
        warnings = [c[0][0] for c in mock_warning.call_args_list]
        self.assertIn("Database packages are kept; remove them manually if required", warnings)
        self.assertIn("Database data left in place: /var/lib/mysql", warnings)

    def test_wazuh_data_is_reported(self):
        host = self.create_host()
        host.install("wazuh-manager", "wazuh-indexer", "wazuh-dashboard", active=True)
        host.add_file("/var/ossec/etc/ossec.conf", "<ossec_config/>")
        ctx = self.create_context()

        with patch.object(InstallerLogger, "warning") as mock_warning:
            self.uninstaller.remove(["wazuh-manager"], ctx)

        self.assert_command_executed("apt-get remove -y -qq wazuh-indexer wazuh-manager wazuh-dashboard")
        self.assertIn("/var/ossec/etc/ossec.conf", host.files)
        warnings = " ".join(c[0][0] for c in mock_warning.call_args_list)
        self.assertIn("/var/ossec", warnings)


class TestFirewallRemoval(BaseInstallerTest):
    def setUp(self):
        super().setUp()
        self.uninstaller = Uninstaller(build_registry(InstallerRole.SERVER))

    def test_ufw_closes_only_soc_ports(self):
        host = self.create_host()
        host.commands.add("ufw")
        host.ufw_rules.update({"22/tcp", "80/tcp", "443/tcp", "1514/tcp", "10051/tcp"})
        ctx = self.create_context()

        self.uninstaller.remove(["firewall"], ctx)

        self.assertEqual(
            host.executed_commands(),
            ["ufw delete allow 1514/tcp", "ufw delete allow 10051/tcp"],
        )
        self.assertEqual(host.ufw_rules, {"22/tcp", "80/tcp", "443/tcp"})

    def test_firewalld(self):
        host = self.create_host(OSFamily.RHEL_LIKE)
        host.commands.add("firewall-cmd")
        host.firewalld_ports.update({"1514/tcp", "10050/tcp"})
        ctx = self.create_context(family=OSFamily.RHEL_LIKE)

        self.uninstaller.remove(["firewall"], ctx)

        self.assertEqual(
            host.executed_commands(),
            [
                "firewall-cmd --permanent --remove-port=1514/tcp",
                "firewall-cmd --permanent --remove-port=10050/tcp",
                "firewall-cmd --reload",
            ],
        )
        self.assertEqual(host.firewalld_ports, set())

    def test_firewalld_nothing_open(self):
        host = self.create_host(OSFamily.RHEL_LIKE)
        host.commands.add("firewall-cmd")
        ctx = self.create_context(family=OSFamily.RHEL_LIKE)
        self.uninstaller.remove(["firewall"], ctx)
        self.assert_host_untouched()


if __name__ == "__main__":
    unittest.main()
