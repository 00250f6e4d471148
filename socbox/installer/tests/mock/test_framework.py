#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Test framework infrastructure for the SoC-in-a-Box installers."""

import os
import shutil
import sys
import tempfile
import unittest
from typing import Dict, List, Optional, Tuple

import requests

# Add the project root directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "..", "..")))

from socbox.socbox_constants import InstallerRole
from socbox.installer.components.database import PGSQL_RHEL_DATA_MARKER
from socbox.installer.configs.constants.constants import (
    WAZUH_AGENT_AUTH_BIN,
    WAZUH_CLIENT_KEYS,
    WAZUH_OSSEC_CONF,
    ZABBIX_AGENT_CONF,
    ZABBIX_SERVER_CONF,
)
from socbox.installer.configs.constants.enums import ExecutionMode, OSFamily
from socbox.installer.core.environment import parse_environment
from socbox.installer.core.gateway import ExecutionGateway
from socbox.installer.core.install_context import InstallContext
from socbox.installer.core.platform_detector import PlatformInfo
from socbox.installer.utils.logger_utils import InstallerLogger

SERVER_VALUES = {
    "SITE_NAME": "hq",
    "ENVIRONMENT": "lab",
    "SERVER_HOSTNAME": "soc01",
    "SERVER_DOMAIN": "soc.example.org",
    "SERVER_IP": "10.0.0.5",
    "DB_TYPE": "mariadb",
    "DB_ROOT_PASSWORD": "r00t-Secret",
    "WAZUH_ENABLED": "false",
    "WAZUH_API_PASSWORD": "Api-Secret-1",
    "WAZUH_INDEXER_ADMIN_PASSWORD": "Idx-Secret-1",
    "ZABBIX_ENABLED": "false",
    "ZABBIX_DB_PASSWORD": "Zbx-Secret-1",
    "NGINX_ENABLED": "false",
    "ENABLE_TLS": "false",
    "ENABLE_FIREWALL": "false",
}

CLIENT_VALUES = {
    "SITE_NAME": "hq",
    "SOC_IP": "10.0.0.5",
    "WAZUH_ENABLED": "false",
    "WAZUH_REGISTRATION_PASSWORD": "Reg-Secret-1",
    "ZABBIX_ENABLED": "false",
    "CLAMAV_ENABLED": "false",
}

PLATFORMS = {
    OSFamily.DEBIAN_LIKE: PlatformInfo("ubuntu", OSFamily.DEBIAN_LIKE, "22.04", "jammy", "Ubuntu"),
    OSFamily.RHEL_LIKE: PlatformInfo("rocky", OSFamily.RHEL_LIKE, "9.3", "", "Rocky Linux"),
}

HOST_COMMANDS = {
    OSFamily.DEBIAN_LIKE: {"apt-get", "dpkg", "dpkg-query", "systemctl", "bash", "gpg"},
    OSFamily.RHEL_LIKE: {"dnf", "rpm", "systemctl", "bash"},
}

UBUNTU_OS_RELEASE = """NAME="Ubuntu"
VERSION_ID="22.04"
VERSION_CODENAME=jammy
ID=ubuntu
ID_LIKE=debian
"""

# units a package lays down when they differ from the package name
PACKAGE_UNITS = {
    "mariadb-server": ["mariadb"],
    "postgresql-server": ["postgresql"],
    "zabbix-server-mysql": ["zabbix-server"],
    "zabbix-server-pgsql": ["zabbix-server"],
    "zabbix-apache-conf": ["apache2"],
    "zabbix-web-mysql": ["httpd", "php-fpm"],
    "zabbix-web-pgsql": ["httpd", "php-fpm"],
    "clamd": ["clamd@scan"],
    "clamav-update": ["clamav-freshclam"],
}

ZABBIX_SERVER_CONF_SHIPPED = "# DBHost=localhost\nDBName=zabbix\nDBUser=zabbix\n# DBPassword=\n# ListenPort=10051\n"
ZABBIX_AGENT_CONF_SHIPPED = "Server=127.0.0.1\nServerActive=127.0.0.1\nHostname=Zabbix server\n"
WAZUH_AGENT_CONF_SHIPPED = """<ossec_config>
  <client>
    <server>
      <address>MANAGER_IP</address>
      <port>1514</port>
      <protocol>tcp</protocol>
    </server>
  </client>
</ossec_config>
"""
HTTPD_CONF_SHIPPED = "ServerRoot \"/etc/httpd\"\nListen 80\nInclude conf.modules.d/*.conf\n"
ZABBIX_SQL_SCRIPTS = {
    "/usr/share/zabbix-sql-scripts/mysql/server.sql.gz": "gz",
    "/usr/share/zabbix-sql-scripts/postgresql/server.sql.gz": "gz",
}

# configuration files a package lays down, per family
PACKAGE_FILES = {
    OSFamily.DEBIAN_LIKE: {
        "clamav-freshclam": {
            "/etc/clamav/freshclam.conf": "DatabaseOwner clamav\nDatabaseMirror database.clamav.net\n",
        },
        "zabbix-server-mysql": {ZABBIX_SERVER_CONF: ZABBIX_SERVER_CONF_SHIPPED},
        "zabbix-server-pgsql": {ZABBIX_SERVER_CONF: ZABBIX_SERVER_CONF_SHIPPED},
        "zabbix-sql-scripts": ZABBIX_SQL_SCRIPTS,
        "zabbix-apache-conf": {
            "/etc/zabbix/apache.conf": "<IfModule mod_php.c>\n    # php_value date.timezone Europe/Riga\n</IfModule>\n",
            "/etc/apache2/ports.conf": "Listen 80\n\n<IfModule ssl_module>\n\tListen 443\n</IfModule>\n",
        },
        "zabbix-agent": {ZABBIX_AGENT_CONF: ZABBIX_AGENT_CONF_SHIPPED},
        "wazuh-agent": {WAZUH_OSSEC_CONF: WAZUH_AGENT_CONF_SHIPPED},
    },
    OSFamily.RHEL_LIKE: {
        "clamav-update": {"/etc/freshclam.conf": "Example\nDatabaseMirror database.clamav.net\n"},
        "clamd": {"/etc/clamd.d/scan.conf": "Example\n#LocalSocket /run/clamd.scan/clamd.sock\nUser clamscan\n"},
        "zabbix-server-mysql": {ZABBIX_SERVER_CONF: ZABBIX_SERVER_CONF_SHIPPED},
        "zabbix-server-pgsql": {ZABBIX_SERVER_CONF: ZABBIX_SERVER_CONF_SHIPPED},
        "zabbix-sql-scripts": ZABBIX_SQL_SCRIPTS,
        "zabbix-apache-conf": {"/etc/httpd/conf.d/zabbix.conf": "Alias /zabbix /usr/share/zabbix\n"},
        "zabbix-web-mysql": {
            "/etc/php-fpm.d/zabbix.conf": "[zabbix]\n; php_value[date.timezone] = Europe/Riga\n",
            "/etc/httpd/conf/httpd.conf": HTTPD_CONF_SHIPPED,
        },
        "zabbix-web-pgsql": {
            "/etc/php-fpm.d/zabbix.conf": "[zabbix]\n; php_value[date.timezone] = Europe/Riga\n",
            "/etc/httpd/conf/httpd.conf": HTTPD_CONF_SHIPPED,
        },
        "zabbix-agent": {ZABBIX_AGENT_CONF: ZABBIX_AGENT_CONF_SHIPPED},
        "wazuh-agent": {WAZUH_OSSEC_CONF: WAZUH_AGENT_CONF_SHIPPED},
    },
}

# packages the installers fetch as files (dpkg -i / rpm -Uvh)
LOCAL_PACKAGES = ("zabbix-release",)

# wazuh-install.sh options and the package each one installs
WAZUH_INSTALL_STEPS = {
    "--wazuh-indexer": "wazuh-indexer",
    "--wazuh-server": "wazuh-manager",
    "--wazuh-dashboard": "wazuh-dashboard",
}


def make_env(role: InstallerRole = InstallerRole.SERVER, **overrides):
    """Parsed (not validated) configuration built from the test defaults."""
    values = dict(SERVER_VALUES if role == InstallerRole.SERVER else CLIENT_VALUES)
    values.update({k: str(v) for k, v in overrides.items()})
    return parse_environment(values, role, source="test.env")


def write_env_file(path: str, values: dict) -> str:
    """Write a KEY=value configuration file."""
    with open(path, "w") as f:
        for key, value in values.items():
            f.write(f"{key}={value}\n")
    return path


class FakeHost:
    """In-memory stand-in for LocalHost.

    Actions executed by the gateway (``stderr=True``) are recorded in
    ``executed``; read-only probes (``stderr=False``) are recorded in
    ``probes``. Package managers, systemctl, ufw and firewall-cmd keep just
    enough state for the installers to make their decisions.
    """

    def __init__(self, family: OSFamily = OSFamily.DEBIAN_LIKE):
        self.family = family
        self.commands = set(HOST_COMMANDS[family])
        self.files: Dict[str, str] = {}
        self.dirs = set()
        self.modes: Dict[str, Optional[int]] = {}
        self.owners: Dict[str, Optional[str]] = {}
        self.packages = set()
        self.units: Dict[str, bool] = {}
        self.failing_units = set()
        self.failing_urls = set()
        self.ufw_rules = set()
        self.firewalld_ports = set()
        self.schema_imported = False

        self.run_process_results: Dict[str, Tuple[int, List[str]]] = {}
        self.executed: List[dict] = []
        self.probes: List[dict] = []
        self.mutations: List[Tuple[str, str]] = []
        self.downloads: List[str] = []

    #####################################################
    # test helpers
    #####################################################

    def set_command_result(self, command: str, return_code: int, output: list):
        """Result for a command, matched exactly or as a prefix."""
        self.run_process_results[command] = (return_code, output)

    def add_file(self, path: str, content: str = ""):
        self.files[path] = content

    def install(self, *packages, active: bool = False):
        """Mark packages as installed, laying down their units and configuration files.

        Files already on the host are kept, as a package upgrade keeps edited conffiles.
        """
        for package in packages:
            self.packages.add(package)
            for unit in PACKAGE_UNITS.get(package, [package]):
                self.units.setdefault(unit, active)
            for path, content in PACKAGE_FILES[self.family].get(package, {}).items():
                self.files.setdefault(path, content)

    def state(self) -> dict:
        """Snapshot of everything the installers can change."""
        return {
            "packages": set(self.packages),
            "units": dict(self.units),
            "files": dict(self.files),
            "dirs": set(self.dirs),
            "ufw_rules": set(self.ufw_rules),
            "firewalld_ports": set(self.firewalld_ports),
        }

    def executed_commands(self) -> List[str]:
        return [record["command"] for record in self.executed]

    def find_executed(self, prefix: str) -> List[dict]:
        return [record for record in self.executed if record["command"].startswith(prefix)]

    #####################################################
    # LocalHost interface
    #####################################################

    def run_process(
        self,
        command,
        stdin=None,
        env=None,
        cwd=None,
        retry=0,
        retry_sleep_sec=5,
        stderr=True,
    ):
        command = [str(c) for c in command]
        cmd_str = " ".join(command)
        record = {"command": cmd_str, "stdin": stdin, "env": env, "cwd": cwd, "retry": retry}
        (self.executed if stderr else self.probes).append(record)

        if cmd_str in self.run_process_results:
            return self.run_process_results[cmd_str]
        for prefix, result in self.run_process_results.items():
            if cmd_str.startswith(prefix):
                return result
        return self._default_result(command, cwd)

    def _default_result(self, command: List[str], cwd: Optional[str] = None) -> Tuple[int, List[str]]:
        tool = command[0]
        args = [c for c in command[1:] if not c.startswith("-")]

        if tool == "dpkg-query":
            name = command[-1]
            if name in self.packages:
                return 0, ["install ok installed"]
            return 1, [f"dpkg-query: no packages found matching {name}"]

        if tool == "rpm" and command[1:2] == ["-q"]:
            name = command[-1]
            return (0, [name]) if name in self.packages else (1, [f"package {name} is not installed"])

        if tool in ("apt-get", "dnf", "yum") and args:
            if args[0] == "install":
                self.install(*args[1:])
            elif args[0] == "remove":
                for package in args[1:]:
                    self.packages.discard(package)
                    for unit in PACKAGE_UNITS.get(package, [package]):
                        self.units.pop(unit, None)
            return 0, []

        if (tool == "dpkg" and command[1:2] == ["-i"]) or (tool == "rpm" and command[1:2] == ["-Uvh"]):
            name = os.path.basename(command[-1])
            self.install(*[p for p in LOCAL_PACKAGES if name.startswith(p)])
            return 0, []

        if tool == "bash" and command[1:2] == ["wazuh-install.sh"]:
            step = command[2] if len(command) > 2 else ""
            if step == "--generate-config-files":
                self.files[os.path.join(cwd or "", "wazuh-install-files.tar")] = "tar"
            elif step in WAZUH_INSTALL_STEPS:
                package = WAZUH_INSTALL_STEPS[step]
                if package in self.packages:
                    return 1, [f"ERROR: {package} already installed."]
                self.install(package)
            return 0, []

        if tool == "bash" and "zcat" in " ".join(command):
            self.schema_imported = True
            return 0, []

        if any("information_schema.tables" in arg for arg in command):
            return 0, ["1" if self.schema_imported else "0"]

        if tool == "postgresql-setup":
            self.files[PGSQL_RHEL_DATA_MARKER] = "16"
            return 0, []

        if tool == "gpg" and "--output" in command:
            self.files[command[command.index("--output") + 1]] = "keyring"
            return 0, []

        if tool == "ln" and len(args) == 2 and args[0] in self.files:
            self.files[args[1]] = self.files[args[0]]
            return 0, []

        if tool == WAZUH_AGENT_AUTH_BIN:
            self.files[WAZUH_CLIENT_KEYS] = "001 agent any 0123456789abcdef\n"
            return 0, []

        if tool == "systemctl":
            verb = command[1] if len(command) > 1 else ""
            unit = command[-1]
            if verb == "daemon-reload":
                return 0, []
            if verb == "cat":
                if unit in self.units:
                    return 0, [f"# /lib/systemd/system/{unit}.service"]
                return 1, [f"No files found for {unit}."]
            if verb == "is-active":
                return (0, []) if self.units.get(unit) else (3, [])
            if unit not in self.units:
                return 5, [f"Unit {unit}.service not found."]
            if verb in ("start", "restart"):
                self.units[unit] = unit not in self.failing_units
            elif verb == "stop":
                self.units[unit] = False
            return 0, []

        if tool == "ufw":
            if command[1:2] == ["status"]:
                rules = [f"{rule:<27}ALLOW       Anywhere" for rule in sorted(self.ufw_rules)]
                header = ["Status: active", "", "To                         Action      From", "--  ------  ----"]
                return 0, header + rules
            if command[1:2] == ["allow"]:
                self.ufw_rules.add(command[2])
            elif command[1:3] == ["delete", "allow"]:
                self.ufw_rules.discard(command[3])
            return 0, []

        if tool == "firewall-cmd":
            for arg in command[1:]:
                if arg.startswith("--query-port="):
                    return (0, ["yes"]) if arg.split("=", 1)[1] in self.firewalld_ports else (1, ["no"])
                if arg.startswith("--add-port="):
                    self.firewalld_ports.add(arg.split("=", 1)[1])
                elif arg.startswith("--remove-port="):
                    self.firewalld_ports.discard(arg.split("=", 1)[1])
            return 0, []

        return 0, []

    def which(self, cmd: str) -> bool:
        return cmd in self.commands

    def exists(self, path: str) -> bool:
        prefix = path.rstrip("/") + "/"
        return (
            path in self.files
            or path in self.dirs
            or any(p.startswith(prefix) for p in list(self.files) + list(self.dirs))
        )

    def read_file(self, path: str) -> Optional[str]:
        return self.files.get(path)

    def write_file(self, path, content, mode=None, owner=None):
        self.mutations.append(("write", path))
        self.files[path] = content
        self.modes[path] = mode
        self.owners[path] = owner

    def copy_file(self, source, destination):
        self.mutations.append(("copy", destination))
        self.files[destination] = self.files[source]

    def make_dirs(self, path, mode=None, owner=None):
        self.mutations.append(("mkdir", path))
        self.dirs.add(path)
        self.modes[path] = mode
        self.owners[path] = owner

    def remove(self, path):
        self.mutations.append(("remove", path))
        prefix = path.rstrip("/") + "/"
        for p in [p for p in self.files if p == path or p.startswith(prefix)]:
            del self.files[p]
        self.dirs = {d for d in self.dirs if d != path and not d.startswith(prefix)}

    def download(self, url, path) -> int:
        self.downloads.append(url)
        if url in self.failing_urls:
            raise requests.ConnectionError(f"Failed to fetch {url}")
        self.mutations.append(("download", path))
        self.files[path] = "payload"
        return len(self.files[path])


class BaseInstallerTest(unittest.TestCase):
    """Base test class with a fake host behind a real execution gateway."""

    def setUp(self):
        InstallerLogger.set_console_output(False)
        InstallerLogger.set_log_file(None)
        InstallerLogger.set_debug_enabled(False)
        self.host = None
        self.gateway = None

    def tearDown(self):
        InstallerLogger.set_console_output(True)

    def create_host(self, family: OSFamily = OSFamily.DEBIAN_LIKE) -> FakeHost:
        self.host = FakeHost(family)
        return self.host

    def create_context(
        self,
        role: InstallerRole = InstallerRole.SERVER,
        family: OSFamily = OSFamily.DEBIAN_LIKE,
        mode: ExecutionMode = ExecutionMode.LIVE,
        **env_overrides,
    ) -> InstallContext:
        """Context on ``self.host`` (created for ``family`` if not set up yet)."""
        if self.host is None:
            self.create_host(family)
        self.gateway = ExecutionGateway(mode, host=self.host)
        return InstallContext.create(make_env(role, **env_overrides), PLATFORMS[family], self.gateway)

    def assert_command_executed(self, command_pattern: str):
        """Assert that an executed command contains the pattern."""
        executed = self.host.executed_commands()
        matching = [cmd for cmd in executed if command_pattern in cmd]
        self.assertTrue(
            len(matching) > 0,
            f"Command pattern '{command_pattern}' not found in executed commands: {executed}",
        )

    def assert_no_command_executed(self, command_pattern: str):
        executed = self.host.executed_commands()
        matching = [cmd for cmd in executed if command_pattern in cmd]
        self.assertEqual(
            len(matching),
            0,
            f"Command pattern '{command_pattern}' was unexpectedly executed: {matching}",
        )

    def assert_host_untouched(self):
        self.assertEqual(self.host.executed, [], "commands were executed on the host")
        self.assertEqual(self.host.mutations, [], "the host filesystem was changed")

    def make_temp_dir(self) -> str:
        temp_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, temp_dir, ignore_errors=True)
        return temp_dir
