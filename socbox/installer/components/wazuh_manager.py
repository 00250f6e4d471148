#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Wazuh all-in-one (indexer, manager, dashboard) via the assisted installer."""

import hashlib
import os
from typing import List, Tuple

from socbox.installer.configs.constants.config_env_var_keys import KEY_ENV_WAZUH_ENABLED
from socbox.installer.configs.constants.constants import (
    COMPONENT_WAZUH_MANAGER,
    WAZUH_API_USERS_FILE,
    WAZUH_CONFIG_BUNDLE,
    WAZUH_INDEXER_DATA_DIR,
    WAZUH_INSTALL_SCRIPT_URL,
    WAZUH_OSSEC_DIR,
    WAZUH_WORK_DIR,
)
from socbox.installer.configs.constants.enums import OSFamily
from socbox.installer.utils.config_file_utils import dump_yaml
from socbox.installer.utils.logger_utils import InstallerLogger

from .base import BaseComponent, enable_services, public_url

WAZUH_STACK_PACKAGES = ["wazuh-indexer", "wazuh-manager", "wazuh-dashboard"]
WAZUH_SERVICES = ["wazuh-manager", "wazuh-indexer", "wazuh-dashboard"]
WAZUH_INSTALL_SCRIPT = "wazuh-install.sh"
WAZUH_PASSWORDS_TOOL = "/usr/share/wazuh-indexer/plugins/opensearch-security/tools/wazuh-passwords-tool.sh"

PREREQUISITES = {
    OSFamily.DEBIAN_LIKE: ["curl", "apt-transport-https", "gnupg", "lsb-release", "tar"],
    OSFamily.RHEL_LIKE: ["curl", "gnupg2", "tar"],
}


class WazuhManagerComponent(BaseComponent):
    name = COMPONENT_WAZUH_MANAGER
    label = "Wazuh Manager"
    enable_key = KEY_ENV_WAZUH_ENABLED
    cli_flag = "wazuh"

    def packages(self, ctx) -> List[str]:
        return list(WAZUH_STACK_PACKAGES)

    def service_units(self, ctx) -> List[str]:
        return list(WAZUH_SERVICES)

    def owned_config_paths(self, ctx) -> List[str]:
        return [os.path.join(WAZUH_WORK_DIR, "config.yml"), os.path.join(WAZUH_WORK_DIR, WAZUH_INSTALL_SCRIPT)]

    def data_paths(self, ctx) -> List[str]:
        return [WAZUH_OSSEC_DIR, WAZUH_INDEXER_DATA_DIR]

    def access_endpoints(self, env) -> List[Tuple[str, str]]:
        return [
            ("Wazuh Dashboard", public_url(env, port=env.wazuh_manager.dashboard_port, scheme="https")),
            ("Wazuh API", public_url(env, port=env.wazuh_manager.api_port, scheme="https")),
        ]

    def install(self, ctx) -> None:
        ctx.packages.install_packages(PREREQUISITES[ctx.family])

        pending = [p for p in WAZUH_STACK_PACKAGES if not ctx.packages.package_is_installed(p)]
        if pending:
            self._run_assisted_installer(ctx, pending)
        else:
            InstallerLogger.info("Wazuh stack is already installed; skipping the assisted installer")

        self._configure_api_user(ctx)

        indexer_password = ctx.env.wazuh_manager.indexer_admin_password
        # the passwords tool ships with wazuh-indexer
        if indexer_password and ctx.packages.package_is_installed("wazuh-indexer"):
            with self.best_effort("set indexer admin password"):
                ctx.gateway.run(
                    ["bash", WAZUH_PASSWORDS_TOOL, "-u", "admin", "-p", indexer_password],
                    redact=[indexer_password],
                )

        enable_services(ctx, WAZUH_SERVICES, restart=True)

    def _run_assisted_installer(self, ctx, pending: List[str]) -> None:
        """Run the installer steps whose package is still missing, so an interrupted install resumes."""
        env = ctx.env
        node_name = env.server_hostname

        ctx.gateway.make_dirs(WAZUH_WORK_DIR, mode=0o700)
        script = os.path.join(WAZUH_WORK_DIR, WAZUH_INSTALL_SCRIPT)
        if not ctx.gateway.path_exists(script):
            ctx.gateway.download(WAZUH_INSTALL_SCRIPT_URL, script)

        ctx.gateway.write_file(os.path.join(WAZUH_WORK_DIR, "config.yml"), self.cluster_config(env), mode=0o600)

        InstallerLogger.info(f"Installing Wazuh stack: {', '.join(pending)} (this may take several minutes)")
        steps = []
        # the certificates bundle is shared by every node step
        if not ctx.gateway.path_exists(WAZUH_CONFIG_BUNDLE):
            steps.append((["--generate-config-files"], ()))
        if "wazuh-indexer" in pending:
            steps.append((["--wazuh-indexer", node_name], ("wazuh-indexer",)))
        # security initialization has to happen before the server joins the cluster
        if "wazuh-indexer" in pending or "wazuh-manager" in pending:
            steps.append((["--start-cluster"], ()))
        if "wazuh-manager" in pending:
            steps.append((["--wazuh-server", node_name], ("wazuh-manager",)))
        if "wazuh-dashboard" in pending:
            steps.append((["--wazuh-dashboard", node_name], ("wazuh-dashboard",)))

        for step, provides in steps:
            ctx.gateway.run(
                ["bash", WAZUH_INSTALL_SCRIPT] + step,
                cwd=WAZUH_WORK_DIR,
                installs=provides,
                provides_units=provides,
            )

    @staticmethod
    def cluster_config(env) -> str:
        """config.yml describing a single node hosting all three roles."""
        node = {"name": env.server_hostname, "ip": env.server_ip}
        return dump_yaml(
            {
                "nodes": {
                    "indexer": [dict(node)],
                    "server": [dict(node)],
                    "dashboard": [dict(node)],
                }
            }
        )

    @staticmethod
    def api_users(settings) -> str:
        digest = hashlib.sha512(settings.api_password.encode("utf-8")).hexdigest()
        return dump_yaml({"users": [{"username": settings.api_user, "password": digest}]})

    def _configure_api_user(self, ctx) -> None:
        settings = ctx.env.wazuh_manager
        if not settings.api_password:
            InstallerLogger.warning("WAZUH_API_PASSWORD is not set; the API user keeps its generated password")
            return
        ctx.gateway.write_file(
            WAZUH_API_USERS_FILE,
            self.api_users(settings),
            mode=0o640,
            owner="wazuh:wazuh",
        )
