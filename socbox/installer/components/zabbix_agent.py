#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Zabbix agent reporting to the SOC server."""

import socket
from typing import Dict, List, Tuple

from socbox.installer.configs.constants.config_env_var_keys import KEY_ENV_ZABBIX_ENABLED
from socbox.installer.configs.constants.constants import (
    COMPONENT_ZABBIX_AGENT,
    ZABBIX_AGENT_CONF,
    ZABBIX_RELEASE_PACKAGE,
)
from socbox.installer.utils.config_file_utils import apply_directives, backup_suffix
from socbox.installer.utils.logger_utils import InstallerLogger

from .base import BaseComponent
from .zabbix_release import install_release_package

ZABBIX_AGENT_PACKAGE = "zabbix-agent"
ZABBIX_AGENT_UNIT = "zabbix-agent"


def agent_directives(settings, hostname: str) -> Dict[str, str]:
    directives = {
        "Server": settings.server,
        "ServerActive": settings.server_active,
        "Hostname": hostname,
        "HostMetadata": settings.host_metadata,
    }
    if settings.listen_port:
        directives["ListenPort"] = str(settings.listen_port)
    if settings.enable_remote_commands:
        directives["EnableRemoteCommands"] = "1"
    return directives


class ZabbixAgentComponent(BaseComponent):
    name = COMPONENT_ZABBIX_AGENT
    label = "Zabbix Agent"
    enable_key = KEY_ENV_ZABBIX_ENABLED
    cli_flag = "zabbix"

    def packages(self, ctx) -> List[str]:
        return [ZABBIX_AGENT_PACKAGE]

    def removal_packages(self, ctx) -> List[str]:
        return [ZABBIX_AGENT_PACKAGE, ZABBIX_RELEASE_PACKAGE]

    def service_units(self, ctx) -> List[str]:
        return [ZABBIX_AGENT_UNIT]

    def access_endpoints(self, env) -> List[Tuple[str, str]]:
        return [("Zabbix Server", env.zabbix_agent.server)]

    def install(self, ctx) -> None:
        settings = ctx.env.zabbix_agent
        InstallerLogger.info(f"Server: {settings.server or 'not set'}")
        InstallerLogger.info(f"Host metadata: {settings.host_metadata}")

        if ctx.packages.package_is_installed(ZABBIX_AGENT_PACKAGE):
            InstallerLogger.info("Zabbix agent is already installed; updating configuration only")
        else:
            with self.best_effort("release repository (trying distribution packages)"):
                install_release_package(ctx)
            ctx.packages.install_packages(self.packages(ctx), units=self.service_units(ctx))

        if settings.host_group:
            InstallerLogger.info(f"Host group '{settings.host_group}' is assigned by the server's auto-registration")

        apply_directives(
            ctx.gateway,
            ZABBIX_AGENT_CONF,
            agent_directives(settings, socket.getfqdn()),
            backup=backup_suffix(timestamped=True),
        )

        ctx.services.daemon_reload()
        ctx.services.enable_and_restart(ZABBIX_AGENT_UNIT)
        if not ctx.services.is_active(ZABBIX_AGENT_UNIT):
            self.degrade("zabbix-agent is not running after start")
