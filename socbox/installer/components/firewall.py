#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Host firewall rules for the SOC server (ufw or firewalld)."""

from typing import List, Tuple

from socbox.installer.configs.constants.config_env_var_keys import KEY_ENV_ENABLE_FIREWALL
from socbox.installer.configs.constants.constants import (
    COMPONENT_FIREWALL,
    DEFAULT_ZABBIX_AGENT_PORT,
    HTTP_PORT,
    HTTPS_PORT,
    SSH_PORT,
)
from socbox.installer.utils.logger_utils import InstallerLogger

from .base import BaseComponent

FIREWALLD_SERVICES = {SSH_PORT: "ssh", HTTP_PORT: "http", HTTPS_PORT: "https"}


def soc_ports(env) -> List[int]:
    """Agent-facing ports of the stack, in rule order."""
    return [
        env.wazuh_manager.listen_port,
        env.wazuh_manager.registration_port,
        env.zabbix_server.server_port,
        DEFAULT_ZABBIX_AGENT_PORT,
    ]


def base_ports() -> List[int]:
    return [SSH_PORT, HTTP_PORT, HTTPS_PORT]


class FirewallComponent(BaseComponent):
    name = COMPONENT_FIREWALL
    label = "Firewall"
    enable_key = KEY_ENV_ENABLE_FIREWALL
    cli_flag = "firewall"

    def packages(self, ctx) -> List[str]:
        # the firewall frontend is part of the base system
        return []

    def backend(self, ctx) -> str:
        if ctx.gateway.has_command("ufw"):
            return "ufw"
        if ctx.gateway.has_command("firewall-cmd"):
            return "firewalld"
        return ""

    def access_endpoints(self, env) -> List[Tuple[str, str]]:
        ports = ", ".join(f"{p}/tcp" for p in base_ports() + soc_ports(env))
        return [("Open ports", ports)]

    def install(self, ctx) -> None:
        backend = self.backend(ctx)
        ports = base_ports() + soc_ports(ctx.env)
        if backend == "ufw":
            for port in ports:
                ctx.gateway.run(["ufw", "allow", f"{port}/tcp"])
            ctx.gateway.run(["ufw", "--force", "enable"])
            InstallerLogger.info("UFW firewall configured")
        elif backend == "firewalld":
            for port in ports:
                if port in FIREWALLD_SERVICES:
                    ctx.gateway.run(["firewall-cmd", "--permanent", f"--add-service={FIREWALLD_SERVICES[port]}"])
                else:
                    ctx.gateway.run(["firewall-cmd", "--permanent", f"--add-port={port}/tcp"])
            ctx.gateway.run(["firewall-cmd", "--reload"])
            InstallerLogger.info("firewalld configured")
        else:
            self.degrade("no supported firewall found (ufw or firewalld)")

    def uninstall(self, ctx) -> None:
        """Close the SOC ports; SSH and HTTP(S) rules stay."""
        backend = self.backend(ctx)
        ports = [f"{port}/tcp" for port in dict.fromkeys(soc_ports(ctx.env))]
        if backend == "ufw":
            _, status = ctx.gateway.probe(["ufw", "status"])
            rules = {line.split()[0] for line in status if line.split()}
            for port in ports:
                if port in rules:
                    ctx.gateway.run(["ufw", "delete", "allow", port])
        elif backend == "firewalld":
            changed = False
            for port in ports:
                returncode, _ = ctx.gateway.probe(["firewall-cmd", "--permanent", f"--query-port={port}"])
                if returncode == 0:
                    ctx.gateway.run(["firewall-cmd", "--permanent", f"--remove-port={port}"])
                    changed = True
            if changed:
                ctx.gateway.run(["firewall-cmd", "--reload"])
        else:
            InstallerLogger.info("No supported firewall found; nothing to remove")
