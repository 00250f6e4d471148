#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Wazuh agent enrolled with the SOC manager."""

from functools import partial
from typing import List, Tuple

from socbox.installer.configs.constants.config_env_var_keys import KEY_ENV_WAZUH_ENABLED
from socbox.installer.configs.constants.constants import (
    COMPONENT_WAZUH_AGENT,
    WAZUH_AGENT_AUTH_BIN,
    WAZUH_APT_REPO_URL,
    WAZUH_APT_SOURCE_LIST,
    WAZUH_CLIENT_KEYS,
    WAZUH_GPG_KEY_URL,
    WAZUH_KEYRING,
    WAZUH_OSSEC_CONF,
    WAZUH_OSSEC_DIR,
    WAZUH_YUM_REPO_FILE,
    WAZUH_YUM_REPO_URL,
)
from socbox.installer.configs.constants.enums import OSFamily
from socbox.installer.utils.config_file_utils import backup_suffix, set_xml_elements
from socbox.installer.utils.logger_utils import InstallerLogger

from .base import BaseComponent

WAZUH_AGENT_PACKAGE = "wazuh-agent"
WAZUH_AGENT_UNIT = "wazuh-agent"


class WazuhAgentComponent(BaseComponent):
    name = COMPONENT_WAZUH_AGENT
    label = "Wazuh Agent"
    enable_key = KEY_ENV_WAZUH_ENABLED
    cli_flag = "wazuh"

    def packages(self, ctx) -> List[str]:
        return [WAZUH_AGENT_PACKAGE]

    def service_units(self, ctx) -> List[str]:
        return [WAZUH_AGENT_UNIT]

    def owned_config_paths(self, ctx) -> List[str]:
        if ctx.family == OSFamily.RHEL_LIKE:
            return [WAZUH_YUM_REPO_FILE]
        return [WAZUH_APT_SOURCE_LIST]

    def data_paths(self, ctx) -> List[str]:
        return [WAZUH_OSSEC_DIR]

    def access_endpoints(self, env) -> List[Tuple[str, str]]:
        settings = env.wazuh_agent
        return [("Wazuh Manager", f"{settings.manager}:{settings.port}/{settings.protocol.value}")]

    def install(self, ctx) -> None:
        settings = ctx.env.wazuh_agent
        InstallerLogger.info(f"Manager: {settings.manager or 'not set'}")
        InstallerLogger.info(f"Agent group: {settings.agent_group or 'default'}")

        if ctx.packages.package_is_installed(WAZUH_AGENT_PACKAGE):
            InstallerLogger.info("Wazuh agent is already installed; skipping package installation")
        else:
            self._add_repository(ctx)
            # the package's post-install script reads WAZUH_MANAGER
            ctx.packages.install_packages(
                self.packages(ctx),
                units=self.service_units(ctx),
                env={"WAZUH_MANAGER": settings.manager},
            )

        self._configure(ctx)
        self._register(ctx)
        self._start(ctx)

    def _add_repository(self, ctx) -> None:
        if ctx.family == OSFamily.RHEL_LIKE:
            ctx.packages.add_repository(
                "wazuh",
                WAZUH_GPG_KEY_URL,
                WAZUH_YUM_REPO_URL,
                title="Wazuh repository",
                repo_file=WAZUH_YUM_REPO_FILE,
            )
        else:
            ctx.packages.install_packages(["curl", "apt-transport-https", "gnupg"])
            ctx.packages.add_repository(
                "wazuh",
                WAZUH_GPG_KEY_URL,
                WAZUH_APT_REPO_URL,
                keyring=WAZUH_KEYRING,
                list_file=WAZUH_APT_SOURCE_LIST,
            )

    def _configure(self, ctx) -> None:
        settings = ctx.env.wazuh_agent
        ctx.gateway.edit_file(
            WAZUH_OSSEC_CONF,
            partial(
                set_xml_elements,
                block="server",
                elements={
                    "address": settings.manager,
                    "port": str(settings.port),
                    "protocol": settings.protocol.value,
                },
            ),
            backup_suffix=backup_suffix(timestamped=True),
        )

    def _register(self, ctx) -> None:
        settings = ctx.env.wazuh_agent
        keys = ctx.gateway.read_file(WAZUH_CLIENT_KEYS)
        if keys and keys.strip():
            InstallerLogger.info("Agent already registered; skipping enrollment")
            return

        command = [WAZUH_AGENT_AUTH_BIN, "-m", settings.manager, "-p", str(settings.registration_port)]
        if settings.agent_group:
            command += ["-G", settings.agent_group]
        if settings.registration_password:
            command += ["-P", settings.registration_password]

        with self.best_effort("agent registration (register manually with agent-auth)"):
            ctx.gateway.run(command, redact=[settings.registration_password], note="enroll with manager")
            InstallerLogger.info("Agent registered")

    def _start(self, ctx) -> None:
        ctx.services.daemon_reload()
        ctx.services.enable(WAZUH_AGENT_UNIT)
        ctx.services.restart(WAZUH_AGENT_UNIT)
        if ctx.services.is_active(WAZUH_AGENT_UNIT):
            InstallerLogger.info("Wazuh agent is running")
        else:
            self.degrade("wazuh-agent is not running after start")
