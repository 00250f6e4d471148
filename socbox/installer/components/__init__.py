#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Component installers and the per-role registries built from them."""

from socbox.socbox_constants import InstallerRole
from socbox.installer.core.registry import ComponentRegistry

from .base import BaseComponent
from .clamav import ClamAVComponent
from .database import DatabaseComponent
from .firewall import FirewallComponent
from .nginx import NginxComponent
from .wazuh_agent import WazuhAgentComponent
from .wazuh_manager import WazuhManagerComponent
from .zabbix_agent import ZabbixAgentComponent
from .zabbix_server import ZabbixServerComponent


def server_components():
    return [
        DatabaseComponent(),
        WazuhManagerComponent(),
        ZabbixServerComponent(),
        NginxComponent(),
        FirewallComponent(),
    ]


def client_components():
    return [
        WazuhAgentComponent(),
        ZabbixAgentComponent(),
        ClamAVComponent(),
    ]


def build_server_registry() -> ComponentRegistry:
    return ComponentRegistry(c.descriptor() for c in server_components())


def build_client_registry() -> ComponentRegistry:
    return ComponentRegistry(c.descriptor() for c in client_components())


def build_registry(role: InstallerRole) -> ComponentRegistry:
    if role == InstallerRole.SERVER:
        return build_server_registry()
    return build_client_registry()


__all__ = [
    "BaseComponent",
    "ClamAVComponent",
    "DatabaseComponent",
    "FirewallComponent",
    "NginxComponent",
    "WazuhAgentComponent",
    "WazuhManagerComponent",
    "ZabbixAgentComponent",
    "ZabbixServerComponent",
    "build_registry",
    "build_server_registry",
    "build_client_registry",
]
