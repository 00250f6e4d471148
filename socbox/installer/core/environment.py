#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Typed, immutable environment configuration and its loader.

The configuration source is a flat ``KEY=value`` file read with python-dotenv.
``load_environment`` turns it into an ``EnvironmentConfig`` in one validating
pass; nothing downstream ever sees an unvalidated string.
"""

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from dotenv import dotenv_values

from socbox.socbox_constants import InstallerRole
from socbox.installer.configs.constants.config_env_var_keys import *
from socbox.installer.configs.constants.constants import (
    DEFAULT_CLAMAV_LOG_FILE,
    DEFAULT_CLAMAV_SCAN_PATHS,
    DEFAULT_CLAMAV_SCHEDULE,
    DEFAULT_WAZUH_API_PORT,
    DEFAULT_WAZUH_DASHBOARD_PORT,
    DEFAULT_WAZUH_INDEXER_PORT,
    DEFAULT_WAZUH_LISTEN_PORT,
    DEFAULT_WAZUH_REGISTRATION_PORT,
    DEFAULT_ZABBIX_FRONTEND_PORT,
    DEFAULT_ZABBIX_SERVER_PORT,
    REQUIRED_ENV_KEYS,
)
from socbox.installer.configs.constants.enums import DatabaseType, WazuhProtocol
from socbox.installer.core.validation import (
    check_placeholder_credentials,
    check_required_keys,
    get_str,
    parse_binary_switch,
    parse_choice,
    parse_cron_schedule,
    parse_flag,
    parse_identifier,
    parse_path_list,
    parse_port,
)
from socbox.installer.utils.exceptions import MissingSourceError


@dataclass(frozen=True)
class DatabaseSettings:
    db_type: DatabaseType = DatabaseType.MARIADB
    root_password: str = ""
    host: str = "localhost"
    port: Optional[int] = None


@dataclass(frozen=True)
class WazuhManagerSettings:
    enabled: bool = False
    api_user: str = "wazuh-wui"
    api_password: str = ""
    indexer_admin_password: str = ""
    listen_port: int = DEFAULT_WAZUH_LISTEN_PORT
    registration_port: int = DEFAULT_WAZUH_REGISTRATION_PORT
    api_port: int = DEFAULT_WAZUH_API_PORT
    indexer_port: int = DEFAULT_WAZUH_INDEXER_PORT
    dashboard_port: int = DEFAULT_WAZUH_DASHBOARD_PORT


@dataclass(frozen=True)
class ZabbixServerSettings:
    enabled: bool = False
    db_name: str = "zabbix"
    db_user: str = "zabbix"
    db_password: str = ""
    timezone: str = "UTC"
    server_port: int = DEFAULT_ZABBIX_SERVER_PORT
    frontend_port: int = DEFAULT_ZABBIX_FRONTEND_PORT


@dataclass(frozen=True)
class NginxSettings:
    enabled: bool = False
    enable_tls: bool = False
    letsencrypt_email: str = ""
    tls_cert_path: str = ""
    tls_key_path: str = ""


@dataclass(frozen=True)
class FirewallSettings:
    enabled: bool = False


@dataclass(frozen=True)
class WazuhAgentSettings:
    enabled: bool = False
    manager: str = ""
    port: int = DEFAULT_WAZUH_LISTEN_PORT
    registration_port: int = DEFAULT_WAZUH_REGISTRATION_PORT
    protocol: WazuhProtocol = WazuhProtocol.TCP
    agent_group: str = ""
    registration_password: str = ""


@dataclass(frozen=True)
class ZabbixAgentSettings:
    enabled: bool = False
    server: str = ""
    server_active: str = ""
    host_metadata: str = "linux"
    host_group: str = ""
    listen_port: Optional[int] = None
    enable_remote_commands: bool = False


@dataclass(frozen=True)
class ClamAVSettings:
    enabled: bool = False
    scan_paths: Tuple[str, ...] = DEFAULT_CLAMAV_SCAN_PATHS
    schedule: str = DEFAULT_CLAMAV_SCHEDULE
    log_file: str = DEFAULT_CLAMAV_LOG_FILE


@dataclass(frozen=True)
class EnvironmentConfig:
    """Validated settings for one run. Never mutated after loading."""

    role: InstallerRole
    source: str = ""
    site_name: str = ""
    environment: str = "production"
    server_hostname: str = ""
    server_domain: str = ""
    server_ip: str = "127.0.0.1"
    soc_ip: str = ""
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    wazuh_manager: WazuhManagerSettings = field(default_factory=WazuhManagerSettings)
    zabbix_server: ZabbixServerSettings = field(default_factory=ZabbixServerSettings)
    nginx: NginxSettings = field(default_factory=NginxSettings)
    firewall: FirewallSettings = field(default_factory=FirewallSettings)
    wazuh_agent: WazuhAgentSettings = field(default_factory=WazuhAgentSettings)
    zabbix_agent: ZabbixAgentSettings = field(default_factory=ZabbixAgentSettings)
    clamav: ClamAVSettings = field(default_factory=ClamAVSettings)
    flags: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType({}))
    raw: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def flag(self, key: str) -> bool:
        """Value of a boolean switch such as WAZUH_ENABLED (unset means false)."""
        return bool(self.flags.get(key, False))

    @property
    def public_host(self) -> str:
        """Name used when printing access URLs."""
        return self.server_domain or self.server_hostname or self.server_ip

    @classmethod
    def empty(cls, role: InstallerRole) -> "EnvironmentConfig":
        """Defaults-only configuration, used when removal runs without a source."""
        return cls(role=role)


def read_environment_file(source: str) -> Dict[str, str]:
    """Read a KEY=value file; keys without a value map to an empty string."""
    if not source or not os.path.isfile(source):
        raise MissingSourceError(source)
    return {k: ("" if v is None else str(v)) for k, v in dotenv_values(source).items()}


def _consumed_credentials(role: InstallerRole, flags: Mapping[str, bool]) -> Tuple[str, ...]:
    if role == InstallerRole.SERVER:
        keys = [KEY_ENV_DB_ROOT_PASSWORD]
        if flags.get(KEY_ENV_ZABBIX_ENABLED):
            keys += [KEY_ENV_ZABBIX_DB_PASSWORD]
        if flags.get(KEY_ENV_WAZUH_ENABLED):
            keys += [KEY_ENV_WAZUH_API_PASSWORD, KEY_ENV_WAZUH_INDEXER_ADMIN_PASSWORD]
        return tuple(keys)
    if flags.get(KEY_ENV_WAZUH_ENABLED):
        return (KEY_ENV_WAZUH_REGISTRATION_PASSWORD,)
    return ()


def _conditionally_required(role: InstallerRole, flags: Mapping[str, bool]) -> Tuple[str, ...]:
    if role == InstallerRole.SERVER and flags.get(KEY_ENV_ZABBIX_ENABLED):
        return (KEY_ENV_ZABBIX_DB_PASSWORD,)
    return ()


def parse_environment(values: Mapping[str, str], role: InstallerRole, source: str = "") -> EnvironmentConfig:
    """Build the typed configuration; raises InvalidSettingValueError on malformed values."""
    flags = MappingProxyType({key: parse_flag(values, key) for key in ENV_FLAG_KEYS})

    db_type = parse_choice(values, KEY_ENV_DB_TYPE, DatabaseType.parse, DatabaseType.MARIADB)
    database = DatabaseSettings(
        db_type=db_type,
        root_password=get_str(values, KEY_ENV_DB_ROOT_PASSWORD),
        host=get_str(values, KEY_ENV_DB_HOST, "localhost"),
        port=parse_port(values, KEY_ENV_DB_PORT, 3306 if db_type == DatabaseType.MARIADB else 5432),
    )
    wazuh_manager = WazuhManagerSettings(
        enabled=flags[KEY_ENV_WAZUH_ENABLED],
        api_user=get_str(values, KEY_ENV_WAZUH_API_USER, "wazuh-wui"),
        api_password=get_str(values, KEY_ENV_WAZUH_API_PASSWORD),
        indexer_admin_password=get_str(values, KEY_ENV_WAZUH_INDEXER_ADMIN_PASSWORD),
        listen_port=parse_port(values, KEY_ENV_WAZUH_LISTEN_PORT, DEFAULT_WAZUH_LISTEN_PORT),
        registration_port=parse_port(values, KEY_ENV_WAZUH_REGISTRATION_PORT, DEFAULT_WAZUH_REGISTRATION_PORT),
        api_port=parse_port(values, KEY_ENV_WAZUH_API_PORT, DEFAULT_WAZUH_API_PORT),
        indexer_port=parse_port(values, KEY_ENV_WAZUH_INDEXER_PORT, DEFAULT_WAZUH_INDEXER_PORT),
        dashboard_port=parse_port(values, KEY_ENV_WAZUH_DASHBOARD_PORT, DEFAULT_WAZUH_DASHBOARD_PORT),
    )
    zabbix_server = ZabbixServerSettings(
        enabled=flags[KEY_ENV_ZABBIX_ENABLED],
        db_name=parse_identifier(values, KEY_ENV_ZABBIX_DB_NAME, "zabbix"),
        db_user=parse_identifier(values, KEY_ENV_ZABBIX_DB_USER, "zabbix"),
        db_password=get_str(values, KEY_ENV_ZABBIX_DB_PASSWORD),
        timezone=get_str(values, KEY_ENV_ZABBIX_TIMEZONE, "UTC"),
        server_port=parse_port(values, KEY_ENV_ZABBIX_SERVER_PORT, DEFAULT_ZABBIX_SERVER_PORT),
        frontend_port=parse_port(values, KEY_ENV_ZABBIX_FRONTEND_PORT, DEFAULT_ZABBIX_FRONTEND_PORT),
    )
    nginx = NginxSettings(
        enabled=flags[KEY_ENV_NGINX_ENABLED],
        enable_tls=flags[KEY_ENV_ENABLE_TLS],
        letsencrypt_email=get_str(values, KEY_ENV_LETSENCRYPT_EMAIL),
        tls_cert_path=get_str(values, KEY_ENV_TLS_CERT_PATH),
        tls_key_path=get_str(values, KEY_ENV_TLS_KEY_PATH),
    )

    soc_ip = get_str(values, KEY_ENV_SOC_IP)
    wazuh_agent = WazuhAgentSettings(
        enabled=flags[KEY_ENV_WAZUH_ENABLED],
        manager=get_str(values, KEY_ENV_WAZUH_MANAGER, soc_ip),
        port=parse_port(values, KEY_ENV_WAZUH_PORT, DEFAULT_WAZUH_LISTEN_PORT),
        registration_port=parse_port(values, KEY_ENV_WAZUH_REGISTRATION_PORT, DEFAULT_WAZUH_REGISTRATION_PORT),
        protocol=parse_choice(values, KEY_ENV_WAZUH_PROTOCOL, WazuhProtocol, WazuhProtocol.TCP),
        agent_group=get_str(values, KEY_ENV_WAZUH_AGENT_GROUP),
        registration_password=get_str(values, KEY_ENV_WAZUH_REGISTRATION_PASSWORD),
    )
    zabbix_agent_server = get_str(values, KEY_ENV_ZABBIX_SERVER, soc_ip)
    zabbix_agent = ZabbixAgentSettings(
        enabled=flags[KEY_ENV_ZABBIX_ENABLED],
        server=zabbix_agent_server,
        server_active=get_str(values, KEY_ENV_ZABBIX_SERVER_ACTIVE, zabbix_agent_server),
        host_metadata=get_str(values, KEY_ENV_ZABBIX_HOST_METADATA, "linux"),
        host_group=get_str(values, KEY_ENV_ZABBIX_HOST_GROUP),
        listen_port=parse_port(values, KEY_ENV_ZABBIX_LISTEN_PORT, None),
        enable_remote_commands=parse_binary_switch(values, KEY_ENV_ZABBIX_ENABLE_REMOTE_COMMANDS),
    )
    clamav = ClamAVSettings(
        enabled=flags[KEY_ENV_CLAMAV_ENABLED],
        scan_paths=parse_path_list(values, KEY_ENV_CLAMAV_SCAN_PATHS, DEFAULT_CLAMAV_SCAN_PATHS),
        schedule=parse_cron_schedule(values, KEY_ENV_CLAMAV_SCHEDULE, DEFAULT_CLAMAV_SCHEDULE),
        log_file=get_str(values, KEY_ENV_CLAMAV_LOG_FILE, DEFAULT_CLAMAV_LOG_FILE),
    )

    server_hostname = get_str(values, KEY_ENV_SERVER_HOSTNAME)
    return EnvironmentConfig(
        role=role,
        source=source,
        site_name=get_str(values, KEY_ENV_SITE_NAME),
        environment=get_str(values, KEY_ENV_ENVIRONMENT, "production"),
        server_hostname=server_hostname,
        server_domain=get_str(values, KEY_ENV_SERVER_DOMAIN, server_hostname),
        server_ip=get_str(values, KEY_ENV_SERVER_IP, "127.0.0.1"),
        soc_ip=soc_ip,
        database=database,
        wazuh_manager=wazuh_manager,
        zabbix_server=zabbix_server,
        nginx=nginx,
        firewall=FirewallSettings(enabled=flags[KEY_ENV_ENABLE_FIREWALL]),
        wazuh_agent=wazuh_agent,
        zabbix_agent=zabbix_agent,
        clamav=clamav,
        flags=flags,
        raw=MappingProxyType(dict(values)),
    )


def load_environment(source: str, role: InstallerRole, validate: bool = True) -> EnvironmentConfig:
    """Load and validate the configuration for ``role``.

    Args:
        source: path of the KEY=value configuration file
        role: server or client; selects the required keys
        validate: when False only value syntax is checked (no required keys,
            no placeholder check); used by removal runs

    Returns:
        EnvironmentConfig

    Raises:
        MissingSourceError, MissingRequiredKeyError, InvalidSettingValueError,
        UnsafeDefaultValueError (first violation only)
    """
    values = read_environment_file(source)
    if validate:
        check_required_keys(values, REQUIRED_ENV_KEYS[role])

    env = parse_environment(values, role, source=source)

    if validate:
        check_required_keys(values, _conditionally_required(role, env.flags))
        check_placeholder_credentials(values, _consumed_credentials(role, env.flags))
    return env
