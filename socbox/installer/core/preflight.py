#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Preconditions checked before any component runs.

Fatal preconditions are evaluated in a fixed order and the first failure
aborts the run:

1. configuration (MissingSourceError, MissingRequiredKeyError, ...)
2. platform (PlatformUndetectableError)
3. privilege (PrivilegeRequiredError; live runs only)

Host sizing (server) and manager reachability (client) are advisory and
only ever produce warnings.
"""

import os
import shutil
from typing import Tuple

from socbox.socbox_constants import (
    OS_RELEASE_FILE,
    SERVER_MIN_DISK_GB,
    SERVER_MIN_MEMORY_GB,
    InstallerRole,
)
from socbox.socbox_utils import total_memory_gb
from socbox.installer.configs.constants.enums import ExecutionMode
from socbox.installer.core.environment import EnvironmentConfig, load_environment
from socbox.installer.core.platform_detector import PlatformInfo, detect_platform
from socbox.installer.utils.exceptions import PrivilegeRequiredError
from socbox.installer.utils.logger_utils import InstallerLogger


def check_privilege(mode: ExecutionMode) -> None:
    """Require root for live runs; a dry run only warns."""
    if os.geteuid() == 0:
        return
    if mode.is_simulated():
        InstallerLogger.warning("Not running as root; continuing because this is a dry run")
        return
    raise PrivilegeRequiredError()


def load_removal_configuration(env_file: str, role: InstallerRole) -> EnvironmentConfig:
    """Removal does not need a complete configuration; use it when present."""
    if env_file and os.path.isfile(env_file):
        return load_environment(env_file, role, validate=False)
    InstallerLogger.info(f"No configuration at {env_file}; using defaults for removal")
    return EnvironmentConfig.empty(role)


def run_preflight(
    env_file: str,
    role: InstallerRole,
    mode: ExecutionMode,
    os_release_file: str = OS_RELEASE_FILE,
    removal: bool = False,
) -> Tuple[EnvironmentConfig, PlatformInfo]:
    """Check configuration, platform and privilege, in that order.

    Args:
        env_file: configuration source
        role: server or client
        mode: execution mode of this run
        os_release_file: host identity source
        removal: relax configuration requirements for uninstall runs

    Returns:
        (EnvironmentConfig, PlatformInfo)
    """
    InstallerLogger.step("Running pre-flight checks")
    if removal:
        env = load_removal_configuration(env_file, role)
    else:
        env = load_environment(env_file, role)
        InstallerLogger.info(f"Loaded configuration from {env_file}")
    platform_info = detect_platform(os_release_file)
    check_privilege(mode)
    return env, platform_info


def check_system_requirements(min_memory_gb: float = SERVER_MIN_MEMORY_GB, min_disk_gb: float = SERVER_MIN_DISK_GB):
    """Warn when the server host looks undersized."""
    memory_gb = total_memory_gb()
    if 0 < memory_gb < min_memory_gb:
        InstallerLogger.warning(f"Less than {min_memory_gb}GB RAM detected ({memory_gb:.1f}GB); performance may be affected")
    try:
        free_gb = shutil.disk_usage("/").free / (1024.0**3)
    except OSError:
        free_gb = None
    if free_gb is not None and free_gb < min_disk_gb:
        InstallerLogger.warning(f"Less than {min_disk_gb}GB free disk space ({free_gb:.1f}GB); consider adding storage")


def check_soc_reachability(gateway, address: str) -> bool:
    """Ping the SOC server once; unreachable only warns."""
    if not address:
        return False
    returncode, _ = gateway.probe(["ping", "-c", "1", "-W", "3", address])
    if returncode != 0:
        InstallerLogger.warning(f"Cannot reach SOC server at {address}; agents may fail to connect")
        return False
    InstallerLogger.info(f"SOC server {address} is reachable")
    return True
