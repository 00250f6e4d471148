#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

from enum import Enum


###################################################################################################
PRODUCT_NAME = "SoC-in-a-Box"
VERSION = "1.0.0"


###################################################################################################
# which half of the stack a run provisions
class InstallerRole(Enum):
    SERVER = "server"
    CLIENT = "client"


###################################################################################################
PLATFORM_LINUX_ALMA = "almalinux"
PLATFORM_LINUX_CENTOS = "centos"
PLATFORM_LINUX_DEBIAN = "debian"
PLATFORM_LINUX_FEDORA = "fedora"
PLATFORM_LINUX_ORACLE = "ol"
PLATFORM_LINUX_ORACLE_NORMALIZED = "oracle"  # distro reports "ol" as "oracle"
PLATFORM_LINUX_RASPBIAN = "raspbian"
PLATFORM_LINUX_RHEL = "rhel"
PLATFORM_LINUX_ROCKY = "rocky"
PLATFORM_LINUX_UBUNTU = "ubuntu"

PLATFORM_DEBIAN_LIKE_IDS = (
    PLATFORM_LINUX_DEBIAN,
    PLATFORM_LINUX_UBUNTU,
    PLATFORM_LINUX_RASPBIAN,
)
PLATFORM_RHEL_LIKE_IDS = (
    PLATFORM_LINUX_RHEL,
    PLATFORM_LINUX_CENTOS,
    PLATFORM_LINUX_FEDORA,
    PLATFORM_LINUX_ROCKY,
    PLATFORM_LINUX_ALMA,
    PLATFORM_LINUX_ORACLE,
    PLATFORM_LINUX_ORACLE_NORMALIZED,
)

OS_RELEASE_FILE = "/etc/os-release"


###################################################################################################
# configuration source and run log locations
DEFAULT_ENV_FILE = ".env"

RUN_LOG_FILES = {
    InstallerRole.SERVER: "/var/log/soc-server-install.log",
    InstallerRole.CLIENT: "/var/log/soc-client-install.log",
}
UNINSTALL_LOG_FILES = {
    InstallerRole.SERVER: "/var/log/soc-server-uninstall.log",
    InstallerRole.CLIENT: "/var/log/soc-client-uninstall.log",
}


###################################################################################################
# server host sizing (warnings only)
SERVER_MIN_MEMORY_GB = 4
SERVER_MIN_DISK_GB = 50
