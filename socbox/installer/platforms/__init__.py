#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Family-specific package management and service control."""

from socbox.installer.configs.constants.enums import OSFamily

from .base import BasePackageManager
from .debian import DebianPackageManager
from .rhel import RhelPackageManager
from .service_manager import ServiceManager


def get_package_manager(family: OSFamily, gateway) -> BasePackageManager:
    """Return the package manager matching the host's OS family."""
    if family == OSFamily.DEBIAN_LIKE:
        return DebianPackageManager(gateway)
    elif family == OSFamily.RHEL_LIKE:
        return RhelPackageManager(gateway)
    else:
        raise NotImplementedError(f"OS family '{family}' is not supported")


__all__ = [
    "BasePackageManager",
    "DebianPackageManager",
    "RhelPackageManager",
    "ServiceManager",
    "get_package_manager",
]
