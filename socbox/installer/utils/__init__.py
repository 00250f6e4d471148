#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Utility helpers in roughly three categories:

1. Logging and run summaries shared by the install and uninstall tools
2. Create-or-update helpers for product configuration files
3. The exception hierarchy
"""

from .logger_utils import InstallerLogger, SkipReasons

from .exceptions import (
    ActionError,
    ComponentDegradedError,
    ComponentFatalError,
    ConfigError,
    PlatformError,
    PrivilegeError,
    SocBoxError,
)

__all__ = [
    "InstallerLogger",
    "SkipReasons",
    "ActionError",
    "ComponentDegradedError",
    "ComponentFatalError",
    "ConfigError",
    "PlatformError",
    "PrivilegeError",
    "SocBoxError",
]
