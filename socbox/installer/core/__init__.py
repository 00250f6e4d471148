#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Provisioning engine: configuration, platform, gateway, registry and orchestration."""

from .environment import EnvironmentConfig, load_environment
from .gateway import Action, ActionResult, ExecutionGateway
from .install_context import InstallContext
from .orchestrator import ComponentResult, Orchestrator, RunReport
from .platform_detector import PlatformInfo, detect_platform
from .registry import ComponentDescriptor, ComponentRegistry
from .uninstaller import Uninstaller

__all__ = [
    "Action",
    "ActionResult",
    "ComponentDescriptor",
    "ComponentRegistry",
    "ComponentResult",
    "EnvironmentConfig",
    "ExecutionGateway",
    "InstallContext",
    "Orchestrator",
    "PlatformInfo",
    "RunReport",
    "Uninstaller",
    "detect_platform",
    "load_environment",
]
