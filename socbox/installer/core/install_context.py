#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

from dataclasses import dataclass, field
from typing import Optional

from socbox.socbox_constants import InstallerRole
from socbox.installer.core.environment import EnvironmentConfig
from socbox.installer.core.gateway import ExecutionGateway
from socbox.installer.core.platform_detector import PlatformInfo
from socbox.installer.platforms import BasePackageManager, ServiceManager, get_package_manager


@dataclass(frozen=True)
class InstallContext:
    """Everything a component needs for one run, passed explicitly to every call.

    The context is immutable; the gateway it carries owns the only mutable
    state of a run (its append-only action log).
    """

    role: InstallerRole
    env: EnvironmentConfig
    platform: PlatformInfo
    gateway: ExecutionGateway
    packages: BasePackageManager
    services: ServiceManager
    log_file: Optional[str] = field(default=None)

    @classmethod
    def create(
        cls,
        env: EnvironmentConfig,
        platform: PlatformInfo,
        gateway: ExecutionGateway,
        log_file: Optional[str] = None,
    ) -> "InstallContext":
        """Build a context with the package and service managers for ``platform``."""
        return cls(
            role=env.role,
            env=env,
            platform=platform,
            gateway=gateway,
            packages=get_package_manager(platform.family, gateway),
            services=ServiceManager(gateway),
            log_file=log_file,
        )

    @property
    def family(self):
        return self.platform.family

    @property
    def simulated(self) -> bool:
        return self.gateway.simulated
