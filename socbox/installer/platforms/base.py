#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Base package manager for the supported OS families."""

import abc
from typing import Dict, Iterable, List, Optional

from socbox.installer.configs.constants.enums import OSFamily
from socbox.installer.utils.logger_utils import InstallerLogger


class BasePackageManager(abc.ABC):
    """Abstract base class for family-specific package managers.

    All commands go through the execution gateway, so a simulated run
    records them instead of executing them.
    """

    family: OSFamily

    def __init__(self, gateway):
        """Initialize the package manager.

        Args:
            gateway: ExecutionGateway used for every query and action
        """
        self.gateway = gateway
        self._repositories_refreshed = False

    @abc.abstractmethod
    def _get_install_package_command(self) -> List[str]:
        pass

    @abc.abstractmethod
    def _get_remove_package_command(self) -> List[str]:
        pass

    @abc.abstractmethod
    def _get_update_repo_command(self) -> List[str]:
        pass

    @abc.abstractmethod
    def _get_install_local_package_command(self) -> List[str]:
        pass

    def _get_install_env(self) -> Optional[Dict[str, str]]:
        return None

    @abc.abstractmethod
    def add_repository(self, name: str, key_url: str, repo_url: str, **kwargs) -> None:
        """Register a third-party package repository and its signing key."""
        pass

    def package_is_installed(self, package_name: str) -> bool:
        """Check if a package is installed."""
        return self.gateway.has_package(package_name)

    def refresh_repositories(self, force: bool = False) -> None:
        """Update package lists once per run (or again when forced)."""
        if self._repositories_refreshed and not force:
            return
        self.gateway.run(self._get_update_repo_command(), retry=1)
        self._repositories_refreshed = True

    def install_packages(
        self,
        packages: Iterable[str],
        units: Iterable[str] = (),
        env: Optional[Dict[str, str]] = None,
    ) -> List[str]:
        """Install whichever of ``packages`` are missing.

        Args:
            packages: package names
            units: systemd units the packages provide
            env: extra environment for the package manager

        Returns:
            the packages that were (or, simulated, would be) installed
        """
        packages = list(packages)
        packages_to_install = [p for p in packages if not self.package_is_installed(p)]
        if not packages_to_install:
            InstallerLogger.debug(f"All packages already installed: {packages}")
            return []

        self.refresh_repositories()
        install_env = dict(self._get_install_env() or {})
        install_env.update(env or {})
        self.gateway.run(
            self._get_install_package_command() + packages_to_install,
            env=install_env or None,
            retry=1,
            installs=packages_to_install,
            provides_units=units,
        )
        InstallerLogger.debug(f"Installed packages: {packages_to_install}")
        return packages_to_install

    def install_local_package(self, path: str, package_name: str) -> bool:
        """Install a downloaded package file unless ``package_name`` is already present."""
        if self.package_is_installed(package_name):
            return False
        self.gateway.run(self._get_install_local_package_command() + [path], installs=[package_name])
        self._repositories_refreshed = False
        return True

    def remove_packages(self, packages: Iterable[str]) -> List[str]:
        """Remove whichever of ``packages`` are installed."""
        packages_to_remove = [p for p in packages if self.package_is_installed(p)]
        if packages_to_remove:
            self.gateway.run(
                self._get_remove_package_command() + packages_to_remove,
                env=self._get_install_env(),
                removes=packages_to_remove,
            )
        return packages_to_remove

    def autoremove(self) -> None:
        """Remove orphaned dependencies (no-op where unsupported)."""
        pass
