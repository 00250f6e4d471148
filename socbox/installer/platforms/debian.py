#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""apt/dpkg package management for debian-like hosts."""

import os
from typing import Dict, List, Optional

from socbox.installer.configs.constants.enums import OSFamily
from socbox.installer.configs.constants.constants import SOCBOX_WORK_DIR

from .base import BasePackageManager


class DebianPackageManager(BasePackageManager):
    family = OSFamily.DEBIAN_LIKE

    def _get_install_package_command(self) -> List[str]:
        return ['apt-get', 'install', '-y', '-qq']

    def _get_remove_package_command(self) -> List[str]:
        return ['apt-get', 'remove', '-y', '-qq']

    def _get_update_repo_command(self) -> List[str]:
        return ['apt-get', 'update', '-y', '-qq']

    def _get_install_local_package_command(self) -> List[str]:
        return ['dpkg', '-i']

    def _get_install_env(self) -> Optional[Dict[str, str]]:
        return {"DEBIAN_FRONTEND": "noninteractive"}

    def add_repository(self, name: str, key_url: str, repo_url: str, **kwargs) -> None:
        """Add a signed apt source.

        Args:
            name: repository name (used for the list file)
            key_url: URL of the ASCII-armored signing key
            repo_url: base URL of the repository
            keyring: destination of the dearmored key
            suite: distribution suite (e.g. "stable")
            components: repository components (e.g. "main")
        """
        keyring = kwargs.get("keyring", f"/usr/share/keyrings/{name}-archive-keyring.gpg")
        suite = kwargs.get("suite", "stable")
        components = kwargs.get("components", "main")
        list_file = kwargs.get("list_file", f"/etc/apt/sources.list.d/{name}.list")

        if not self.gateway.path_exists(keyring):
            armored_key = os.path.join(SOCBOX_WORK_DIR, f"{name}.asc")
            self.gateway.make_dirs(SOCBOX_WORK_DIR, mode=0o700)
            self.gateway.download(key_url, armored_key)
            self.gateway.run(['gpg', '--batch', '--yes', '--dearmor', '--output', keyring, armored_key])
            self.gateway.run(['chmod', '644', keyring])

        result = self.gateway.write_file(
            list_file,
            f"deb [signed-by={keyring}] {repo_url} {suite} {components}\n",
            mode=0o644,
        )
        if result.changed:
            self.refresh_repositories(force=True)

    def autoremove(self) -> None:
        self.gateway.run(['apt-get', 'autoremove', '-y', '-qq'], env=self._get_install_env(), check=False)
