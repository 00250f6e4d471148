#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""dnf/yum/rpm package management for rhel-like hosts."""

from typing import List

from socbox.installer.configs.constants.enums import OSFamily

from .base import BasePackageManager


class RhelPackageManager(BasePackageManager):
    family = OSFamily.RHEL_LIKE

    def __init__(self, gateway):
        super().__init__(gateway)
        self.tool = 'dnf' if gateway.has_command('dnf') else 'yum'

    def _get_install_package_command(self) -> List[str]:
        return [self.tool, '-y', 'install']

    def _get_remove_package_command(self) -> List[str]:
        return [self.tool, '-y', 'remove']

    def _get_update_repo_command(self) -> List[str]:
        return [self.tool, '-y', 'makecache']

    def _get_install_local_package_command(self) -> List[str]:
        return ['rpm', '-Uvh']

    def add_repository(self, name: str, key_url: str, repo_url: str, **kwargs) -> None:
        """Add a signed yum repository.

        Args:
            name: repository id (used for the .repo file)
            key_url: URL of the GPG signing key
            repo_url: base URL of the repository
            title: human-readable repository name
        """
        title = kwargs.get("title", f"{name} repository")
        repo_file = kwargs.get("repo_file", f"/etc/yum.repos.d/{name}.repo")

        self.gateway.run(['rpm', '--import', key_url])
        result = self.gateway.write_file(
            repo_file,
            "\n".join(
                [
                    f"[{name}]",
                    "gpgcheck=1",
                    f"gpgkey={key_url}",
                    "enabled=1",
                    f"name={title}",
                    f"baseurl={repo_url}",
                    "protect=1",
                    "",
                ]
            ),
            mode=0o644,
        )
        if result.changed:
            self.refresh_repositories(force=True)
