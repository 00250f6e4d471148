#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""The zabbix-release package that registers the official Zabbix repository."""

import os
from typing import List

from socbox.socbox_constants import PLATFORM_LINUX_UBUNTU
from socbox.installer.configs.constants.constants import (
    SOCBOX_WORK_DIR,
    ZABBIX_APT_RELEASE_URL,
    ZABBIX_RELEASE_PACKAGE,
    ZABBIX_RPM_RELEASE_URL,
    ZABBIX_VERSION,
)
from socbox.installer.configs.constants.enums import OSFamily
from socbox.installer.utils.exceptions import ComponentDegradedError
from socbox.installer.utils.logger_utils import InstallerLogger

DEFAULT_RHEL_MAJOR = "9"


def release_package_urls(platform) -> List[str]:
    """Candidate release package URLs for ``platform``, most specific first."""
    if platform.family == OSFamily.RHEL_LIKE:
        major = platform.major_version or DEFAULT_RHEL_MAJOR
        return [ZABBIX_RPM_RELEASE_URL.format(version=ZABBIX_VERSION, major=major)]

    debian_url = ZABBIX_APT_RELEASE_URL.format(
        version=ZABBIX_VERSION, distro="debian", release=platform.major_version
    )
    ubuntu_url = ZABBIX_APT_RELEASE_URL.format(version=ZABBIX_VERSION, distro="ubuntu", release=platform.version)
    if platform.os_id == PLATFORM_LINUX_UBUNTU:
        return [ubuntu_url, debian_url]
    return [debian_url, ubuntu_url]


def install_release_package(ctx) -> bool:
    """Install zabbix-release unless present.

    Returns:
        True if the package was (or would be) installed

    Raises:
        ComponentDegradedError: no candidate package could be fetched
    """
    if ctx.packages.package_is_installed(ZABBIX_RELEASE_PACKAGE):
        InstallerLogger.debug(f"{ZABBIX_RELEASE_PACKAGE} already installed")
        return False

    urls = release_package_urls(ctx.platform)
    if ctx.family == OSFamily.RHEL_LIKE:
        # rpm fetches the URL itself
        result = ctx.gateway.run(
            ["rpm", "-Uvh", urls[0]], check=False, installs=[ZABBIX_RELEASE_PACKAGE]
        )
        if not result.ok:
            raise ComponentDegradedError(ZABBIX_RELEASE_PACKAGE, [f"could not install {urls[0]}"])
        ctx.packages.refresh_repositories(force=True)
        return True

    package_file = os.path.join(SOCBOX_WORK_DIR, "zabbix-release.deb")
    ctx.gateway.make_dirs(SOCBOX_WORK_DIR, mode=0o700)
    for url in urls:
        if ctx.gateway.download(url, package_file, check=False).ok:
            break
        InstallerLogger.debug(f"Zabbix release package not available at {url}")
    else:
        raise ComponentDegradedError(ZABBIX_RELEASE_PACKAGE, ["could not download the Zabbix release package"])

    ctx.packages.install_local_package(package_file, ZABBIX_RELEASE_PACKAGE)
    ctx.gateway.remove_path(package_file)
    return True
