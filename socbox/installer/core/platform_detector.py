#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Classify the host into an OS family."""

import os
from dataclasses import dataclass

import distro

from socbox.socbox_constants import (
    OS_RELEASE_FILE,
    PLATFORM_DEBIAN_LIKE_IDS,
    PLATFORM_RHEL_LIKE_IDS,
)
from socbox.installer.configs.constants.enums import OSFamily
from socbox.installer.utils.exceptions import PlatformUndetectableError
from socbox.installer.utils.logger_utils import InstallerLogger


@dataclass(frozen=True)
class PlatformInfo:
    """Fine-grained identity plus the family every installer dispatches on."""

    os_id: str
    family: OSFamily
    version: str = ""
    codename: str = ""
    name: str = ""

    @property
    def major_version(self) -> str:
        return self.version.split(".")[0] if self.version else ""


def classify_os_id(os_id: str) -> OSFamily:
    """Map a fine-grained id to its family; unknown ids fall back to debian-like."""
    normalized = (os_id or "").strip().lower()
    if normalized in PLATFORM_DEBIAN_LIKE_IDS:
        return OSFamily.DEBIAN_LIKE
    if normalized in PLATFORM_RHEL_LIKE_IDS:
        return OSFamily.RHEL_LIKE
    InstallerLogger.warning(f"Unsupported OS '{os_id}'; attempting to continue as {OSFamily.DEBIAN_LIKE.value}")
    return OSFamily.DEBIAN_LIKE


def detect_platform(os_release_file: str = OS_RELEASE_FILE) -> PlatformInfo:
    """Read the host identity source and classify it.

    Raises:
        PlatformUndetectableError: the identity source does not exist
    """
    if not os.path.isfile(os_release_file):
        raise PlatformUndetectableError(os_release_file)

    # only the given identity source is consulted (no lsb_release, no uname)
    info = distro.LinuxDistribution(
        include_lsb=False,
        os_release_file=os_release_file,
        distro_release_file=os.devnull,
        include_uname=False,
    )
    os_id = info.id()
    platform_info = PlatformInfo(
        os_id=os_id,
        family=classify_os_id(os_id),
        version=info.version(),
        codename=info.codename(),
        name=info.name(),
    )
    InstallerLogger.info(
        f"Detected OS: {platform_info.name or os_id} {platform_info.version} ({platform_info.family.value} family)"
    )
    return platform_info
