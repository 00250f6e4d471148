#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""ClamAV antivirus with a scheduled scan."""

import os
import shlex
from typing import List, Tuple

from socbox.installer.configs.constants.config_env_var_keys import KEY_ENV_CLAMAV_ENABLED
from socbox.installer.configs.constants.constants import (
    CLAMAV_CONFIG_FILES,
    CLAMAV_CRON_FILE,
    CLAMAV_DEFINITIONS_DIR,
    CLAMAV_SCAN_SOCKET,
    COMPONENT_CLAMAV,
)
from socbox.installer.configs.constants.enums import OSFamily
from socbox.installer.utils.config_file_utils import comment_out_lines, set_directives
from socbox.installer.utils.logger_utils import InstallerLogger

from .base import BaseComponent

FRESHCLAM_UNIT = "clamav-freshclam"
SCANNER_UNITS = ["clamd@scan", "clamav-daemon"]
CLAMD_SCAN_CONF = "/etc/clamd.d/scan.conf"


def render_cron(settings) -> str:
    """/etc/cron.d entry running clamscan over the configured paths."""
    paths = " ".join(shlex.quote(p) for p in settings.scan_paths)
    return "\n".join(
        [
            "# ClamAV scheduled scan - SoC-in-a-Box",
            "SHELL=/bin/bash",
            "PATH=/usr/local/sbin:/usr/local/bin:/sbin:/bin:/usr/sbin:/usr/bin",
            "",
            f"{settings.schedule} root /usr/bin/clamscan -r {paths} --quiet --infected "
            f"--log={shlex.quote(settings.log_file)} 2>&1 | logger -t clamav-scan",
            "",
        ]
    )


def comment_out_example(text: str) -> str:
    return comment_out_lines(text, "Example")


def fix_clamd_config(text: str) -> str:
    text = comment_out_example(text)
    return set_directives(text, {"LocalSocket": CLAMAV_SCAN_SOCKET}, separator=" ")


class ClamAVComponent(BaseComponent):
    name = COMPONENT_CLAMAV
    label = "ClamAV"
    enable_key = KEY_ENV_CLAMAV_ENABLED
    cli_flag = "clamav"

    def packages(self, ctx) -> List[str]:
        if ctx.family == OSFamily.RHEL_LIKE:
            return ["clamav", "clamav-update", "clamd"]
        return ["clamav", "clamav-daemon", "clamav-freshclam"]

    def service_units(self, ctx) -> List[str]:
        if ctx.family == OSFamily.RHEL_LIKE:
            return [FRESHCLAM_UNIT, "clamd@scan"]
        return [FRESHCLAM_UNIT, "clamav-daemon"]

    def owned_config_paths(self, ctx) -> List[str]:
        return [CLAMAV_CRON_FILE]

    def data_paths(self, ctx) -> List[str]:
        return [CLAMAV_DEFINITIONS_DIR]

    def access_endpoints(self, env) -> List[Tuple[str, str]]:
        return [("Scan schedule", f"{env.clamav.schedule} ({', '.join(env.clamav.scan_paths)})")]

    def install(self, ctx) -> None:
        settings = ctx.env.clamav
        InstallerLogger.info(f"Scan paths: {','.join(settings.scan_paths)}")
        InstallerLogger.info(f"Schedule: {settings.schedule}")

        if ctx.packages.package_is_installed("clamav"):
            InstallerLogger.info("ClamAV is already installed; updating configuration only")
        else:
            if ctx.family == OSFamily.RHEL_LIKE:
                ctx.packages.install_packages(["epel-release"])
            ctx.packages.install_packages(self.packages(ctx), units=self.service_units(ctx))

        self._configure(ctx)
        self._update_definitions(ctx)

        ctx.gateway.write_file(CLAMAV_CRON_FILE, render_cron(settings), mode=0o644)
        InstallerLogger.info(f"Scheduled scan configured: {settings.schedule}")

        self._start(ctx)

    def _configure(self, ctx) -> None:
        for path in CLAMAV_CONFIG_FILES[ctx.family]:
            # rhel packages ship these with an Example line; debconf writes the debian one without it
            if ctx.family == OSFamily.DEBIAN_LIKE and not ctx.gateway.path_exists(path):
                continue
            transform = fix_clamd_config if path == CLAMD_SCAN_CONF else comment_out_example
            with self.best_effort(f"configure {path}"):
                ctx.gateway.edit_file(path, transform, require_existing=True)

        log_dir = os.path.dirname(ctx.env.clamav.log_file)
        with self.best_effort("scan log directory"):
            ctx.gateway.make_dirs(log_dir, owner="clamav:clamav")

    def _update_definitions(self, ctx) -> None:
        InstallerLogger.info("Updating virus definitions (this may take a moment)")
        # freshclam refuses to run while the update daemon holds its lock
        ctx.services.stop_if_active(FRESHCLAM_UNIT)
        with self.best_effort("definition refresh (will retry automatically later)"):
            ctx.gateway.run(["freshclam", "--quiet"], note="refresh virus definitions")

    def _start(self, ctx) -> None:
        ctx.services.daemon_reload()
        if ctx.services.exists(FRESHCLAM_UNIT):
            ctx.services.enable_and_start(FRESHCLAM_UNIT)
            InstallerLogger.info(f"{FRESHCLAM_UNIT} service enabled")
        scanners = ctx.services.first_existing(SCANNER_UNITS)
        if scanners:
            ctx.services.enable_and_start(scanners[0])
            InstallerLogger.info(f"{scanners[0]} service enabled")
