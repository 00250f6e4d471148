#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""SoC-in-a-Box server and client uninstallers."""

import argparse
import sys
import traceback
from typing import List, Optional

from socbox.socbox_constants import PRODUCT_NAME, UNINSTALL_LOG_FILES, InstallerRole
from socbox.install import configure_logging, print_banner, tool_name
from socbox.installer.args.basic_args import add_basic_args
from socbox.installer.args.uninstall_args import add_uninstall_args, selected_components
from socbox.installer.components import build_registry
from socbox.installer.configs.constants.constants import SELECT_ALL
from socbox.installer.configs.constants.enums import ExecutionMode
from socbox.installer.core.gateway import ExecutionGateway
from socbox.installer.core.install_context import InstallContext
from socbox.installer.core.preflight import run_preflight
from socbox.installer.core.uninstaller import Uninstaller
from socbox.installer.utils.exceptions import ConfigError, PlatformError, PrivilegeError, RegistryError
from socbox.installer.utils.logger_utils import InstallerLogger
from socbox.installer.utils.summary_utils import build_run_summary


def run_uninstall(role: InstallerRole, argv: Optional[List[str]] = None) -> int:
    """Remove the selected components of ``role``; returns the process exit code."""
    try:
        registry = build_registry(role)
    except RegistryError as e:
        InstallerLogger.error(str(e))
        return 1

    parser = argparse.ArgumentParser(description=f"{PRODUCT_NAME} {tool_name(role, 'Uninstaller')}")
    add_basic_args(parser, tool_name(role, "Uninstaller"))
    add_uninstall_args(parser, registry)
    parsed_args = parser.parse_args(argv)

    mode = ExecutionMode.SIMULATE if parsed_args.dryRun else ExecutionMode.LIVE
    log_file = configure_logging(parsed_args, mode, UNINSTALL_LOG_FILES[role])

    print_banner(tool_name(role, "Uninstaller"))
    if mode.is_simulated():
        InstallerLogger.warning("DRY-RUN MODE: No changes will be made")

    try:
        env, platform_info = run_preflight(parsed_args.envFile, role, mode, removal=True)
    except (ConfigError, PlatformError, PrivilegeError) as e:
        InstallerLogger.error(str(e))
        return 1

    gateway = ExecutionGateway(mode)
    try:
        ctx = InstallContext.create(env, platform_info, gateway, log_file=log_file)
    except NotImplementedError as e:
        InstallerLogger.error(str(e))
        return 1

    uninstaller = Uninstaller(registry)
    selection = selected_components(parsed_args, registry)
    InstallerLogger.step(
        f"Removing {'all components' if selection == SELECT_ALL else ', '.join(selection)} from this {role.value}"
    )
    try:
        report = uninstaller.remove(selection, ctx)
    except KeyboardInterrupt:
        InstallerLogger.error("Interrupted; re-run the uninstaller to continue")
        return 1

    # only after a complete removal; a halted walk leaves dependencies in use
    if not mode.is_simulated() and selection == SELECT_ALL and report.exit_code == 0:
        ctx.packages.autoremove()

    for line in build_run_summary(
        report,
        registry,
        env,
        platform=platform_info,
        log_file=log_file,
        planned_actions=gateway.describe_actions() if mode.is_simulated() else None,
        title="Uninstall Summary",
        removal=True,
    ):
        print(line)

    if report.exit_code == 0:
        InstallerLogger.info(f"{mode.log_prefix()}Uninstall complete")
    else:
        InstallerLogger.error("Uninstall failed; see the messages above")
    return report.exit_code


def _main(role: InstallerRole) -> None:
    try:
        sys.exit(run_uninstall(role))
    except SystemExit:
        raise
    except Exception as e:
        InstallerLogger.error(f"Unexpected error: {e}")
        InstallerLogger.debug(traceback.format_exc())
        sys.exit(1)


def server_main():
    _main(InstallerRole.SERVER)


def client_main():
    _main(InstallerRole.CLIENT)


if __name__ == "__main__":
    server_main()
