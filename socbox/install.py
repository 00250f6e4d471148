#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""SoC-in-a-Box server and client installers."""

import argparse
import os
import sys
import traceback
from typing import List, Optional

from socbox.socbox_constants import PRODUCT_NAME, RUN_LOG_FILES, VERSION, InstallerRole
from socbox.installer.args.basic_args import add_basic_args
from socbox.installer.components import build_registry
from socbox.installer.configs.constants.enums import ExecutionMode
from socbox.installer.core.gateway import ExecutionGateway
from socbox.installer.core.install_context import InstallContext
from socbox.installer.core.orchestrator import Orchestrator
from socbox.installer.core.preflight import check_soc_reachability, check_system_requirements, run_preflight
from socbox.installer.utils.exceptions import ConfigError, PlatformError, PrivilegeError, RegistryError
from socbox.installer.utils.logger_utils import InstallerLogger
from socbox.installer.utils.summary_utils import build_run_summary


def tool_name(role: InstallerRole, action: str = "Installer") -> str:
    return f"{role.value.title()} {action}"


def build_arg_parser(parser: argparse.ArgumentParser, role: InstallerRole) -> None:
    """Add arguments specific to the installer itself"""
    add_basic_args(parser, tool_name(role))


def configure_logging(parsed_args, mode: ExecutionMode, default_log_file: str) -> Optional[str]:
    """Apply verbosity and, for live runs, the run log file; returns the log file in use."""
    InstallerLogger.set_debug_enabled(bool(parsed_args.debug))
    if mode.is_simulated():
        InstallerLogger.set_log_file(None)
        return None
    log_file = parsed_args.logFile or default_log_file
    log_dir = os.path.dirname(os.path.abspath(log_file))
    if os.path.isdir(log_dir) and os.access(log_dir, os.W_OK):
        InstallerLogger.set_log_file(log_file)
        return log_file
    InstallerLogger.set_log_file(None)
    InstallerLogger.debug(f"{log_dir} is not writable; not logging to {log_file}")
    return None


def print_banner(title: str) -> None:
    print("")
    print(f"  {PRODUCT_NAME} {title} v{VERSION}")
    print("")


def run_install(role: InstallerRole, argv: Optional[List[str]] = None) -> int:
    """Install the components of ``role``; returns the process exit code."""
    parser = argparse.ArgumentParser(description=f"{PRODUCT_NAME} {tool_name(role)}")
    build_arg_parser(parser, role)
    parsed_args = parser.parse_args(argv)

    mode = ExecutionMode.SIMULATE if parsed_args.dryRun else ExecutionMode.LIVE
    log_file = configure_logging(parsed_args, mode, RUN_LOG_FILES[role])

    print_banner(tool_name(role))
    if mode.is_simulated():
        InstallerLogger.warning("DRY-RUN MODE: No changes will be made")
    InstallerLogger.debug(f"Arguments: {parsed_args}")

    try:
        env, platform_info = run_preflight(parsed_args.envFile, role, mode)
        registry = build_registry(role)
    except (ConfigError, PlatformError, PrivilegeError, RegistryError) as e:
        InstallerLogger.error(str(e))
        return 1

    gateway = ExecutionGateway(mode)
    try:
        ctx = InstallContext.create(env, platform_info, gateway, log_file=log_file)
    except NotImplementedError as e:
        InstallerLogger.error(str(e))
        return 1

    if role == InstallerRole.SERVER:
        check_system_requirements()
    else:
        check_soc_reachability(gateway, env.soc_ip)

    InstallerLogger.step(f"Starting SOC {role.value} installation for {env.site_name}")
    try:
        report = Orchestrator(registry).run(ctx)
    except KeyboardInterrupt:
        InstallerLogger.error("Interrupted; re-run the installer to continue")
        return 1

    for line in build_run_summary(
        report,
        registry,
        env,
        platform=platform_info,
        log_file=log_file,
        planned_actions=gateway.describe_actions() if mode.is_simulated() else None,
    ):
        print(line)

    if report.exit_code == 0:
        InstallerLogger.info(f"{mode.log_prefix()}Installation complete")
    else:
        InstallerLogger.error("Installation failed; see the messages above")
    return report.exit_code


def _main(role: InstallerRole) -> None:
    try:
        sys.exit(run_install(role))
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
