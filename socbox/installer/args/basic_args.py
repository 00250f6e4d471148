#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Basic arguments shared by the install and uninstall tools
"""

from socbox.socbox_constants import DEFAULT_ENV_FILE, PRODUCT_NAME, VERSION
from socbox.socbox_utils import str2bool


def add_basic_args(parser, tool_name: str):
    """
    Add basic arguments to an "Installer Options" group

    Args:
        parser: ArgumentParser to add arguments to
        tool_name: name shown by --version (e.g. "Server Installer")
    """
    basicArgGroup = parser.add_argument_group("Installer Options")

    basicArgGroup.add_argument(
        "-d",
        "--dry-run",
        dest="dryRun",
        action="store_true",
        default=False,
        help="Show what would be done without making changes",
    )
    basicArgGroup.add_argument(
        "-v",
        "--verbose",
        "--debug",
        dest="debug",
        type=str2bool,
        nargs="?",
        metavar="true|false",
        const=True,
        default=False,
        help="Enable verbose output (every action is logged)",
    )
    basicArgGroup.add_argument(
        "-e",
        "--env",
        dest="envFile",
        metavar="<file>",
        type=str,
        default=DEFAULT_ENV_FILE,
        help=f"Use specified environment file (default: {DEFAULT_ENV_FILE})",
    )
    basicArgGroup.add_argument(
        "--log-file",
        dest="logFile",
        metavar="<file>",
        type=str,
        default=None,
        help="Append the run log to this file instead of the default location",
    )
    basicArgGroup.add_argument(
        "--version",
        action="version",
        version=f"{PRODUCT_NAME} {tool_name} v{VERSION}",
        help="Show version",
    )
