#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""
Component selection arguments for the uninstall tools
"""

from socbox.installer.configs.constants.constants import SELECT_ALL


def add_uninstall_args(parser, registry):
    """
    Add --all and one --<component> flag per removable component

    Args:
        parser: ArgumentParser to add arguments to
        registry: ComponentRegistry whose cli flags become selectors
    """
    selection_arg_group = parser.add_argument_group(
        title="Component Selection", description="Nothing selected means --all"
    )
    selection_arg_group.add_argument(
        "--all",
        dest="selectAll",
        action="store_true",
        default=False,
        help="Remove all components",
    )
    for flag, name in registry.by_cli_flag().items():
        selection_arg_group.add_argument(
            f"--{flag}",
            dest=f"select_{flag}",
            action="store_true",
            default=False,
            help=f"Remove {registry.get(name).label}",
        )


def selected_components(parsed_args, registry):
    """Selection for Uninstaller.remove: "all" or a list of component names."""
    if parsed_args.selectAll:
        return SELECT_ALL
    names = [name for flag, name in registry.by_cli_flag().items() if getattr(parsed_args, f"select_{flag}", False)]
    return names or SELECT_ALL
