#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""python -m socbox <server-install|client-install|server-uninstall|client-uninstall> [options]"""

import sys

from socbox.socbox_constants import InstallerRole
from socbox.install import run_install
from socbox.uninstall import run_uninstall

COMMANDS = {
    "server-install": (run_install, InstallerRole.SERVER),
    "client-install": (run_install, InstallerRole.CLIENT),
    "server-uninstall": (run_uninstall, InstallerRole.SERVER),
    "client-uninstall": (run_uninstall, InstallerRole.CLIENT),
}


def main(argv=None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in COMMANDS:
        print(f"usage: python -m socbox {{{','.join(COMMANDS)}}} [options]", file=sys.stderr)
        return 2
    handler, role = COMMANDS[argv[0]]
    return handler(role, argv[1:])


if __name__ == "__main__":
    sys.exit(main())
