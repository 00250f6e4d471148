#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Base class for installable components."""

import abc
from contextlib import contextmanager
from typing import List, Optional, Sequence, Tuple

from socbox.installer.core.registry import ComponentDescriptor
from socbox.installer.utils.exceptions import (
    ActionError,
    ComponentDegradedError,
)
from socbox.installer.utils.logger_utils import InstallerLogger


class BaseComponent(abc.ABC):
    """One installable unit of the stack.

    Subclasses implement ``install`` and declare what they own; removal is
    driven by those declarations:

    - ``service_units``: units stopped (if running) and disabled
    - ``removal_packages``: packages removed (if installed)
    - ``owned_config_paths``: configuration introduced by the install, removed if present
    - ``data_paths``: persisted data, never removed, reported as left behind
    """

    name: str = ""
    label: str = ""
    enable_key: Optional[str] = None
    depends_on: Tuple[str, ...] = ()
    cli_flag: Optional[str] = None
    remove_packages_on_uninstall = True

    def __init__(self):
        self._degradations: List[str] = []

    #####################################################
    # declarations
    #####################################################

    @abc.abstractmethod
    def packages(self, ctx) -> List[str]:
        """Packages installed for this component on ctx.family."""
        pass

    def removal_packages(self, ctx) -> List[str]:
        return self.packages(ctx)

    def service_units(self, ctx) -> List[str]:
        return []

    def owned_config_paths(self, ctx) -> List[str]:
        return []

    def data_paths(self, ctx) -> List[str]:
        return []

    def access_endpoints(self, env) -> List[Tuple[str, str]]:
        """(label, URL or address) pairs shown in the summary after success."""
        return []

    #####################################################
    # install
    #####################################################

    @abc.abstractmethod
    def install(self, ctx) -> None:
        """Install and configure this component. Must be safe to re-run."""
        pass

    def run_install(self, ctx) -> None:
        self._degradations = []
        self.install(ctx)
        self._raise_if_degraded()

    #####################################################
    # uninstall
    #####################################################

    def uninstall(self, ctx) -> None:
        """Stop, remove packages and owned configuration; leave data in place."""
        for unit in self.service_units(ctx):
            if ctx.services.stop_if_active(unit):
                InstallerLogger.info(f"Stopped {unit}")
            ctx.services.disable_if_present(unit)

        if self.remove_packages_on_uninstall:
            removed = ctx.packages.remove_packages(self.removal_packages(ctx))
            if removed:
                InstallerLogger.info(f"Removed packages: {', '.join(removed)}")
        else:
            InstallerLogger.warning(f"{self.label} packages are kept; remove them manually if required")

        for path in self.owned_config_paths(ctx):
            if ctx.gateway.remove_path(path).changed:
                InstallerLogger.info(f"Removed {path}")

        left_behind = [path for path in self.data_paths(ctx) if ctx.gateway.path_exists(path)]
        if left_behind:
            InstallerLogger.warning(f"{self.label} data left in place: {', '.join(left_behind)}")

    def run_uninstall(self, ctx) -> None:
        self._degradations = []
        self.uninstall(ctx)
        self._raise_if_degraded()

    #####################################################
    # failure helpers
    #####################################################

    @contextmanager
    def best_effort(self, step: str):
        """Run a sub-step whose failure degrades, but does not halt, the run."""
        try:
            yield
        except (ActionError, ComponentDegradedError) as e:
            self.degrade(f"{step}: {e}")

    def degrade(self, message: str) -> None:
        InstallerLogger.warning(f"{self.label}: {message}")
        self._degradations.append(message)

    def _raise_if_degraded(self) -> None:
        if self._degradations:
            raise ComponentDegradedError(self.name, self._degradations)

    #####################################################
    # registry
    #####################################################

    def descriptor(self) -> ComponentDescriptor:
        return ComponentDescriptor(
            name=self.name,
            label=self.label,
            enable_key=self.enable_key,
            depends_on=tuple(self.depends_on),
            entrypoint=self.run_install,
            teardown=self.run_uninstall,
            endpoints=self.access_endpoints,
            cli_flag=self.cli_flag,
        )


def enable_services(ctx, units: Sequence[str], restart: bool = True) -> None:
    """daemon-reload, then enable and (re)start each unit that exists."""
    ctx.services.daemon_reload()
    for unit in units:
        if not ctx.services.exists(unit):
            InstallerLogger.debug(f"Service {unit} not present; skipping")
            continue
        if restart:
            ctx.services.enable_and_restart(unit)
        else:
            ctx.services.enable_and_start(unit)


def public_url(env, path: str = "", port: Optional[int] = None, scheme: Optional[str] = None) -> str:
    """URL on the server's public name; https when Nginx terminates TLS."""
    if scheme is None:
        scheme = "https" if env.nginx.enabled and env.nginx.enable_tls else "http"
    host = env.public_host
    port_part = f":{port}" if port else ""
    return f"{scheme}://{host}{port_part}{path}"
