#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""systemd service control through the execution gateway."""

from typing import Iterable, List


class ServiceManager:
    """Thin systemctl wrapper; every call is a gateway action or query."""

    def __init__(self, gateway):
        self.gateway = gateway

    def exists(self, unit: str) -> bool:
        return self.gateway.has_service(unit)

    def is_active(self, unit: str) -> bool:
        return self.gateway.service_is_active(unit)

    def daemon_reload(self) -> None:
        self.gateway.service("daemon-reload")

    def enable(self, unit: str) -> None:
        self.gateway.service("enable", unit)

    def start(self, unit: str) -> None:
        self.gateway.service("start", unit)

    def restart(self, unit: str) -> None:
        self.gateway.service("restart", unit)

    def enable_and_start(self, unit: str) -> None:
        self.enable(unit)
        self.start(unit)

    def enable_and_restart(self, unit: str) -> None:
        self.enable(unit)
        self.restart(unit)

    def stop_if_active(self, unit: str) -> bool:
        """Stop a running unit; returns True if it was running."""
        if not self.is_active(unit):
            return False
        self.gateway.service("stop", unit)
        return True

    def disable_if_present(self, unit: str) -> bool:
        if not self.exists(unit):
            return False
        self.gateway.service("disable", unit, check=False)
        return True

    def first_existing(self, units: Iterable[str]) -> List[str]:
        """Units from ``units`` that exist on this host, in order."""
        return [u for u in units if self.exists(u)]
