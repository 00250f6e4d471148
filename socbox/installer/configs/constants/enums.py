#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.


from enum import Enum, auto


# per-component result of a provisioning walk
class ComponentOutcome(Enum):
    """Outcome of one component within a run."""

    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED_FATAL = "failed (fatal)"
    FAILED_NON_FATAL = "failed (non-fatal)"

    def satisfies_dependency(self) -> bool:
        """returns True when a dependent component may build on this one"""
        return self in (ComponentOutcome.SUCCEEDED, ComponentOutcome.FAILED_NON_FATAL)


# top-level execution mode, fixed for the lifetime of a run
class ExecutionMode(Enum):
    """Whether state-changing actions are executed or only recorded.

    - LIVE: execute every action against the host
    - SIMULATE: record intended actions in order; make no changes
    """

    LIVE = auto()
    SIMULATE = auto()

    # query helpers
    def is_simulated(self) -> bool:
        return self is ExecutionMode.SIMULATE

    # logging helpers
    def log_prefix(self) -> str:
        """prefix to use for 'would do' messages in dry-run"""
        return "Dry run: " if self is ExecutionMode.SIMULATE else ""

    def would(self, action: str) -> str:
        """formats an action string appropriately for the current mode"""
        return ("Dry run: would " + action) if self is ExecutionMode.SIMULATE else action


# coarse operating system grouping that drives package and service choices
class OSFamily(Enum):
    DEBIAN_LIKE = "debian"
    RHEL_LIKE = "rhel"


#####################################################
# Configuration Enums
#####################################################


class DatabaseType(Enum):
    MARIADB = "mariadb"
    POSTGRESQL = "postgresql"

    @classmethod
    def parse(cls, value: str) -> "DatabaseType":
        """Accept the aliases used in environment files (mysql, postgres)."""
        normalized = str(value).strip().lower()
        aliases = {
            "mariadb": cls.MARIADB,
            "mysql": cls.MARIADB,
            "postgresql": cls.POSTGRESQL,
            "postgres": cls.POSTGRESQL,
        }
        if normalized not in aliases:
            raise ValueError(f"expected one of {', '.join(aliases)}")
        return aliases[normalized]


class WazuhProtocol(Enum):
    TCP = "tcp"
    UDP = "udp"


# kinds of actions the execution gateway understands
class ActionVerb(Enum):
    RUN = "run"
    WRITE = "write"
    EDIT = "edit"
    REMOVE = "remove"
    MKDIR = "mkdir"
    SERVICE = "service"
    DOWNLOAD = "download"
