#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Execution gateway: the single path through which the host is changed.

Every state-changing call made by a component (running a process, writing,
editing or removing a file, creating a directory, controlling a service,
downloading a file) is an ``Action`` handed to ``ExecutionGateway.perform``.

In LIVE mode the action is executed and a failure raises ``ActionError``
(unless ``check=False``). In SIMULATE mode nothing is executed: the action is
appended to the ordered action log and a synthetic success is returned.

Capability queries (``has_package``, ``has_service``, ``path_exists`` ...)
are read-only and run in both modes. While simulating, their answers are
overlaid with the effects of actions already recorded, so a dry run makes
the same decisions a live run would.
"""

import shlex
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

import requests

from socbox.installer.configs.constants.enums import ActionVerb, ExecutionMode
from socbox.installer.core.host import LocalHost
from socbox.installer.utils.exceptions import ActionError
from socbox.installer.utils.logger_utils import InstallerLogger

REDACTED = "********"

# commands whose package is named differently
COMMAND_PACKAGES = {
    "firewall-cmd": "firewalld",
    "setsebool": "policycoreutils",
}


def _is_secret_name(name: str) -> bool:
    upper = name.upper()
    return "PASS" in upper or "PWD" in upper or "SECRET" in upper


@dataclass(frozen=True)
class Action:
    """One intended change to the host."""

    verb: ActionVerb
    target: str = ""
    command: Tuple[str, ...] = ()
    content: Optional[str] = None
    stdin: Optional[str] = None
    env: Tuple[Tuple[str, str], ...] = ()
    cwd: Optional[str] = None
    url: str = ""
    service_verb: str = ""
    mode: Optional[int] = None
    owner: Optional[str] = None
    backup_suffix: Optional[str] = None
    installs: Tuple[str, ...] = ()
    removes: Tuple[str, ...] = ()
    provides_units: Tuple[str, ...] = ()
    redact: Tuple[str, ...] = ()
    note: str = ""

    def describe(self) -> str:
        """Human-readable form with secrets, file contents and stdin elided."""
        if self.verb == ActionVerb.RUN:
            text = shlex.join(self.command)
            if self.env:
                text = (
                    " ".join(f"{k}={REDACTED if _is_secret_name(k) else v}" for k, v in self.env) + " " + text
                )
            if self.cwd:
                text = f"(cd {shlex.quote(self.cwd)}) " + text
            if self.stdin:
                text += f" <<< ({len(self.stdin)} bytes on stdin)"
        elif self.verb in (ActionVerb.WRITE, ActionVerb.EDIT):
            extras = []
            if self.content is not None:
                extras.append(f"{len(self.content)} bytes")
            if self.mode is not None:
                extras.append(f"mode {oct(self.mode)}")
            if self.owner:
                extras.append(f"owner {self.owner}")
            if self.backup_suffix:
                extras.append(f"backup {self.target}{self.backup_suffix}")
            text = f"{self.verb.value} {self.target}" + (f" ({', '.join(extras)})" if extras else "")
        elif self.verb == ActionVerb.REMOVE:
            text = f"remove {self.target}"
        elif self.verb == ActionVerb.MKDIR:
            text = f"mkdir -p {self.target}"
            if self.mode is not None:
                text += f" (mode {oct(self.mode)})"
        elif self.verb == ActionVerb.SERVICE:
            text = " ".join(p for p in ("systemctl", self.service_verb, self.target) if p)
        elif self.verb == ActionVerb.DOWNLOAD:
            text = f"download {self.url} -> {self.target}"
        else:
            text = f"{self.verb.value} {self.target}"
        if self.note:
            text += f" [{self.note}]"
        for secret in self.redact:
            if secret:
                text = text.replace(secret, REDACTED)
        return text


@dataclass
class ActionResult:
    action: Optional[Action]
    returncode: int = 0
    output: List[str] = field(default_factory=list)
    simulated: bool = False
    changed: bool = True

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ExecutionGateway:
    """Executes or records actions according to a fixed execution mode."""

    def __init__(self, mode: ExecutionMode = ExecutionMode.LIVE, host=None):
        self._mode = mode
        self.host = host if host is not None else LocalHost()
        self._actions: List[Action] = []

        # simulated state overlay (SIMULATE mode only)
        self._sim_files: Dict[str, Optional[str]] = {}
        self._sim_dirs: Set[str] = set()
        self._sim_packages: Dict[str, bool] = {}
        self._sim_services: Dict[str, bool] = {}
        self._sim_removed: Set[str] = set()

    @property
    def mode(self) -> ExecutionMode:
        return self._mode

    @property
    def simulated(self) -> bool:
        return self._mode.is_simulated()

    @property
    def actions(self) -> Tuple[Action, ...]:
        """Ordered log of every action performed (live) or planned (simulate)."""
        return tuple(self._actions)

    def describe_actions(self) -> List[str]:
        return [a.describe() for a in self._actions]

    #####################################################
    # perform
    #####################################################

    def perform(self, action: Action, check: bool = True, retry: int = 0) -> ActionResult:
        self._actions.append(action)

        if self._mode.is_simulated():
            InstallerLogger.info(self._mode.would(action.describe()))
            self._apply_to_overlay(action)
            return ActionResult(action, 0, [], simulated=True)

        InstallerLogger.debug(action.describe())
        returncode, output = self._execute(action, retry)
        if returncode != 0:
            InstallerLogger.debug(f"{action.describe()} returned {returncode}: {output}")
            if check:
                raise ActionError(action.describe(), returncode, self._redact_output(action, output))
        return ActionResult(action, returncode, output)

    def _execute(self, action: Action, retry: int) -> Tuple[int, List[str]]:
        host = self.host
        try:
            if action.verb == ActionVerb.RUN:
                return host.run_process(
                    list(action.command),
                    stdin=action.stdin,
                    env=dict(action.env) if action.env else None,
                    cwd=action.cwd,
                    retry=retry,
                )
            elif action.verb in (ActionVerb.WRITE, ActionVerb.EDIT):
                if action.backup_suffix and host.exists(action.target):
                    host.copy_file(action.target, action.target + action.backup_suffix)
                host.write_file(action.target, action.content or "", mode=action.mode, owner=action.owner)
            elif action.verb == ActionVerb.REMOVE:
                host.remove(action.target)
            elif action.verb == ActionVerb.MKDIR:
                host.make_dirs(action.target, mode=action.mode, owner=action.owner)
            elif action.verb == ActionVerb.SERVICE:
                command = ["systemctl", action.service_verb] + ([action.target] if action.target else [])
                return host.run_process(command, retry=retry)
            elif action.verb == ActionVerb.DOWNLOAD:
                if host.download(action.url, action.target) <= 0:
                    return 1, [f"Download of {action.url} produced an empty file"]
            else:
                return 1, [f"Unsupported action {action.verb}"]
        except (OSError, LookupError, requests.RequestException) as e:
            return 1, [str(e)]
        return 0, []

    @staticmethod
    def _redact_output(action: Action, output: List[str]) -> List[str]:
        redacted = []
        for line in output:
            for secret in action.redact:
                if secret:
                    line = line.replace(secret, REDACTED)
            redacted.append(line)
        return redacted

    def _apply_to_overlay(self, action: Action) -> None:
        for package in action.installs:
            self._sim_packages[package] = True
        for package in action.removes:
            self._sim_packages[package] = False
        for unit in action.provides_units:
            self._sim_services.setdefault(unit, False)

        if action.verb in (ActionVerb.WRITE, ActionVerb.EDIT):
            if action.content is not None:
                self._sim_files[action.target] = action.content
        elif action.verb == ActionVerb.DOWNLOAD:
            self._sim_files[action.target] = ""
        elif action.verb == ActionVerb.REMOVE:
            prefix = action.target.rstrip("/") + "/"
            for path in list(self._sim_files):
                if path.startswith(prefix):
                    self._sim_files[path] = None
            self._sim_files[action.target] = None
            self._sim_dirs.discard(action.target)
            self._sim_removed.add(action.target.rstrip("/"))
        elif action.verb == ActionVerb.MKDIR:
            self._sim_dirs.add(action.target)
        elif action.verb == ActionVerb.SERVICE and action.target:
            if action.service_verb in ("start", "restart", "reload"):
                self._sim_services[action.target] = True
            elif action.service_verb == "stop":
                self._sim_services[action.target] = False
            else:
                self._sim_services.setdefault(action.target, False)

    #####################################################
    # convenience wrappers around perform
    #####################################################

    def run(
        self,
        command: Sequence[str],
        stdin: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[str] = None,
        check: bool = True,
        retry: int = 0,
        redact: Iterable[str] = (),
        installs: Iterable[str] = (),
        removes: Iterable[str] = (),
        provides_units: Iterable[str] = (),
        note: str = "",
    ) -> ActionResult:
        """Run a state-changing process."""
        action = Action(
            ActionVerb.RUN,
            target=command[0] if command else "",
            command=tuple(command),
            stdin=stdin,
            env=tuple(sorted((env or {}).items())),
            cwd=cwd,
            redact=tuple(s for s in redact if s),
            installs=tuple(installs),
            removes=tuple(removes),
            provides_units=tuple(provides_units),
            note=note,
        )
        return self.perform(action, check=check, retry=retry)

    def write_file(
        self,
        path: str,
        content: str,
        mode: Optional[int] = None,
        owner: Optional[str] = None,
        backup_suffix: Optional[str] = None,
        redact: Iterable[str] = (),
    ) -> ActionResult:
        """Create or replace a file; unchanged content is a no-op."""
        if self.read_file(path) == content:
            InstallerLogger.debug(f"{path} already up to date")
            return ActionResult(None, changed=False)
        action = Action(
            ActionVerb.WRITE,
            target=path,
            content=content,
            mode=mode,
            owner=owner,
            backup_suffix=backup_suffix if self.path_exists(path) else None,
            redact=tuple(s for s in redact if s),
        )
        return self.perform(action)

    def edit_file(
        self,
        path: str,
        transform: Callable[[str], str],
        backup_suffix: Optional[str] = None,
        require_existing: bool = True,
        mode: Optional[int] = None,
    ) -> ActionResult:
        """Rewrite an existing file through ``transform``; unchanged content is a no-op.

        When the file is missing and ``require_existing`` is set, a live run
        fails; a simulated run records the edit since the file is normally
        laid down by a package installed earlier in the same run.
        """
        current = self.read_file(path)
        if current is None:
            if require_existing:
                if self.simulated:
                    return self.perform(
                        Action(ActionVerb.EDIT, target=path, note="file expected from package installation")
                    )
                raise ActionError(f"edit {path}", 1, [f"{path} not found"])
            current = ""
        updated = transform(current)
        if updated == current:
            InstallerLogger.debug(f"{path} already up to date")
            return ActionResult(None, changed=False)
        action = Action(
            ActionVerb.EDIT,
            target=path,
            content=updated,
            mode=mode,
            backup_suffix=backup_suffix,
        )
        return self.perform(action)

    def remove_path(self, path: str) -> ActionResult:
        """Remove a file, link or directory tree if present."""
        if not self.path_exists(path):
            return ActionResult(None, changed=False)
        return self.perform(Action(ActionVerb.REMOVE, target=path))

    def make_dirs(self, path: str, mode: Optional[int] = None, owner: Optional[str] = None) -> ActionResult:
        if self.path_exists(path):
            return ActionResult(None, changed=False)
        return self.perform(Action(ActionVerb.MKDIR, target=path, mode=mode, owner=owner))

    def service(self, verb: str, unit: str = "", check: bool = True) -> ActionResult:
        """systemctl <verb> [unit]"""
        return self.perform(Action(ActionVerb.SERVICE, target=unit, service_verb=verb), check=check)

    def download(self, url: str, path: str, check: bool = True) -> ActionResult:
        return self.perform(Action(ActionVerb.DOWNLOAD, target=path, url=url), check=check)

    #####################################################
    # read-only capability queries (both modes)
    #####################################################

    def probe(self, command: Sequence[str], env: Optional[Dict[str, str]] = None) -> Tuple[int, List[str]]:
        """Run a read-only command; never recorded as an action."""
        returncode, output = self.host.run_process(list(command), env=env, stderr=False)
        InstallerLogger.debug(f"probe {shlex.join(command)} returned {returncode}")
        return returncode, output

    def has_command(self, name: str) -> bool:
        """True when ``name`` is on PATH, or (simulated) the package providing it is planned."""
        if self.simulated:
            package = COMMAND_PACKAGES.get(name, name)
            if package in self._sim_packages:
                return self._sim_packages[package]
        return self.host.which(name)

    def has_package(self, name: str) -> bool:
        if self.simulated and name in self._sim_packages:
            return self._sim_packages[name]
        if self.host.which("dpkg-query"):
            returncode, output = self.probe(["dpkg-query", "-W", "-f=${Status}", name])
            return returncode == 0 and "install ok installed" in " ".join(output)
        elif self.host.which("rpm"):
            returncode, _ = self.probe(["rpm", "-q", name])
            return returncode == 0
        return False

    def has_service(self, unit: str) -> bool:
        if self.simulated and unit in self._sim_services:
            return True
        returncode, _ = self.probe(["systemctl", "cat", "--", unit])
        return returncode == 0

    def service_is_active(self, unit: str) -> bool:
        if self.simulated and unit in self._sim_services:
            return self._sim_services[unit]
        returncode, _ = self.probe(["systemctl", "is-active", "--quiet", unit])
        return returncode == 0

    def path_exists(self, path: str) -> bool:
        if self.simulated:
            if path in self._sim_files:
                return self._sim_files[path] is not None
            if path in self._sim_dirs:
                return True
            if any(path.startswith(removed + "/") for removed in self._sim_removed):
                return False
            # a planned file or directory implies its parents
            prefix = path.rstrip("/") + "/"
            if any(d.startswith(prefix) for d in self._sim_dirs) or any(
                p.startswith(prefix) and content is not None for p, content in self._sim_files.items()
            ):
                return True
        return self.host.exists(path)

    def read_file(self, path: str) -> Optional[str]:
        if self.simulated and path in self._sim_files:
            return self._sim_files[path]
        return self.host.read_file(path)
