#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Direct access to the local machine.

Only the execution gateway talks to a host object; component code never
touches processes or files itself.
"""

import os
import shutil
import subprocess
import time
from typing import Dict, List, Optional, Tuple

import requests

from socbox.socbox_utils import flatten, get_iterable, sizeof_fmt, which
from socbox.installer.utils.logger_utils import InstallerLogger

DOWNLOAD_TIMEOUT_SEC = 60


class LocalHost:
    """Processes, files and downloads on the machine we are running on."""

    def run_process(
        self,
        command: List[str],
        stdin: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[str] = None,
        retry: int = 0,
        retry_sleep_sec: int = 5,
        stderr: bool = True,
    ) -> Tuple[int, List[str]]:
        """Run a system process, returning its exit code and output lines."""
        retcode = -1
        output = []
        flat_command = list(flatten(get_iterable(command)))
        process_env = None
        if env:
            process_env = dict(os.environ)
            process_env.update(env)

        for i in range(retry + 1):
            output = []
            try:
                process = subprocess.run(
                    flat_command,
                    input=stdin if stdin else None,
                    capture_output=True,
                    check=False,
                    text=True,
                    errors="ignore",
                    env=process_env,
                    cwd=cwd,
                )
                retcode = process.returncode
                if process.stdout:
                    output.extend(process.stdout.splitlines())
                if stderr and process.stderr:
                    output.extend(process.stderr.splitlines())
                if retcode == 0:
                    break
            except FileNotFoundError:
                output = [f"Command {flat_command[0]} not found or unable to execute"]
                retcode = 127
                break
            except OSError as e:
                output = [f"Error executing command {flat_command[0]}: {e}"]
                retcode = 1

            if i < retry:
                InstallerLogger.warning(
                    f"Command failed (attempt {i+1}/{retry+1}). Retrying in {retry_sleep_sec} seconds..."
                )
                time.sleep(retry_sleep_sec)

        return retcode, output

    def which(self, cmd: str) -> bool:
        return which(cmd)

    def exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def read_file(self, path: str) -> Optional[str]:
        if not os.path.isfile(path):
            return None
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            return f.read()

    def write_file(self, path: str, content: str, mode: Optional[int] = None, owner: Optional[str] = None) -> None:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        self.set_attributes(path, mode, owner)

    def copy_file(self, source: str, destination: str) -> None:
        shutil.copy2(source, destination)

    def make_dirs(self, path: str, mode: Optional[int] = None, owner: Optional[str] = None) -> None:
        os.makedirs(path, exist_ok=True)
        self.set_attributes(path, mode, owner)

    def remove(self, path: str) -> None:
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        elif os.path.lexists(path):
            os.unlink(path)

    def set_attributes(self, path: str, mode: Optional[int] = None, owner: Optional[str] = None) -> None:
        if mode is not None:
            os.chmod(path, mode)
        if owner:
            user, _, group = owner.partition(":")
            shutil.chown(path, user=user or None, group=group or None)

    def download(self, url: str, path: str) -> int:
        """Download ``url`` into ``path``; returns the number of bytes written."""
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        r = requests.get(url, stream=True, allow_redirects=True, timeout=DOWNLOAD_TIMEOUT_SEC)
        r.raise_for_status()
        with open(path, 'wb') as f:
            for chunk in r.iter_content(chunk_size=1024):
                if chunk:
                    f.write(chunk)
        size = os.path.getsize(path)
        InstallerLogger.debug(f"Download of {url} to {path} ({sizeof_fmt(size)})")
        return size
