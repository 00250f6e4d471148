#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Create-or-update helpers for product configuration files.

The ``set_*`` functions are pure text transforms; ``apply_*`` wrap them in a
gateway edit so that unchanged files are never rewritten (and never backed
up twice).
"""

import io
import re
import sys
from datetime import datetime
from functools import partial
from typing import Mapping, Optional

from ruamel.yaml import YAML


def backup_suffix(timestamped: bool = False) -> str:
    """Suffix for a configuration backup (".bak" or ".bak.YYYYmmddHHMMSS")."""
    if timestamped:
        return f".bak.{datetime.now().strftime('%Y%m%d%H%M%S')}"
    return ".bak"


def _ensure_trailing_newline(lines: list) -> None:
    if lines and not lines[-1].endswith("\n"):
        lines[-1] = lines[-1] + "\n"


def set_directives(text: str, directives: Mapping[str, str], separator: str = "=") -> str:
    """Create or update ``KEY<separator>value`` lines.

    - the first active ``KEY`` line is replaced
    - otherwise the first commented-out ``# KEY`` line is replaced
    - otherwise the directive is appended
    """
    lines = text.splitlines(keepends=True)
    for key, value in directives.items():
        if separator.strip():
            key_pattern = rf"{re.escape(key)}\s*{re.escape(separator.strip())}"
        else:
            key_pattern = rf"{re.escape(key)}\s"
        active = re.compile(rf"^\s*{key_pattern}")
        commented = re.compile(rf"^\s*#\s*{key_pattern}")
        new_line = f"{key}{separator}{value}\n"

        index = next((i for i, line in enumerate(lines) if active.match(line)), None)
        if index is None:
            index = next((i for i, line in enumerate(lines) if commented.match(line)), None)
        if index is not None:
            lines[index] = new_line
        else:
            _ensure_trailing_newline(lines)
            lines.append(new_line)
    return "".join(lines)


def set_xml_elements(text: str, block: str, elements: Mapping[str, str]) -> str:
    """Set ``<tag>value</tag>`` children of the first ``<block>`` element.

    Missing children are inserted before the closing ``</block>`` tag.
    """
    match = re.search(rf"<{block}>(.*?)</{block}>", text, re.DOTALL)
    if match is None:
        return text
    inner = match.group(1)
    for tag, value in elements.items():
        element = re.compile(rf"<{tag}>.*?</{tag}>", re.DOTALL)
        if element.search(inner):
            inner = element.sub(f"<{tag}>{value}</{tag}>", inner, count=1)
        else:
            child_indent = re.search(r"\n([ \t]*)<", inner)
            child_indent = child_indent.group(1) if child_indent else "  "
            closing_indent = inner[len(inner.rstrip(" \t")) :]
            inner = inner.rstrip() + f"\n{child_indent}<{tag}>{value}</{tag}>\n{closing_indent}"
    return text[: match.start(1)] + inner + text[match.end(1) :]


def comment_out_lines(text: str, pattern: str) -> str:
    """Prefix every line fully matching ``pattern`` with '#'."""
    regex = re.compile(rf"^({pattern})\s*$")
    return "".join(
        f"#{line}" if regex.match(line.rstrip("\n")) else line for line in text.splitlines(keepends=True)
    )


def dump_yaml(data) -> str:
    """Serialize ``data`` as block-style YAML."""
    out_yaml = YAML(typ='rt')
    out_yaml.boolean_representation = ['false', 'true']
    out_yaml.representer.ignore_aliases = lambda *args: True
    out_yaml.width = sys.maxsize
    out_yaml.default_flow_style = False
    stream = io.StringIO()
    out_yaml.dump(data, stream)
    return stream.getvalue()


def apply_directives(
    gateway,
    path: str,
    directives: Mapping[str, str],
    separator: str = "=",
    backup: Optional[str] = None,
    require_existing: bool = True,
):
    """Idempotently set directives in ``path`` through the gateway."""
    return gateway.edit_file(
        path,
        partial(set_directives, directives=directives, separator=separator),
        backup_suffix=backup,
        require_existing=require_existing,
    )
