#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Selective removal of installed components.

Removal mirrors installation: the same registry, walked in reverse
dependency order and limited to the selection. Each component's teardown
checks presence before every step, so removing an absent component is a
successful no-op. Persisted data (databases, event archives, definitions)
is never deleted; the paths left behind are reported as warnings.
"""

from typing import Iterable, List, Union

from socbox.installer.configs.constants.constants import SELECT_ALL
from socbox.installer.core.orchestrator import Orchestrator, RunReport
from socbox.installer.core.registry import ComponentRegistry


class Uninstaller:
    def __init__(self, registry: ComponentRegistry):
        self.registry = registry
        self.orchestrator = Orchestrator(registry)

    def resolve_selection(self, selection: Union[str, Iterable[str]]) -> List[str]:
        """Turn "all" or a collection of names into registry names (validated)."""
        if isinstance(selection, str):
            if selection == SELECT_ALL:
                return self.registry.names
            selection = [selection]
        names = list(dict.fromkeys(selection))
        if not names or SELECT_ALL in names:
            return self.registry.names
        for name in names:
            self.registry.get(name)
        return names

    def remove(self, selection: Union[str, Iterable[str]], ctx) -> RunReport:
        return self.orchestrator.run_selected(self.resolve_selection(selection), ctx)
