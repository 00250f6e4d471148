#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Component registry: descriptors plus a validated installation order.

Order rules:
- every component comes after the components it depends on
- mandatory components come before optional ones
- otherwise registration order is kept (stable)

The graph is checked when the registry is built; an unknown dependency, a
duplicate name, a cycle or a mandatory component that depends on an
optional one raises RegistryError.
"""

import heapq
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from socbox.installer.utils.exceptions import RegistryError


@dataclass(frozen=True)
class ComponentDescriptor:
    """Registry entry for one installable unit."""

    name: str
    label: str
    enable_key: Optional[str] = None
    depends_on: Tuple[str, ...] = ()
    entrypoint: Optional[Callable] = None
    teardown: Optional[Callable] = None
    endpoints: Optional[Callable] = None
    cli_flag: Optional[str] = None

    @property
    def mandatory(self) -> bool:
        return self.enable_key is None

    def is_enabled(self, env) -> bool:
        """Mandatory components are always enabled; others follow their flag."""
        return self.mandatory or env.flag(self.enable_key)


class ComponentRegistry:
    """Ordered, validated set of component descriptors for one role."""

    def __init__(self, descriptors: Iterable[ComponentDescriptor]):
        self._descriptors: Dict[str, ComponentDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in self._descriptors:
                raise RegistryError(f"Duplicate component '{descriptor.name}'")
            self._descriptors[descriptor.name] = descriptor
        self._order = self._compute_order()

    def _compute_order(self) -> List[str]:
        position = {name: i for i, name in enumerate(self._descriptors)}
        dependents: Dict[str, List[str]] = {name: [] for name in self._descriptors}
        remaining: Dict[str, int] = {}

        for name, descriptor in self._descriptors.items():
            for dependency in descriptor.depends_on:
                if dependency not in self._descriptors:
                    raise RegistryError(f"Component '{name}' depends on unknown component '{dependency}'")
                if descriptor.mandatory and not self._descriptors[dependency].mandatory:
                    raise RegistryError(f"Mandatory component '{name}' cannot depend on optional '{dependency}'")
                dependents[dependency].append(name)
            remaining[name] = len(set(descriptor.depends_on))

        def priority(name: str) -> Tuple[int, int]:
            return (0 if self._descriptors[name].mandatory else 1, position[name])

        ready = [priority(name) + (name,) for name, count in remaining.items() if count == 0]
        heapq.heapify(ready)
        order = []
        while ready:
            *_, name = heapq.heappop(ready)
            order.append(name)
            for dependent in dependents[name]:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    heapq.heappush(ready, priority(dependent) + (dependent,))

        if len(order) != len(self._descriptors):
            cyclic = sorted(set(self._descriptors) - set(order))
            raise RegistryError(f"Dependency cycle among components: {', '.join(cyclic)}")
        return order

    def __contains__(self, name: str) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def get(self, name: str) -> ComponentDescriptor:
        try:
            return self._descriptors[name]
        except KeyError:
            raise RegistryError(f"Unknown component '{name}'") from None

    @property
    def names(self) -> List[str]:
        return list(self._descriptors)

    def install_order(self) -> List[ComponentDescriptor]:
        return [self._descriptors[name] for name in self._order]

    def teardown_order(self, names: Optional[Sequence[str]] = None) -> List[ComponentDescriptor]:
        """Reverse install order, optionally limited to ``names``."""
        selected = set(self._order if names is None else names)
        for name in selected:
            self.get(name)
        return [self._descriptors[name] for name in reversed(self._order) if name in selected]

    def by_cli_flag(self) -> Dict[str, str]:
        """Map uninstall selector flags to component names."""
        return {d.cli_flag: d.name for d in self._descriptors.values() if d.cli_flag}
