#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""Custom exceptions for the provisioning engine."""

from typing import Iterable, Optional


class SocBoxError(Exception):
    """Base class for all provisioning errors."""

    pass


#####################################################
# configuration
#####################################################


class ConfigError(SocBoxError):
    """Base class for configuration-related errors."""

    pass


class MissingSourceError(ConfigError):
    """Raised when the configuration source file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Configuration file '{path}' not found.")
        self.path = path


class MissingRequiredKeyError(ConfigError):
    """Raised when a required configuration key is absent or empty."""

    def __init__(self, key: str):
        super().__init__(f"Required configuration item '{key}' is not set.")
        self.key = key


class UnsafeDefaultValueError(ConfigError):
    """Raised when a credential still holds its documented placeholder value."""

    def __init__(self, key: str):
        super().__init__(f"'{key}' still holds its placeholder value; set a real credential before installing.")
        self.key = key


class InvalidSettingValueError(ConfigError):
    """Raised when a configuration value fails validation."""

    def __init__(self, key: str, value, message: str):
        super().__init__(f"Invalid value for '{key}': {message} (value was '{value}').")
        self.key = key
        self.value = value


#####################################################
# host preconditions
#####################################################


class PlatformError(SocBoxError):
    pass


class PlatformUndetectableError(PlatformError):
    """Raised when the host identity source is missing."""

    def __init__(self, path: str):
        super().__init__(f"Cannot detect OS: {path} not found.")
        self.path = path


class PrivilegeError(SocBoxError):
    pass


class PrivilegeRequiredError(PrivilegeError):
    def __init__(self):
        super().__init__("This installer must be run as root (try sudo).")


#####################################################
# components
#####################################################


class RegistryError(SocBoxError):
    """Raised when the component dependency graph is invalid."""

    pass


class ComponentFatalError(SocBoxError):
    """A component failed in a way that must halt the run."""

    def __init__(self, component: str, message: str):
        super().__init__(f"{component}: {message}")
        self.component = component
        self.message = message


class ComponentDegradedError(SocBoxError):
    """A component finished, but one or more best-effort steps failed."""

    def __init__(self, component: str, messages: Iterable[str]):
        self.component = component
        self.messages = list(messages)
        super().__init__(f"{component}: {'; '.join(self.messages)}")


class ActionError(SocBoxError):
    """Raised by the execution gateway when a checked action fails."""

    def __init__(self, action: str, returncode: int, output: Optional[list] = None):
        self.action = action
        self.returncode = returncode
        self.output = list(output or [])
        detail = f": {self.output[-1]}" if self.output else ""
        super().__init__(f"'{action}' failed with exit code {returncode}{detail}")
