#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

"""SoC-in-a-Box server and client provisioning."""

from socbox.socbox_constants import VERSION

__version__ = VERSION

__all__ = ["__version__"]
