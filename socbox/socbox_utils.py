#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Battelle Energy Alliance, LLC.  All rights reserved.

import os
import sys
from collections.abc import Iterable


###################################################################################################
# print to stderr
def eprint(*args, **kwargs):
    kwargs.pop('file', None)
    print(*args, file=sys.stderr, **kwargs)


###################################################################################################
# flatten a collection, but don't split strings
def flatten(coll):
    for i in coll:
        if isinstance(i, Iterable) and not isinstance(i, str):
            for subc in flatten(i):
                yield subc
        else:
            yield i


###################################################################################################
# if the object is an iterable, return it, otherwise return a tuple with it as a single element.
# useful if you want to user either a scalar or an array in a loop, etc.
def get_iterable(x):
    if isinstance(x, Iterable) and not isinstance(x, str):
        return x
    else:
        return (x,)


###################################################################################################
# strictly parse a true/false flag; empty means false
def str2bool(v):
    if isinstance(v, bool):
        return v
    elif isinstance(v, str):
        if v.strip().lower() == "true":
            return True
        elif v.strip().lower() in ("false", ""):
            return False
        else:
            raise ValueError("Boolean value expected")
    elif not v:
        return False
    else:
        raise ValueError("Boolean value expected")


###################################################################################################
# check if a command exists on the PATH
def which(cmd, debug=False):
    result = any(
        os.access(os.path.join(path, cmd), os.X_OK) for path in os.environ.get("PATH", "").split(os.pathsep) if path
    )
    if debug:
        eprint(f"which {cmd} returned {result}")
    return result


###################################################################################################
# human-readable byte sizes
def sizeof_fmt(num, suffix='B'):
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti', 'Pi', 'Ei', 'Zi']:
        if abs(num) < 1024.0:
            return "%3.1f%s%s" % (num, unit, suffix)
        num /= 1024.0
    return "%.1f%s%s" % (num, 'Yi', suffix)


###################################################################################################
# total physical memory in gigabytes (0.0 when it cannot be determined)
def total_memory_gb():
    try:
        return os.sysconf('SC_PAGE_SIZE') * os.sysconf('SC_PHYS_PAGES') / (1024.0**3)
    except (ValueError, OSError, AttributeError):
        return 0.0
