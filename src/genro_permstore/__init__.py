# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-PermStore - Hierarchical key/value store with access policies.

A lightweight, zero-dependency library providing a tree of named values
where every member can be restricted to no access, read-only, write-only
or read-write, addressed by colon-delimited paths.
"""

__version__ = "0.1.0"

from .exceptions import (
    AccessDeniedError,
    InvalidLabelError,
    InvalidPolicyError,
    NotAStoreError,
    PathNotFoundError,
    PermStoreError,
)
from .node import PermStoreNode
from .policy import (
    NONE,
    READ,
    READ_WRITE,
    WRITE,
    declare_override,
    get_policy,
    is_nested_permission_allowed,
    restrict,
)
from .resolvers import consume
from .store import PermStore

__all__ = [
    # Core classes
    "PermStore",
    "PermStoreNode",
    # Policies
    "NONE",
    "READ",
    "WRITE",
    "READ_WRITE",
    "restrict",
    "declare_override",
    "get_policy",
    "is_nested_permission_allowed",
    # Lazy values
    "consume",
    # Exceptions
    "PermStoreError",
    "AccessDeniedError",
    "PathNotFoundError",
    "NotAStoreError",
    "InvalidPolicyError",
    "InvalidLabelError",
]
