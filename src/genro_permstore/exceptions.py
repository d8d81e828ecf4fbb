# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""PermStore exceptions."""

from __future__ import annotations


class PermStoreError(Exception):
    """Base exception for PermStore errors."""

    pass


class AccessDeniedError(PermStoreError, PermissionError):
    """Raised when a path is not accessible with the requested permission."""

    def __init__(self, path: str, permission: str) -> None:
        self.path = path
        self.permission = permission
        action = 'readable' if permission == 'r' else 'writable'
        super().__init__(f"'{path}' is not {action}")


class PathNotFoundError(PermStoreError, KeyError):
    """Raised when a path segment does not exist during read traversal."""

    def __init__(self, path: str, segment: str) -> None:
        self.path = path
        self.segment = segment
        super().__init__(f"Path segment '{segment}' not found in '{path}'")

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])


class NotAStoreError(PermStoreError, TypeError):
    """Raised when write traversal reaches a value that cannot hold children."""

    pass


class InvalidPolicyError(PermStoreError, ValueError):
    """Raised when a policy is not one of 'none', 'r', 'w', 'rw'."""

    pass


class InvalidLabelError(PermStoreError, ValueError):
    """Raised when a member label is empty or contains the path separator."""

    pass
