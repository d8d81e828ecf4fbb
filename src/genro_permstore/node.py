# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""PermStore node classes."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .exceptions import InvalidLabelError
from .resolvers import consume

if TYPE_CHECKING:
    from .store import PermStore

SEPARATOR = ':'


def validate_label(label: str) -> str:
    """Return ``label`` unchanged if it can name a member.

    Raises:
        InvalidLabelError: If label is empty, not a string, or contains ':'.
    """
    if not isinstance(label, str) or not label:
        raise InvalidLabelError(f"Invalid label {label!r}")
    if SEPARATOR in label:
        raise InvalidLabelError(
            f"Label {label!r} cannot contain the path separator '{SEPARATOR}'"
        )
    return label


class PermStoreNode:
    """A member slot in a PermStore.

    The value is exactly one of:
    - a nested PermStore (branch)
    - a producer, i.e. a zero-argument callable resolved on every read
    - anything else, stored verbatim (leaf)

    Example:
        >>> node = PermStoreNode('user', 'Alice')
        >>> node.is_leaf
        True
        >>> PermStoreNode('now', lambda: 42).resolve()
        42
    """

    __slots__ = ('label', 'value', 'parent')

    def __init__(
        self,
        label: str,
        value: Any = None,
        parent: PermStore | None = None,
    ) -> None:
        self.label = label
        self.value = value
        self.parent = parent

    def __repr__(self) -> str:
        if self.is_branch:
            value_repr = f"PermStore({len(self.value)})"
        elif self.is_producer:
            value_repr = f"<producer {getattr(self.value, '__name__', '?')}>"
        else:
            value_repr = repr(self.value)
        return f"PermStoreNode({self.label!r}, value={value_repr})"

    @property
    def is_branch(self) -> bool:
        """True if this node contains a PermStore."""
        from .store import PermStore
        return isinstance(self.value, PermStore)

    @property
    def is_producer(self) -> bool:
        """True if this node contains a lazy producer."""
        return not self.is_branch and callable(self.value)

    @property
    def is_leaf(self) -> bool:
        """True if this node contains a plain value."""
        return not self.is_branch and not callable(self.value)

    def resolve(self) -> Any:
        """Return the value, invoking it first if it is a producer."""
        return consume(self.value)

    @property
    def _(self) -> PermStore:
        """Return parent PermStore for navigation/chaining."""
        if self.parent is None:
            raise ValueError("Node has no parent")
        return self.parent
