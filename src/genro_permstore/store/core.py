# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""PermStore - A hierarchical key/value store with per-member access policies.

This module provides the PermStore class, the core container of the
genro-permstore library. Members are addressed by colon-delimited paths and
every hop of a path is checked against the policy of the store that
contains it.

Key Features:
    - **Hierarchical storage**: Nested PermStore instances forming a tree
    - **Access policies**: 'none', 'r', 'w' or 'rw' per store and per member
    - **Path navigation**: Colon paths ('a:b:c') with autocreate on write
    - **Lazy values**: Producers (zero-argument callables) resolved on read
    - **Plain data conversion**: Mappings written become nested stores

Path Syntax:
    - 'parent:child:grandchild'

Example:
    Basic usage::

        store = PermStore()
        store.write('config:database:host', 'localhost')
        store.read('config:database:host')  # 'localhost'

    Restricted members::

        class Session(PermStore):
            user_id = restrict('r', default=0)
            token = restrict('w')

        session = Session()
        session.read('user_id')          # 0
        session.write('user_id', 1)      # AccessDeniedError
        session.write('token', 'abc')
        session.read('token')            # AccessDeniedError
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, Iterator

from ..exceptions import AccessDeniedError, NotAStoreError, PathNotFoundError
from ..node import SEPARATOR, PermStoreNode, validate_label
from ..policy import (
    READ,
    READ_WRITE,
    WRITE,
    Restriction,
    is_nested_permission_allowed,
    validate_policy,
)
from ..resolvers import consume
from .loading import turn_into_store

logger = logging.getLogger(__name__)


class PermStore:
    """A hierarchical key/value container guarded by access policies.

    PermStore provides:
    - read(path) / store[path]: Get resolved values, checking 'r' on each hop
    - write(path, value) / store[path] = value: Set values with autocreate,
      checking 'w' on each hop
    - write_entries(mapping): Write several top-level members
    - entries(): Readable top-level members with their raw values

    The default policy is 'rw'. Subclasses change it with a class keyword
    and declare per-member policies with restrict():

        class ReadOnly(PermStore, default_policy='r'):
            secret = restrict('none')

    Attributes:
        parent: The PermStoreNode that contains this store as its value,
            or None if this is a root store.

    Example:
        >>> store = PermStore()
        >>> store.write('x', {'y': 1, 'z': 2})
        >>> store.read('x:y')
        1
    """

    __slots__ = ('_nodes', '_overrides', '_default_policy', 'parent')

    _class_default_policy: str = READ_WRITE
    _restrictions: dict[str, str] = {}
    _defaults: dict[str, Any] = {}

    def __init_subclass__(cls, default_policy: str | None = None, **kwargs: Any) -> None:
        """Collect restrict() markers into the class-level policy tables."""
        super().__init_subclass__(**kwargs)

        if default_policy is not None:
            cls._class_default_policy = validate_policy(default_policy)

        cls._restrictions = {}
        cls._defaults = {}
        for name, attr in list(cls.__dict__.items()):
            if not isinstance(attr, Restriction):
                continue
            validate_label(name)
            cls._restrictions[name] = attr.policy
            if attr.has_default:
                cls._defaults[name] = attr.default
            delattr(cls, name)

    def __init__(
        self,
        source: Mapping[str, Any] | None = None,
        default_policy: str | None = None,
        parent: PermStoreNode | None = None,
    ) -> None:
        """Initialize a PermStore.

        Args:
            source: Optional initial data, written through write_entries()
                so that member policies apply.
            default_policy: Policy for members without an override. Falls
                back to the class default ('rw' unless a subclass says
                otherwise).
            parent: The PermStoreNode that contains this store as its value.

        Example:
            >>> PermStore({'a': 1, 'b': {'c': 2}})
            >>> PermStore(default_policy='r')
        """
        self._nodes: dict[str, PermStoreNode] = {}
        self._overrides: dict[str, str] = {}
        self._default_policy: str | None = None
        self.parent = parent

        if default_policy is not None:
            self.default_policy = default_policy

        self._load_defaults()

        if source is not None:
            if not isinstance(source, Mapping):
                raise TypeError(
                    f"source must be a mapping, not {type(source).__name__}"
                )
            self.write_entries(source)

    def _load_defaults(self) -> None:
        """Assign restrict() defaults declared along the class hierarchy.

        Plain values are deep-copied so that no instance shares a default
        object, nested stores included. Producers are kept as they are.
        """
        for cls in reversed(type(self).__mro__):
            defaults = cls.__dict__.get('_defaults')
            if not defaults:
                continue
            for label, value in defaults.items():
                if not callable(value):
                    value = copy.deepcopy(value)
                self._set_member(label, turn_into_store(value))

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        """Return string representation showing member labels."""
        return f"{type(self).__name__}({list(self._nodes.keys())})"

    def __len__(self) -> int:
        """Return the number of direct members in this store."""
        return len(self._nodes)

    def __iter__(self) -> Iterator[PermStoreNode]:
        """Iterate over direct member nodes in insertion order."""
        return iter(self._nodes.values())

    def __contains__(self, path: str) -> bool:
        """Check if a path exists, without checking permissions.

        Intermediate producers are resolved, the last member is not.
        """
        if SEPARATOR not in path:
            return path in self._nodes
        try:
            parent_store, label = self._htraverse(path)
        except PathNotFoundError:
            return False
        return label in parent_store._nodes

    def __getitem__(self, path: str) -> Any:
        """Alias for read()."""
        return self.read(path)

    def __setitem__(self, path: str, value: Any) -> None:
        """Alias for write()."""
        self.write(path, value)

    # ==================== Policy ====================

    @property
    def default_policy(self) -> str:
        """Policy applied to members without an explicit override."""
        if self._default_policy is not None:
            return self._default_policy
        return self._class_default_policy

    @default_policy.setter
    def default_policy(self, policy: str) -> None:
        self._default_policy = validate_policy(policy)

    def allowed_to_read(self, path: str) -> bool:
        """True if every hop of ``path`` is readable."""
        return is_nested_permission_allowed(self, path, READ)

    def allowed_to_write(self, path: str) -> bool:
        """True if every hop of ``path`` is writable."""
        return is_nested_permission_allowed(self, path, WRITE)

    # ==================== Path Utilities ====================

    def _set_member(self, label: str, value: Any) -> PermStoreNode:
        """Assign ``value`` to the direct member ``label`` without any check.

        An existing member keeps its position; a new one is appended.
        """
        validate_label(label)
        node = self._nodes.get(label)
        if node is None:
            node = PermStoreNode(label, value, parent=self)
            self._nodes[label] = node
        else:
            previous = node.value
            if isinstance(previous, PermStore) and previous is not value:
                previous.parent = None
            node.value = value
        if isinstance(value, PermStore):
            value.parent = node
        return node

    def _htraverse(
        self, path: str, autocreate: bool = False
    ) -> tuple[PermStore, str]:
        """Traverse path, optionally creating intermediate stores.

        Each intermediate member is resolved through its producer, if any.

        Args:
            path: Colon-delimited path.
            autocreate: If True, create missing intermediate members as
                empty stores.

        Returns:
            Tuple of (parent_store, final_label)

        Raises:
            PathNotFoundError: If a segment is missing, or resolves to
                something other than a store, and autocreate is False.
            NotAStoreError: If a segment resolves to something other than
                a store and autocreate is True.
        """
        parts = path.split(SEPARATOR)
        current = self

        for i, part in enumerate(parts[:-1]):
            node = current._nodes.get(part)
            if node is None:
                if not autocreate:
                    raise PathNotFoundError(path, part)
                node = current._set_member(part, PermStore())
                logger.debug("Created intermediate store '%s' in '%s'", part, path)

            target = node.resolve()
            if not isinstance(target, PermStore):
                if autocreate:
                    remaining = SEPARATOR.join(parts[i + 1:])
                    raise NotAStoreError(
                        f"'{part}' does not hold a store, cannot write '{remaining}'"
                    )
                raise PathNotFoundError(path, parts[i + 1])
            current = target

        return current, parts[-1]

    # ==================== Core API ====================

    def read(self, path: str) -> Any:
        """Get the value at the given path.

        The value is resolved through its producer, if any; intermediate
        producers are resolved while descending.

        Args:
            path: Colon-delimited path (e.g., 'config:database:host').

        Returns:
            The resolved value, or None if the last member does not exist.

        Raises:
            AccessDeniedError: If some hop of the path is not readable.
            PathNotFoundError: If an intermediate member does not exist.

        Example:
            >>> store.write('a:b', 5).read('a:b')
            5
        """
        node = self._read_node(path)
        if node is None:
            return None
        return node.resolve()

    def get_item(self, path: str, default: Any = None) -> Any:
        """Get the value at the given path, or ``default`` if missing.

        Unlike read(), a missing path is not an error. Access is still
        checked and denial still raises AccessDeniedError.
        """
        try:
            node = self._read_node(path)
        except PathNotFoundError:
            return default
        if node is None:
            return default
        return node.resolve()

    def _read_node(self, path: str) -> PermStoreNode | None:
        if not self.allowed_to_read(path):
            raise AccessDeniedError(path, READ)
        parent_store, label = self._htraverse(path)
        return parent_store._nodes.get(label)

    def write(self, path: str, value: Any) -> PermStore:
        """Set the value at the given path, creating intermediate stores.

        Mappings are converted into nested stores. Lists, scalars, stores
        and producers are stored as they are, replacing any previous value.

        Args:
            path: Colon-delimited path.
            value: The value to store.

        Returns:
            This store, for chaining.

        Raises:
            AccessDeniedError: If some hop of the path is not writable.
            InvalidLabelError: If the path has an empty segment.
            NotAStoreError: If an intermediate member holds a plain value.

        Example:
            >>> store.write('a', 1).write('b:c', [1, 2, 3])
        """
        if not self.allowed_to_write(path):
            raise AccessDeniedError(path, WRITE)
        for part in path.split(SEPARATOR):
            validate_label(part)

        parent_store, label = self._htraverse(path, autocreate=True)
        parent_store._set_member(label, turn_into_store(value))
        return self

    def write_entries(self, entries: Mapping[str, Any]) -> None:
        """Write each entry in iteration order.

        Not atomic: entries written before a failure are kept and the
        failure propagates.
        """
        for label, value in entries.items():
            self.write(label, value)

    def entries(self) -> dict[str, Any]:
        """Return readable top-level members with their raw values.

        Producers are returned as they are, not invoked. Unreadable
        members are omitted.
        """
        return {
            label: node.value
            for label, node in self._nodes.items()
            if self.allowed_to_read(label)
        }

    # ==================== Iteration ====================

    def keys(self) -> list[str]:
        """Return readable top-level labels in insertion order."""
        return list(self.entries().keys())

    def get_node(self, label: str) -> PermStoreNode | None:
        """Get the direct member node ``label``, without checking access."""
        return self._nodes.get(label)

    # ==================== Navigation ====================

    @property
    def root(self) -> PermStore:
        """Get the root PermStore of this hierarchy."""
        if self.parent is None or self.parent.parent is None:
            return self
        return self.parent.parent.root

    @property
    def depth(self) -> int:
        """Get the depth of this store in the hierarchy (root=0)."""
        if self.parent is None or self.parent.parent is None:
            return 0
        return self.parent.parent.depth + 1

    # ==================== Conversion ====================

    def as_dict(self) -> dict[str, Any]:
        """Convert readable members to a plain dict (recursive).

        Producers are resolved and nested stores are exported through
        their own readable members.
        """
        result: dict[str, Any] = {}
        for label, value in self.entries().items():
            value = consume(value)
            if isinstance(value, PermStore):
                value = value.as_dict()
            result[label] = value
        return result
