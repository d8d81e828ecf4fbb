# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Access policies for PermStore members.

A policy is one of ``'none'``, ``'r'``, ``'w'`` or ``'rw'``. Every store has
a default policy, and individual members may carry an override declared
either on the store class or on a single instance:

    class Session(PermStore):
        user_id = restrict('r', default=0)   # read-only, starts at 0
        token = restrict()                   # no access at all

    declare_override(Session, 'nickname', 'rw')
    declare_override(session, 'token', 'w')  # this instance only

Permissions along a colon-delimited path are checked hop by hop. An override
for a segment is looked up on the store that contains it, relative to that
store, so declarations are local to the level they are made on. A nested
store without such an override is guarded by its own default policy.
"""

from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from .exceptions import InvalidPolicyError
from .node import SEPARATOR, validate_label
from .resolvers import consume

if TYPE_CHECKING:
    from .store import PermStore

logger = logging.getLogger(__name__)

NONE = 'none'
READ = 'r'
WRITE = 'w'
READ_WRITE = 'rw'

POLICIES = frozenset({NONE, READ, WRITE, READ_WRITE})

MISSING: Any = object()


def validate_policy(policy: str) -> str:
    """Return ``policy`` unchanged if valid.

    Raises:
        InvalidPolicyError: If policy is not one of 'none', 'r', 'w', 'rw'.
    """
    if policy not in POLICIES:
        raise InvalidPolicyError(
            f"Invalid policy {policy!r}, expected one of {sorted(POLICIES)}"
        )
    return policy


def is_permitted(policy: str, permission: str) -> bool:
    """True if ``policy`` grants ``permission`` ('r' or 'w')."""
    return permission in policy


class Restriction:
    """Class-level marker declaring a member policy and optional default.

    Created by :func:`restrict` and consumed by ``PermStore.__init_subclass__``,
    which removes the marker from the class namespace.
    """

    __slots__ = ('policy', 'default')

    def __init__(self, policy: str = NONE, default: Any = MISSING) -> None:
        self.policy = validate_policy(policy)
        self.default = default

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def __repr__(self) -> str:
        if self.has_default:
            return f"Restriction({self.policy!r}, default={self.default!r})"
        return f"Restriction({self.policy!r})"


def restrict(policy: str = NONE, default: Any = MISSING) -> Restriction:
    """Declare a restricted member on a PermStore subclass.

    Args:
        policy: Policy for the member. Defaults to 'none' (no access).
        default: Optional initial value assigned to every new instance,
            bypassing permission checks. Each instance gets its own deep
            copy; dicts are converted to stores, producers are stored as
            they are.

    Example:
        >>> class Config(PermStore):
        ...     version = restrict('r', default='1.0')
        >>> Config().read('version')
        '1.0'
    """
    return Restriction(policy, default)


def declare_override(target: Any, name: str, policy: str) -> None:
    """Register a policy override for member ``name``.

    Args:
        target: A PermStore subclass (affects all its instances and those
            of its subclasses) or a PermStore instance (affects only it).
        name: Member label, relative to the store.
        policy: One of 'none', 'r', 'w', 'rw'.

    Raises:
        TypeError: If target is neither a PermStore class nor an instance.
    """
    from .store import PermStore

    validate_policy(policy)
    validate_label(name)
    if isinstance(target, type) and issubclass(target, PermStore):
        if '_restrictions' not in target.__dict__:
            target._restrictions = {}
        target._restrictions[name] = policy
    elif isinstance(target, PermStore):
        target._overrides[name] = policy
    else:
        raise TypeError(
            f"target must be a PermStore class or instance, not {type(target).__name__}"
        )


def _declared_policy(store_class: type, key: str) -> str | None:
    """Nearest class-level declaration for ``key`` along the MRO."""
    for cls in store_class.__mro__:
        restrictions = cls.__dict__.get('_restrictions')
        if restrictions and key in restrictions:
            return restrictions[key]
    return None


def explicit_policy(store: PermStore, key: str) -> str | None:
    """Return the override declared for ``key`` on ``store``, or None.

    Instance overrides win over class declarations.
    """
    policy = store._overrides.get(key)
    if policy is None:
        policy = _declared_policy(type(store), key)
    return policy


def get_policy(store: PermStore, key: str) -> str:
    """Return the effective policy of ``key`` on ``store``.

    The declared override if any, else the store's default policy.
    Never looks into nested stores.
    """
    policy = explicit_policy(store, key)
    if policy is None:
        policy = store.default_policy
    return policy


def is_nested_permission_allowed(store: PermStore, path: str, permission: str) -> bool:
    """Check ``permission`` on every hop of ``path`` starting from ``store``.

    The walk keeps the nearest enclosing store and the path relative to it.
    An override declared on that store for the segment decides the hop, and
    is checked before the member is resolved. Without an override, a member
    holding a nested store is governed by that store's own default policy,
    anything else by the enclosing store's default. Reaching a nested store
    rebases the walk onto it. The first failing hop denies the whole path.
    Missing segments are not an error: they simply leave the walk on the
    last store reached. The last member is never resolved, so a producer
    there is neither invoked nor consulted.

    Args:
        store: Root of the walk.
        path: Colon-delimited path.
        permission: 'r' or 'w'.

    Returns:
        True if every hop grants the permission.
    """
    from .store import PermStore

    segments = path.split(SEPARATOR)
    last = len(segments) - 1
    target: Any = store
    deepest = store
    current = ''

    for i, segment in enumerate(segments):
        current = f"{current}{SEPARATOR}{segment}" if current else segment
        policy = explicit_policy(deepest, current)

        if policy is None or is_permitted(policy, permission):
            node = target.get_node(segment) if isinstance(target, PermStore) else None
            if node is None:
                target = None
            elif i == last:
                target = node.value
            else:
                target = consume(node.value)
            if policy is None:
                owner = target if isinstance(target, PermStore) else deepest
                policy = owner.default_policy

        if not is_permitted(policy, permission):
            logger.debug(
                "Denied %r on %r: policy %r for %r", permission, path, policy, current
            )
            return False
        if isinstance(target, PermStore):
            deepest = target
            current = ''

    return True
