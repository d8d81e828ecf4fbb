# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Conversion of plain data into PermStore trees.

Only mappings are converted: each one becomes a fresh PermStore with the
default policy, recursively. Lists, tuples, scalars, stores and producers
are kept as they are.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .core import PermStore

logger = logging.getLogger(__name__)


def is_plain_mapping(value: Any) -> bool:
    """True if ``value`` is a mapping that should become a nested store."""
    from .core import PermStore
    return isinstance(value, Mapping) and not isinstance(value, PermStore)


def turn_into_store(value: Any) -> Any:
    """Convert a plain mapping into a new PermStore, else return value.

    Example:
        >>> store = turn_into_store({'a': 1, 'b': {'c': 2}})
        >>> store.read('b:c')
        2
        >>> turn_into_store([1, 2])
        [1, 2]
    """
    from .core import PermStore

    if not is_plain_mapping(value):
        return value
    store = PermStore()
    load_from_dict(store, value)
    return store


def load_from_dict(store: PermStore, data: Mapping[str, Any]) -> None:
    """Assign every entry of ``data`` as a member of a freshly created store.

    Entries are assigned directly, one at a time, in iteration order, and
    nested mappings are converted recursively.

    Raises:
        InvalidLabelError: If a key is empty or contains ':'.
    """
    logger.debug("Converting mapping with keys %s", list(data))
    for label, value in data.items():
        store._set_member(label, turn_into_store(value))
