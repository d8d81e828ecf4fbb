# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Lazy value resolution.

A member value may be a producer: a zero-argument callable stored in place
of the value itself. Producers are invoked on every resolution and their
result is never cached, so successive reads can observe different values.
"""

from __future__ import annotations

from typing import Any


def consume(value: Any) -> Any:
    """Resolve a member value, invoking it if it is a producer.

    Args:
        value: A stored member value.

    Returns:
        The producer's return value if ``value`` is callable, otherwise
        ``value`` unchanged.

    Example:
        >>> consume(42)
        42
        >>> consume(lambda: 42)
        42
    """
    if callable(value):
        return value()
    return value
