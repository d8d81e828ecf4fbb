# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""PermStore package - Hierarchical data container with access policies.

The package is organized into:
- core: Main PermStore class with path traversal, policy checks and access
- loading: Conversion of plain mappings into nested PermStore trees

Example:
    >>> from genro_permstore import PermStore
    >>> store = PermStore()
    >>> store.write('config:name', 'MyApp')
    >>> store['config:name']
    'MyApp'
"""

from .core import PermStore
from .loading import turn_into_store

__all__ = ["PermStore", "turn_into_store"]
