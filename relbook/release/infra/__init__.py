"""Adapters to gh, ocm, git and the generated JSON files.

Every function returns a `Result`; nothing here raises for expected
failures except `RegistryDataSource`, whose protocol has no error channel.
"""

from __future__ import annotations
