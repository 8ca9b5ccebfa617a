"""Command line interface (`relbook ...`)."""

from __future__ import annotations
