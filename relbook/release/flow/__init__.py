"""Release pipeline steps: each returns a `Result` and reports through a console."""

from __future__ import annotations
