"""Platform abstraction layer."""

from .files import atomic_write_json, atomic_write_text
from .process import ProcessError, run, which

__all__ = [
    "ProcessError",
    "atomic_write_json",
    "atomic_write_text",
    "run",
    "which",
]
