"""Resolve which releases and candidates a run compares."""

from __future__ import annotations
