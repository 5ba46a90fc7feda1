"""Errors raised while turning an export into estate records."""

from __future__ import annotations


class TransformError(ValueError):
    """A person the plan cannot do without has no resolvable id."""
