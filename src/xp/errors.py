"""Exceptions raised by the XP filter package."""

from __future__ import annotations


class XPFilterError(Exception):
    """Base class for XP filter errors."""


class RuleDefinitionError(XPFilterError):
    """A rule payload could not be built or decoded."""
