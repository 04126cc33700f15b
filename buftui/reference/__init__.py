"""Locator parsing and validation.

``resolve`` turns ``[<remote>/]<owner>/<module>[:<ref>]`` text into a
``Locator``; structural rules live in ``validation`` and are applied unchanged.
"""

from __future__ import annotations

from .locator import Locator, format_locator
from .resolver import LOCATOR_FORM, resolve
from .validation import DEFAULT_RULES, ValidationRuleSet

__all__ = [
    "DEFAULT_RULES",
    "LOCATOR_FORM",
    "Locator",
    "ValidationRuleSet",
    "format_locator",
    "resolve",
]
