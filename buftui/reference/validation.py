"""Field rules for locators and bare owner names.

Bounds follow the registry's published constraints on owner, module, and
ref names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import LocatorValidationError
from .locator import Locator

_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")


@dataclass(frozen=True)
class ValidationRuleSet:
    """Length and charset limits applied to parsed locators."""

    owner_min_len: int = 1
    owner_max_len: int = 32
    module_min_len: int = 2
    module_max_len: int = 100
    ref_max_len: int = 250

    def _check_name(self, field: str, value: str, min_len: int, max_len: int) -> LocatorValidationError | None:
        if len(value) < min_len:
            if not value:
                return LocatorValidationError(field, "value is required")
            return LocatorValidationError(field, f"value length must be at least {min_len} characters")
        if len(value) > max_len:
            return LocatorValidationError(field, f"value length must be at most {max_len} characters")
        if _NAME_RE.match(value) is None:
            return LocatorValidationError(
                field,
                "value must contain only letters, digits, '.', '_' or '-'",
            )
        return None

    def validate_owner(self, owner: str) -> LocatorValidationError | None:
        """Return the rule violation for a bare owner name, if any."""
        return self._check_name("owner", owner, self.owner_min_len, self.owner_max_len)

    def validate(self, locator: Locator) -> LocatorValidationError | None:
        """Return the first rule violation in ``locator``, or ``None``."""
        if locator.remote is not None and not locator.remote:
            return LocatorValidationError("remote", "value is required")
        error = self.validate_owner(locator.owner)
        if error is not None:
            return error
        error = self._check_name("module", locator.module, self.module_min_len, self.module_max_len)
        if error is not None:
            return error
        if locator.ref is not None:
            if not locator.ref:
                return LocatorValidationError("ref", "value is required after ':'")
            if len(locator.ref) > self.ref_max_len:
                return LocatorValidationError("ref", f"value length must be at most {self.ref_max_len} characters")
            if any(ch.isspace() for ch in locator.ref):
                return LocatorValidationError("ref", "value must not contain whitespace")
        return None


DEFAULT_RULES = ValidationRuleSet()
