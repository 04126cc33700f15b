"""Locator text parser.

Pure string splitting; field checks are delegated to a ``ValidationRuleSet``.
"""

from __future__ import annotations

from ..errors import LocatorSyntaxError
from .locator import Locator
from .validation import DEFAULT_RULES, ValidationRuleSet

LOCATOR_FORM = "{<remote>/}<owner>/<module>{:<ref>}"


def resolve(
    text: str,
    rules: ValidationRuleSet = DEFAULT_RULES,
) -> tuple[str | None, Locator | None]:
    """Parse ``text`` into ``(remote, locator)``.

    Empty text yields ``(None, None)``. Malformed text raises
    ``LocatorSyntaxError``; a locator rejected by ``rules`` raises the rule
    set's ``LocatorValidationError``. Input is used verbatim.
    """
    if text == "":
        return None, None

    if text.count(":") > 1:
        raise LocatorSyntaxError(f'expecting reference of form {LOCATOR_FORM}, got multiple ":" in {text}')

    # Only the part before ":" is split on "/"; refs may contain it.
    path, has_ref, ref = text.partition(":")
    slash_count = path.count("/")
    if slash_count not in (1, 2):
        raise LocatorSyntaxError(f"expecting reference of form {LOCATOR_FORM}, got {text}")

    remote: str | None = None
    if slash_count == 2:
        remote, _, path = path.partition("/")
    owner, _, module = path.partition("/")

    locator = Locator(
        owner=owner,
        module=module,
        ref=ref if has_ref else None,
        remote=remote,
    )
    error = rules.validate(locator)
    if error is not None:
        raise error
    return remote, locator
