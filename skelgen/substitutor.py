"""
substitutor.py

Responsibility: Flat `${name}` substitution over a string.

Rules:
- Every `${key}` whose key is in the mapping is replaced by its value.
- Replacement is a single pass; inserted values are never scanned again.
- A placeholder left over afterwards is kept verbatim and, when a set is
  supplied, the first one found is recorded as unresolved.

No conditionals, loops or nested expressions: this is not a template engine.
"""

from __future__ import annotations

import re
from typing import Mapping

# Non-greedy by construction: `${a}${b}` is two placeholders, not one.
PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")


def placeholder(name: str) -> str:
    return "${" + name + "}"


def substitute(
    text: str,
    mapping: Mapping[str, str],
    unresolved: set[str] | None = None,
) -> tuple[str, bool]:
    """
    Substitute `${key}` placeholders in `text` with values from `mapping`.

    Returns (result, unresolved_found). When `unresolved` is given, the first
    placeholder remaining in the result is added to it.
    """
    if not text:
        return text, False

    def _replace(match: re.Match[str]) -> str:
        value = mapping.get(match.group(1))
        if value is None:
            return match.group(0)
        return value

    result = PLACEHOLDER_RE.sub(_replace, text) if mapping else text

    leftover = PLACEHOLDER_RE.search(result)
    if leftover is None:
        return result, False
    if unresolved is not None:
        unresolved.add(leftover.group(0))
    return result, True
