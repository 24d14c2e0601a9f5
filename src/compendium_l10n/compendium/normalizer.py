"""Standard-value detection for spell range and casting time.

Foundry localises common range and time values itself ("30 feet",
"touch", "1 minute", "reaction", ...), so sending them to translators is
wasted work.  A field is emitted only when its value is *not* standard.
"""

from __future__ import annotations

import re

# Matched against the lower-cased value; the whole value must match.
_STANDARD_RANGE = re.compile(r"touch|planetary|[\d.,]+ (?:feet|miles?)")
_STANDARD_TIME = re.compile(r"1|2|3|reaction|free|[\d.,]+ (?:minutes?|days?|hours?)")


def is_standard_range(text: str) -> bool:
    """``True`` for ``touch``, ``planetary`` or ``<number> feet|mile(s)``."""
    return _STANDARD_RANGE.fullmatch(text.lower()) is not None


def is_standard_time(text: str) -> bool:
    """``True`` for ``1``-``3`` actions, ``reaction``, ``free`` or a plain duration."""
    return _STANDARD_TIME.fullmatch(text.lower()) is not None
