"""compendium-l10n — localization extractor for Foundry VTT compendium packs.

Reads the packs of a game system's released archive (monsters, items,
hazards, journal entries) and re-emits them as one JSON document per pack
holding only the text a translator actually has to translate, together
with the mapping metadata a downstream converter needs to reinject the
translated strings.  A second set of commands talks to Transifex: it
downloads finished translations and tags uploaded source strings with the
sourcebook they come from.

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version("compendium-l10n")
except PackageNotFoundError:
    __version__ = "0.3.0"
