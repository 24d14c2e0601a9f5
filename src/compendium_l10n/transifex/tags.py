"""Sourcebook citation -> Transifex tag slug.

Items carry a free-text ``source`` citation ("Pathfinder Bestiary 2",
"Pathfinder #148: Fires of the Haunted City", ...).  Translators filter
strings on Transifex by book, so uploaded strings are tagged with a
canonical slug per book.  The citation texts are inconsistent across
system releases (with and without the "Pathfinder" prefix, with and
without the adventure title, the occasional typo), hence the explicit
table of every variant seen so far.

:func:`classify` is a pure lookup:

- a known citation -> its slug,
- ``""`` -> :data:`UNKNOWN_TAG`,
- anything else -> ``None`` (the tagging pass logs it with the item name).
"""

from __future__ import annotations

from types import MappingProxyType

#: Tag for items whose citation is present but empty.
UNKNOWN_TAG = "unknown"

# slug -> every citation variant that maps to it
_CITATIONS_BY_TAG: dict[str, tuple[str, ...]] = {
    # ── Translated: core ──────────────────────────────────────────────────────
    "core-rulebook": ("Core Rulebook", "Pathfinder Core Rulebook"),
    "bestiary1": ("Bestiary", "Pathfinder Bestiary"),
    "gamemastery-guide": ("Gamemastery Guide", "Pathfinder Gamemastery Guide"),
    "bestiary2": ("Bestiary 2", "Pathfinder Bestiary 2"),
    "advanced-players-guide": (
        "Advanced Player's Guide",
        "Pathfinder Advanced Player's Guide",
    ),
    # ── Translated: Lost Omens ────────────────────────────────────────────────
    "character-guide": ("Character Guide", "Pathfinder Lost Omens: Character Guide"),
    "world-guide": (
        "World Guide",
        "Pathfinder Lost Omens: World Guide",
        "Pathfinder Lost Omens World Guide",
    ),
    "gods-and-magic": ("Gods & Magic", "Pathfinder Lost Omens: Gods & Magic"),
    # ── Translated: adventure paths ───────────────────────────────────────────
    "age-of-ashes1": (
        "Pathfinder: Age of Ashes Player's Guide",
        "Age of Ashes Player's Guide",
        "Pathfinder #145",
    ),
    "age-of-ashes2": ("Pathfinder #146",),
    "age-of-ashes3": ("Pathfinder #147", "Pathfinder #147: Tomorrow Must Burn"),
    "age-of-ashes4": ("Pathfinder #148", "Pathfinder #148: Fires of the Haunted City"),
    "age-of-ashes5": ("Pathfinder #149", "Pathfinder #149: Against the Scarlet Triad"),
    "age-of-ashes6": ("Pathfinder #150", "Pathfinder #150: Broken Promises"),
    "agents-of-edgewatch1": (
        "Pathfinder: Agents of Edgewatch Player's Guide",
        "Agents of Edgewatch Player's Guide",
        "Pathfinder #157",
        "Pathfinder #157: Devil at the Dreaming Palace",
    ),
    "agents-of-edgewatch2": ("Pathfinder #158", "Pathfinder #158: Sixty Feet Under"),
    "agents-of-edgewatch3": ("Pathfinder #159", "Pathfinder #159: All or Nothing"),
    "agents-of-edgewatch4": (
        "Pathfinder #160",
        "Pathfinder #160: Assault on Hunting Lodge Seven",
    ),
    "agents-of-edgewatch5": ("Pathfinder #161", "Pathfinder #161: Belly of the Black Whale"),
    "agents-of-edgewatch6": ("Pathfinder #162", "Pathfinder #162: Ruins of the Radiant Siege"),
    # ── Translated: adventures ────────────────────────────────────────────────
    "the-fall-of-plaguestone": (
        "The Fall of Plaguestone",
        "Pathfinder Adventure: The Fall of Plaguestone",
    ),
    # ── Not translated yet: core ──────────────────────────────────────────────
    "bestiary3": ("Bestiary 3", "Pathfinder Bestiary 3"),
    "beginner-box": ("Pathfinder Beginner Box: Hero's Handbook", "Pathfinder Beginner Box"),
    "secrets-of-magic": ("Secrets of Magic", "Pathfinder Secrets of Magic"),
    "guns-and-gears": (
        "Guns & Gears",
        "Pathfinder Guns and Gears",
        "Pathfinder Guns & Gears",
    ),
    # ── Not translated yet: Lost Omens ────────────────────────────────────────
    "ancestry-guide": ("Ancestry Guide", "Pathfinder Lost Omens: Ancestry Guide"),
    "legends": ("Legends", "Pathfinder Lost Omens: Legends"),
    "pfs-guide": (
        "PFS Guide",
        "Pathfinder Lost Omens: PFS Guide",
        "Pathfinder Lost Omens: Pathfinder Society Guide",
    ),
    "the-mwangi-expanse": ("The Mwangi Expanse", "Pathfinder Lost Omens: The Mwangi Expanse"),
    "grand-bazaar": (
        "Grand Bazaar",
        "Pathfinder Lost Omens: The Grand Bazaar",
        "Pathfinder Lost Omens: Grand Bazaar",
    ),
    # ── Not translated yet: adventure paths ───────────────────────────────────
    "extinction-curse1": (
        "Pathfinder: Extinction Curse Player's Guide",
        "Pathfinder #151",
        "Pathfinder #151: The Show Must Go On",
    ),
    "extinction-curse2": ("Pathfinder #152", "Pathfinder #152: Legacy of the Lost God"),
    "extinction-curse3": (
        "Pathfinder #153",
        "Pathfinder #153: Life's Long Shadows",
        "Pathfinder #153: Life's Long Shadow",
    ),
    "extinction-curse4": ("Pathfinder #154", "Pathfinder #154: Siege of the Dinosaurs"),
    "extinction-curse5": ("Pathfinder #155", "Pathfinder #155: Lord of the Black Sands"),
    "extinction-curse6": ("Pathfinder #156", "Pathfinder #156: The Apocalypse Prophet"),
    "abomination-vaults1": (
        "Abomination Vaults Player's Guide",
        "Pathfinder: Abomination Vaults Player's Guide",
        "Pathfinder #163",
        "Pathfinder #163: Ruins of Gauntlight",
    ),
    "abomination-vaults2": ("Pathfinder #164", "Pathfinder #164: Hands of the Devil"),
    "abomination-vaults3": (
        "Pathfinder #165",
        "Patfinder #165: Eyes of Empty Death",
        "Pathfinder #165: Eyes of Empty Death",
    ),
    "fists-of-the-ruby-phoenix1": (
        "Pathfinder: Fists of the Ruby Phoenix Player's Guide",
        "Pathfinder #166",
        "Pathfinder #166: Despair on Danger Island",
    ),
    "fists-of-the-ruby-phoenix2": ("Pathfinder #167", "Pathfinder #167: Ready? Fight!"),
    "fists-of-the-ruby-phoenix3": (
        "Pathfinder #168",
        "Patfinder #168: King of the Mountain",
        "Pathfinder #168: King of the Mountain",
    ),
    "strength-of-thousands1": (
        "Strength of Thousands Player's Guide",
        "Pathfinder #169",
        "Pathfinder #169: Kindled Magic",
    ),
    "strength-of-thousands2": ("Pathfinder #170", "Pathfinder #170: Spoken on the Song Wind"),
    "strength-of-thousands3": ("Pathfinder #171",),
    "strength-of-thousands4": ("Pathfinder #172",),
    "quest-for-the-frozen-flame1": ("Pathfinder: Quest for the Frozen Flame Player's Guide",),
    # ── Not translated yet: adventures ────────────────────────────────────────
    "the-slithering": ("The Slithering", "Pathfinder Adventure: The Slithering"),
    "troubles-in-otari": ("Troubles in Otari",),
    "malevolence": ("Malevolence", "Pathfinder Adventure: Malevolence"),
    "night-of-the-gray-death": (
        "Night of the Gray Death",
        "Pathfinder Adventure: Night of the Gray Death",
    ),
    # ── Web supplements ───────────────────────────────────────────────────────
    "azarketi-ancestry-web-supplement": ("Azarketi Ancestry Web Supplement",),
    "little-trouble-in-big-absalom": ("Pathfinder Adventure: Little Trouble in Big Absalom",),
    "redpitch-alchemy": ("Pathfinder Adventure: Redpitch Alchemy",),
}

#: citation -> slug
SOURCE_TAGS = MappingProxyType(
    {citation: tag for tag, citations in _CITATIONS_BY_TAG.items() for citation in citations}
)


def classify(citation: str | None) -> str | None:
    """Tag slug for a sourcebook citation.

    Returns :data:`UNKNOWN_TAG` for an empty citation, ``None`` for a
    missing or unrecognised one.
    """
    if citation is None:
        return None
    if citation == "":
        return UNKNOWN_TAG
    return SOURCE_TAGS.get(citation)
