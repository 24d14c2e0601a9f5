"""Output document produced for one pack.

A :class:`CompendiumDocument` is what the translators' tooling consumes:

.. code-block:: json

    {
      "label": "Spells",
      "mapping": {
        "name": "name",
        "range": {"path": "data.range.value", "converter": "convertRange"}
      },
      "entries": {
        "Fireball": {"name": "Fireball", "description": "..."}
      }
    }

``entries`` is keyed by record display name.  Names are not unique in the
source data; a later record with the same name replaces the earlier one
and the collision is logged.

``mapping`` tells the converter how to put a translated field back into
the original document: either a plain source path or a ``{path,
converter}`` pair naming a unit/format conversion.  It is omitted entirely
for documents with no reinjection path (journal entries).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Converter:
    """A mapping target that needs a conversion on reinjection."""

    path: str
    converter: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "converter": self.converter}


MappingTarget = Union[str, Converter]


@dataclass
class CompendiumDocument:
    """Normalised, localisation-ready view of one pack.

    Attributes:
        label:   Pack label.
        entries: Record name -> emitted field set.
        mapping: Output field -> source path or converter, or ``None``
                 when the document has no reinjection mapping.
    """

    label: str
    entries: dict[str, dict[str, Any]] = field(default_factory=dict)
    mapping: dict[str, MappingTarget] | None = None

    def add_entry(self, name: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Store *fields* under *name* (last write wins) and return them."""
        if name in self.entries:
            logger.warning("Duplicate entry %r in %r: earlier record replaced", name, self.label)
        self.entries[name] = fields
        return fields

    def map_field(self, key: str, target: MappingTarget) -> None:
        if self.mapping is None:
            self.mapping = {}
        self.mapping[key] = target

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"label": self.label}
        if self.mapping is not None:
            out["mapping"] = {
                key: target.to_dict() if isinstance(target, Converter) else target
                for key, target in self.mapping.items()
            }
        out["entries"] = self.entries
        return out
