"""Pack catalogue — YAML loader for the list of packs the tool works on.

The catalogue is a small declarative file (``config/packs.yaml`` by
default) that answers two questions the code should not hard-wire:

- which packs of the system archive ``extract`` reads
  (``enabled_packs``), and
- which Transifex resource each compendium is translated in
  (``resources``; ``null`` marks a compendium that is known but not
  translated on Transifex yet).

Design notes:
- The returned :class:`PackCatalogue` is frozen.
- :func:`load_pack_catalogue` raises :exc:`FileNotFoundError` if the file
  is absent and :exc:`ValueError` on schema validation failure.  Neither is
  caught here; the CLI reports both.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass(frozen=True)
class PackCatalogue:
    """Packs enabled for extraction and their Transifex resources.

    Attributes:
        version:                Schema version string from the YAML file.
        enabled_packs:          Pack names (manifest ``name``) to extract.
        resources:              Compendium name -> Transifex resource slug,
                                or ``None`` when not translated there.
        base_language_resource: Resource slug holding the base-language
                                string table (``en.json``).
    """

    version: str
    enabled_packs: tuple[str, ...]
    resources: dict[str, str | None]
    base_language_resource: str

    def is_enabled(self, pack_name: str) -> bool:
        return pack_name in self.enabled_packs

    def translated_resources(self) -> list[tuple[str, str]]:
        """``(compendium, resource)`` pairs that have a Transifex resource."""
        return [(name, res) for name, res in self.resources.items() if res]


def load_pack_catalogue(path: Path) -> PackCatalogue:
    """Load and validate a pack catalogue YAML file.

    Args:
        path: Location of the catalogue file.

    Returns:
        A fully-constructed, immutable :class:`PackCatalogue`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError:        On schema validation failure.
    """
    if not path.exists():
        raise FileNotFoundError(f"Pack catalogue not found: {path}")

    with path.open(encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    if not isinstance(raw, dict):
        raise ValueError(f"{path.name} must be a YAML mapping at the top level.")

    version = raw.get("version")
    if not version:
        raise ValueError(f"{path.name}: missing required field 'version'.")

    enabled_raw = raw.get("enabled_packs", [])
    if not isinstance(enabled_raw, list):
        raise ValueError(f"{path.name}: 'enabled_packs' must be a list.")
    for name in enabled_raw:
        if not isinstance(name, str) or not name:
            raise ValueError(f"{path.name}: enabled_packs entries must be strings, got {name!r}.")

    resources_raw = raw.get("resources", {}) or {}
    if not isinstance(resources_raw, dict):
        raise ValueError(f"{path.name}: 'resources' must be a mapping.")
    resources: dict[str, str | None] = {}
    for compendium, resource in resources_raw.items():
        if resource is not None and not isinstance(resource, str):
            raise ValueError(
                f"{path.name}: resources.{compendium} must be a string or null, got {resource!r}."
            )
        resources[str(compendium)] = resource

    base_language_resource = raw.get("base_language_resource", "enjson")
    if not isinstance(base_language_resource, str) or not base_language_resource:
        raise ValueError(f"{path.name}: 'base_language_resource' must be a non-empty string.")

    return PackCatalogue(
        version=str(version),
        enabled_packs=tuple(enabled_raw),
        resources=resources,
        base_language_resource=base_language_resource,
    )
