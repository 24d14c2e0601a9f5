"""
Pydantic models for the Foundry VTT system manifest (``system.json``).

The manifest is the only document the extractor reads before downloading
the archive.  It lists every pack the system ships (name, label, kind and
the pack's path inside the archive), the language files, the release
version and the archive download URL.

Only the fields the extractor uses are modelled; everything else in
``system.json`` is ignored.  Older system builds name the pack kind
``entity`` and newer ones ``type``; both are accepted.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ManifestPack(BaseModel):
    """
    One pack entry of the manifest.

    Attributes:
        name: Pack identifier, unique within the system (e.g. "spells-srd")
        label: Display label (e.g. "Spells")
        path: Pack file path relative to the system root (e.g. "packs/spells.db")
        type: Document kind ("Actor", "Item", "JournalEntry", "Macro", "RollTable")
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    label: str
    path: str
    type: str

    @model_validator(mode="before")
    @classmethod
    def _accept_entity(cls, data):
        if isinstance(data, dict) and "type" not in data and "entity" in data:
            data = {**data, "type": data["entity"]}
        return data


class ManifestLanguage(BaseModel):
    """A language file shipped with the system."""

    model_config = ConfigDict(extra="ignore")

    lang: str
    name: str = ""
    path: str


class SystemManifest(BaseModel):
    """
    The subset of ``system.json`` the extractor depends on.

    Attributes:
        name: System id (e.g. "pf2e")
        version: Release version, written to the changelog line
        download: URL of the release archive
        packs: Packs in manifest order
        languages: Language files
    """

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    version: str
    download: str
    packs: list[ManifestPack] = Field(default_factory=list)
    languages: list[ManifestLanguage] = Field(default_factory=list)
