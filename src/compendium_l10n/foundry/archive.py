"""Archive provider: system manifest, release archive, in-archive lookup.

``ArchiveProvider`` is a thin, synchronous wrapper around the two HTTP
calls the extractor makes against the system's release host:

1. ``fetch_manifest`` — GET ``system.json`` and validate it into a
   :class:`~compendium_l10n.foundry.manifest.SystemManifest`.
2. ``download_archive`` — stream the release zip named by the manifest's
   ``download`` URL to disk.

``open_archive`` then returns a :class:`SystemArchive`, a read-only
path-to-bytes lookup over the zip with helpers that parse packs and the
base-language table.

Archive paths
-------------
Manifest pack paths are relative to the system root folder inside the
archive (``pf2e/`` for the Pathfinder 2e system).  Lookups join that
folder with the manifest path and normalise the result, so
``./pf2e/packs/spells.db`` and ``pf2e/packs/spells.db`` resolve to the same
member.
"""

from __future__ import annotations

import json
import logging
import posixpath
import zipfile
from collections.abc import Iterable
from pathlib import Path

import requests
from pydantic import ValidationError

from compendium_l10n.errors import ArchiveError
from compendium_l10n.foundry.manifest import ManifestPack, SystemManifest
from compendium_l10n.foundry.records import Pack, PackKind, parse_pack

logger = logging.getLogger(__name__)

# Download chunk size for the release archive.
_CHUNK_BYTES = 1 << 16


def _member_path(*parts: str) -> str:
    return posixpath.normpath(posixpath.join(*parts)).lstrip("/")


class SystemArchive:
    """Read-only view over an opened system release archive.

    Attributes:
        _zip:        Open ``zipfile.ZipFile``.
        _system_dir: Root folder of the system inside the archive.
        _members:    Normalised member path -> zip member name.
    """

    def __init__(self, zf: zipfile.ZipFile, *, system_dir: str) -> None:
        self._zip = zf
        self._system_dir = system_dir
        self._members = {_member_path(n): n for n in zf.namelist() if not n.endswith("/")}

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> SystemArchive:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def system_path(self, path: str) -> str:
        """Archive member path for a path relative to the system root."""
        return _member_path(self._system_dir, path)

    def has(self, path: str) -> bool:
        return self.system_path(path) in self._members

    def read(self, path: str) -> bytes:
        """Raw bytes of a file relative to the system root.

        Raises:
            ArchiveError: If the file is not in the archive.
        """
        member = self._members.get(self.system_path(path))
        if member is None:
            raise ArchiveError(f"{self.system_path(path)} not found in archive")
        return self._zip.read(member)

    def read_pack(self, entry: ManifestPack) -> Pack:
        """Parse the pack described by a manifest entry."""
        kind = PackKind.parse(entry.type, pack_name=entry.name)
        return parse_pack(entry.name, entry.label, kind, self.read(entry.path))

    def read_packs(self, manifest: SystemManifest, enabled: Iterable[str]) -> list[Pack]:
        """Parse every enabled pack present in the archive, in manifest order.

        Enabled packs whose file is missing from the archive are skipped
        with a warning; the manifest routinely lists packs a given build
        does not ship.
        """
        wanted = set(enabled)
        packs: list[Pack] = []
        for entry in manifest.packs:
            if entry.name not in wanted:
                continue
            if not self.has(entry.path):
                logger.warning("Pack %s (%s) missing from archive, skipped", entry.name, entry.path)
                continue
            pack = self.read_pack(entry)
            logger.info("Read pack %s: %d records", pack.name, len(pack.records))
            packs.append(pack)
        return packs

    def read_base_language(self, path: str) -> dict:
        """Parse the base-language string table (``lang/en.json``)."""
        try:
            return json.loads(self.read(path).decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise ArchiveError(f"{self.system_path(path)} is not valid JSON: {exc}") from exc


class ArchiveProvider:
    """Fetches the system manifest and release archive.

    Attributes:
        _manifest_url: Full ``system.json`` URL.
        _system_dir:   Root folder of the system inside the archive.
        _timeout:      HTTP timeout in seconds.
    """

    def __init__(self, *, manifest_url: str, system_dir: str, timeout_seconds: float) -> None:
        self._manifest_url = manifest_url
        self._system_dir = system_dir
        self._timeout = timeout_seconds

    def fetch_manifest(self) -> SystemManifest:
        """Download and validate the system manifest.

        Raises:
            ArchiveError: On network failure, non-2xx status, or a manifest
                          that does not validate.
        """
        try:
            response = requests.get(self._manifest_url, timeout=self._timeout)
            response.raise_for_status()
            manifest = SystemManifest.model_validate(response.json())
        except requests.exceptions.RequestException as exc:
            raise ArchiveError(f"cannot fetch manifest {self._manifest_url}: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise ArchiveError(f"invalid manifest at {self._manifest_url}: {exc}") from exc

        logger.info("Manifest %s version %s: %d packs", manifest.name, manifest.version,
                    len(manifest.packs))
        return manifest

    def download_archive(self, url: str, dest: Path) -> Path:
        """Stream the release archive to *dest*, replacing any previous file.

        Raises:
            ArchiveError: On network failure or non-2xx status.
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.unlink(missing_ok=True)
        try:
            with requests.get(url, stream=True, timeout=self._timeout) as response:
                response.raise_for_status()
                with dest.open("wb") as fh:
                    for chunk in response.iter_content(chunk_size=_CHUNK_BYTES):
                        fh.write(chunk)
        except requests.exceptions.RequestException as exc:
            dest.unlink(missing_ok=True)
            raise ArchiveError(f"cannot download archive {url}: {exc}") from exc

        logger.info("Downloaded %s (%d bytes)", dest, dest.stat().st_size)
        return dest

    def open_archive(self, path: Path) -> SystemArchive:
        """Open a downloaded archive for lookup.

        Raises:
            ArchiveError: If the file is not a readable zip.
        """
        try:
            zf = zipfile.ZipFile(path)
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArchiveError(f"cannot open archive {path}: {exc}") from exc
        return SystemArchive(zf, system_dir=self._system_dir)
