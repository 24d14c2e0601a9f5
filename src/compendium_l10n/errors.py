"""Typed exceptions for the extraction engine and its collaborators.

The hierarchy separates three failure families:

- **Schema violations** — the source data no longer matches the closed
  vocabularies the engine dispatches on (embedded item types, pack
  kinds).  These are fatal: a partially deduplicated document is worse
  than a clear failure, so nothing in the engine catches them.
- **Archive failures** — the system manifest or archive could not be
  fetched, or an expected file is missing or malformed.
- **Translation service failures** — Transifex returned an HTTP error, a
  download job reported ``failed``, or a job never reached a terminal
  state.  These carry the resource id and job URL so an operator can
  retry by hand.

Missing optional record fields are *not* errors anywhere in the package;
they are modelled as ``None`` and simply never emitted.
"""

from __future__ import annotations


class CompendiumError(RuntimeError):
    """Base exception for every failure raised by this package."""


# ── Schema violations ─────────────────────────────────────────────────────────


class SchemaViolationError(CompendiumError):
    """Source data uses a value outside a closed vocabulary."""


class UnknownItemTypeError(SchemaViolationError):
    """A creature embeds an item whose ``type`` is not recognised.

    Args:
        item_type:   The unrecognised type tag.
        record_name: Name of the creature that embeds the item.
        pack_name:   Pack being transformed when the item was met.
    """

    def __init__(self, item_type: str, *, record_name: str = "", pack_name: str = "") -> None:
        message = f"unknown item type: {item_type}"
        if record_name:
            message = f"{message} (creature {record_name!r} in pack {pack_name!r})"
        super().__init__(message)
        self.item_type = item_type
        self.record_name = record_name
        self.pack_name = pack_name


class UnsupportedPackKindError(SchemaViolationError):
    """The router received a pack whose kind has no transformer."""

    def __init__(self, kind: str, *, pack_name: str = "") -> None:
        message = f"not implemented: {kind}"
        if pack_name:
            message = f"{message} (pack {pack_name!r})"
        super().__init__(message)
        self.kind = kind
        self.pack_name = pack_name


# ── Archive ───────────────────────────────────────────────────────────────────


class ArchiveError(CompendiumError):
    """Manifest or archive could not be fetched, opened or read."""


# ── Translation service ───────────────────────────────────────────────────────


class TranslationServiceError(CompendiumError):
    """An HTTP request to the translation service failed.

    Args:
        message:     Human-readable description.
        status_code: HTTP status, ``0`` when no response was received.
        url:         Request URL.
    """

    def __init__(self, message: str, *, status_code: int = 0, url: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class TranslationJobError(TranslationServiceError):
    """An asynchronous download job finished in the ``failed`` state.

    The message is the job's own error list (``"<code>: <detail>"`` joined
    with ``", "``) or ``"generic error"`` when the job reported none.
    """

    def __init__(self, message: str, *, resource_id: str, job_url: str) -> None:
        super().__init__(message, url=job_url)
        self.resource_id = resource_id
        self.job_url = job_url

    def __str__(self) -> str:
        return f"{self.args[0]} (resource {self.resource_id}, job {self.job_url})"


class TranslationJobTimeoutError(TranslationJobError):
    """A download job stayed ``pending``/``processing`` past the poll timeout."""


class ResourceParseError(CompendiumError):
    """Downloaded resource content is not valid JSON, even after repair."""
