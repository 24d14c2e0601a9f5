"""
Extractor configuration management.

This module handles loading and accessing configuration from multiple sources
with a clear priority order:

    1. Environment variables (highest priority) - for CI jobs
    2. Config file (config/extractor.ini) - for local runs
    3. Built-in defaults (lowest priority) - sensible fallbacks

The ExtractorConfig dataclass provides typed access to all settings.  Unlike
a long-running server, every CLI invocation calls :func:`load_config` itself
so that ``--config`` can point at a different INI file.

Usage:
    from compendium_l10n.config import load_config

    cfg = load_config()
    print(cfg.source.manifest_url)
    print(cfg.transifex.resource_id("spells"))

Environment Variable Mapping:
    COMPENDIUM_SOURCE_URL     -> source.base_url
    COMPENDIUM_HTTP_TIMEOUT   -> source.timeout_seconds
    COMPENDIUM_OUTPUT_DIR     -> paths.output_dir
    COMPENDIUM_WORK_DIR       -> paths.work_dir
    COMPENDIUM_PACKS_FILE     -> paths.packs_file
    COMPENDIUM_LANGUAGE       -> transifex.language
    COMPENDIUM_LOG_LEVEL      -> logging.level
    TTOKEN                    -> transifex.token
"""

import configparser
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Project root directory (contains src/, config/)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Config file paths
CONFIG_DIR = PROJECT_ROOT / "config"
CONFIG_FILE = CONFIG_DIR / "extractor.ini"
CONFIG_EXAMPLE = CONFIG_DIR / "extractor.example.ini"

DEFAULT_SOURCE_URL = (
    "https://gitlab.com/hooking/foundry-vtt---pathfinder-2e/-/jobs/artifacts/master/raw"
)


def _resolve(path: str) -> Path:
    p = Path(path)
    if p.is_absolute():
        return p
    return PROJECT_ROOT / p


# =============================================================================
# CONFIGURATION DATACLASSES
# =============================================================================


@dataclass
class SourceSettings:
    """Where the system manifest and archive are fetched from."""

    base_url: str = DEFAULT_SOURCE_URL
    manifest_path: str = "system.json?job=build"
    system_dir: str = "pf2e"
    base_language_path: str = "lang/en.json"
    timeout_seconds: float = 60.0

    @property
    def manifest_url(self) -> str:
        """Full URL of the system manifest."""
        return f"{self.base_url.rstrip('/')}/{self.manifest_path.lstrip('/')}"


@dataclass
class PathSettings:
    """Output and scratch locations."""

    output_dir: str = "out"
    work_dir: str = "tmp"
    packs_file: str = "config/packs.yaml"

    @property
    def output_path(self) -> Path:
        return _resolve(self.output_dir)

    @property
    def work_path(self) -> Path:
        return _resolve(self.work_dir)

    @property
    def packs_path(self) -> Path:
        return _resolve(self.packs_file)

    @property
    def compendium_path(self) -> Path:
        """Directory holding one JSON document per pack."""
        return self.output_path / "compendium"


@dataclass
class TransifexSettings:
    """Transifex REST API access."""

    api_url: str = "https://rest.api.transifex.com"
    token: str = ""
    organization: str = "foundryvtt-ita"
    project: str = "pathfinder-2e-2"
    language: str = "it"
    poll_interval_seconds: float = 0.2
    poll_timeout_seconds: float = 300.0
    max_concurrency: int = 4

    def resource_id(self, resource: str) -> str:
        """Fully-qualified Transifex resource id for a resource slug."""
        return f"o:{self.organization}:p:{self.project}:r:{resource}"

    @property
    def language_id(self) -> str:
        return f"l:{self.language}"


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["simple", "detailed"] = "detailed"


@dataclass
class ExtractorConfig:
    """
    Complete extractor configuration.

    Aggregates all settings sections.  Built by :func:`load_config`.
    """

    source: SourceSettings = field(default_factory=SourceSettings)
    paths: PathSettings = field(default_factory=PathSettings)
    transifex: TransifexSettings = field(default_factory=TransifexSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


# =============================================================================
# CONFIGURATION LOADING
# =============================================================================


def _load_from_ini(parser: configparser.ConfigParser, cfg: ExtractorConfig) -> None:
    """Load configuration from parsed INI file into ExtractorConfig."""
    # Source section
    if parser.has_section("source"):
        for key in ("base_url", "manifest_path", "system_dir", "base_language_path"):
            if parser.has_option("source", key):
                setattr(cfg.source, key, parser.get("source", key))
        if parser.has_option("source", "timeout_seconds"):
            cfg.source.timeout_seconds = parser.getfloat("source", "timeout_seconds")

    # Paths section
    if parser.has_section("paths"):
        for key in ("output_dir", "work_dir", "packs_file"):
            if parser.has_option("paths", key):
                setattr(cfg.paths, key, parser.get("paths", key))

    # Transifex section
    if parser.has_section("transifex"):
        for key in ("api_url", "token", "organization", "project", "language"):
            if parser.has_option("transifex", key):
                setattr(cfg.transifex, key, parser.get("transifex", key))
        if parser.has_option("transifex", "poll_interval_seconds"):
            cfg.transifex.poll_interval_seconds = parser.getfloat(
                "transifex", "poll_interval_seconds"
            )
        if parser.has_option("transifex", "poll_timeout_seconds"):
            cfg.transifex.poll_timeout_seconds = parser.getfloat(
                "transifex", "poll_timeout_seconds"
            )
        if parser.has_option("transifex", "max_concurrency"):
            cfg.transifex.max_concurrency = parser.getint("transifex", "max_concurrency")

    # Logging section
    if parser.has_section("logging"):
        if parser.has_option("logging", "level"):
            cfg.logging.level = parser.get("logging", "level").upper()
        if parser.has_option("logging", "format"):
            val = parser.get("logging", "format").lower()
            if val in ("simple", "detailed"):
                cfg.logging.format = val  # type: ignore[assignment]


def _apply_env_overrides(cfg: ExtractorConfig) -> None:
    """Apply environment variable overrides to configuration."""
    if env_url := os.getenv("COMPENDIUM_SOURCE_URL"):
        cfg.source.base_url = env_url
    if env_timeout := os.getenv("COMPENDIUM_HTTP_TIMEOUT"):
        cfg.source.timeout_seconds = float(env_timeout)

    if env_out := os.getenv("COMPENDIUM_OUTPUT_DIR"):
        cfg.paths.output_dir = env_out
    if env_work := os.getenv("COMPENDIUM_WORK_DIR"):
        cfg.paths.work_dir = env_work
    if env_packs := os.getenv("COMPENDIUM_PACKS_FILE"):
        cfg.paths.packs_file = env_packs

    # TTOKEN is the name the CI secrets already use.
    if env_token := os.getenv("TTOKEN"):
        cfg.transifex.token = env_token
    if env_lang := os.getenv("COMPENDIUM_LANGUAGE"):
        cfg.transifex.language = env_lang

    if env_log := os.getenv("COMPENDIUM_LOG_LEVEL"):
        cfg.logging.level = env_log.upper()


def load_config(config_file: Path | None = None) -> ExtractorConfig:
    """
    Load configuration from all sources with proper priority.

    Priority (highest wins):
        1. Environment variables
        2. ``config_file`` if given, else config/extractor.ini
        3. config/extractor.example.ini (fallback for development)
        4. Built-in defaults

    Args:
        config_file: Explicit INI file (``--config``).  Must exist.

    Returns:
        ExtractorConfig: Fully populated configuration object.

    Raises:
        FileNotFoundError: If ``config_file`` is given but does not exist.
    """
    cfg = ExtractorConfig()

    if config_file is not None:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
    elif CONFIG_FILE.exists():
        config_file = CONFIG_FILE
    elif CONFIG_EXAMPLE.exists():
        config_file = CONFIG_EXAMPLE

    if config_file:
        parser = configparser.ConfigParser()
        parser.read(config_file)
        _load_from_ini(parser, cfg)

    _apply_env_overrides(cfg)

    return cfg


# =============================================================================
# LOGGING
# =============================================================================

_LOG_FORMATS = {
    "simple": "%(levelname)s %(message)s",
    "detailed": "%(asctime)s %(name)s %(levelname)s %(message)s",
}


def configure_logging(settings: LoggingSettings) -> None:
    """Configure the root logger once per CLI invocation."""
    logging.basicConfig(
        level=getattr(logging, settings.level.upper(), logging.INFO),
        format=_LOG_FORMATS[settings.format],
        force=True,
    )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def print_config_summary(cfg: ExtractorConfig) -> None:
    """Print a summary of the resolved configuration to stdout."""
    print("\n" + "=" * 60)
    print("EXTRACTOR CONFIGURATION")
    print("=" * 60)
    print(f"Manifest:    {cfg.source.manifest_url}")
    print(f"System dir:  {cfg.source.system_dir}")
    print(f"Output dir:  {cfg.paths.output_path}")
    print(f"Work dir:    {cfg.paths.work_path}")
    print(f"Packs file:  {cfg.paths.packs_path}")
    print("-" * 60)
    print(f"Transifex:   {cfg.transifex.organization}/{cfg.transifex.project}")
    print(f"Language:    {cfg.transifex.language}")
    print(f"Token set:   {bool(cfg.transifex.token)}")
    print(f"Log level:   {cfg.logging.level}")
    print("=" * 60 + "\n")
