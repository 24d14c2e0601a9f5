"""Tests for dynamic version management.

Verifies that ``compendium_l10n.__version__`` is resolved from the installed
package metadata (``pyproject.toml``) and that the CLI reports the same
value.
"""

from __future__ import annotations

import re

import pytest

import compendium_l10n
from compendium_l10n.cli import main

# Matches semver-ish strings: major.minor.patch with optional pre-release
# suffix (e.g. "0.3.0", "1.0.0-rc.1").
_SEMVER_RE = re.compile(
    r"^\d+\.\d+\.\d+"  # major.minor.patch
    r"(-[A-Za-z0-9]+(\.[A-Za-z0-9]+)*)?$"  # optional pre-release
)


@pytest.mark.unit
class TestVersionAttribute:
    """Verify the ``compendium_l10n.__version__`` package attribute."""

    def test_version_is_a_string(self) -> None:
        assert isinstance(compendium_l10n.__version__, str)
        assert len(compendium_l10n.__version__) > 0

    def test_version_matches_semver(self) -> None:
        assert _SEMVER_RE.match(compendium_l10n.__version__), (
            f"__version__ {compendium_l10n.__version__!r} does not match "
            f"expected semver pattern (major.minor.patch[-prerelease])"
        )

    def test_cli_reports_package_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert compendium_l10n.__version__ in capsys.readouterr().out
