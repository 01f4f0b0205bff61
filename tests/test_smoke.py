"""Smoke tests for the package CLI."""

import pytest

from skymask.__main__ import main


def test_cli_import_smoke() -> None:
    """Ensure CLI entrypoint can be imported and executed."""
    assert main([]) == 0


def test_compute_requires_both_coordinates() -> None:
    """Passing only one observer coordinate is a usage error."""
    with pytest.raises(SystemExit) as excinfo:
        main(["compute", "--shp", "buildings.shp", "--x", "1.0"])

    assert excinfo.value.code == 2
