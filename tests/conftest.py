"""Shared fixtures for dropins-manager tests."""

import zipfile
from pathlib import Path

import pytest

from dropins_manager.core import DeployerSettings
from dropins_manager.output import get_output


def write_bundle(
    path: Path,
    symbolic_name: str | None = "org.example.bundle",
    version: str | None = "1.0.0",
    fragment_host: str | None = None,
    with_manifest: bool = True,
    extra_headers: dict[str, str] | None = None,
) -> Path:
    """Create a bundle jar at *path* with the given manifest headers."""
    headers = {"Manifest-Version": "1.0"}
    if symbolic_name is not None:
        headers["Bundle-SymbolicName"] = symbolic_name
    if version is not None:
        headers["Bundle-Version"] = version
    if fragment_host is not None:
        headers["Fragment-Host"] = fragment_host
    headers.update(extra_headers or {})

    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        if with_manifest:
            text = "".join(f"{key}: {value}\r\n" for key, value in headers.items()) + "\r\n"
            archive.writestr("META-INF/MANIFEST.MF", text)
        archive.writestr("org/example/Placeholder.class", b"\xca\xfe\xba\xbe")
    return path


@pytest.fixture
def make_bundle():
    """Return the bundle jar writer."""
    return write_bundle


@pytest.fixture
def carbon_home(tmp_path):
    """A server layout with an empty dropins directory and a header-only bundles.info."""
    home = tmp_path / "carbon"
    (home / "osgi" / "dropins").mkdir(parents=True)
    registry = home / "osgi" / "default" / "configuration" / "org.eclipse.equinox.simpleconfigurator"
    registry.mkdir(parents=True)
    (registry / "bundles.info").write_text("#version=1\n", encoding="utf-8")
    return home


@pytest.fixture
def settings(carbon_home, tmp_path):
    """DeployerSettings for the carbon_home layout."""
    temp = tmp_path / "tmp"
    temp.mkdir()
    return DeployerSettings(
        dropins_directory=carbon_home / "osgi" / "dropins",
        registry_directory=carbon_home / "osgi" / "default" / "configuration" / "org.eclipse.equinox.simpleconfigurator",
        temp_directory=temp,
        max_workers=4,
    )


@pytest.fixture(autouse=True)
def reset_output():
    """Restore the output settings changed by a test."""
    output = get_output()
    verbosity, use_color = output.verbosity, output.use_color
    yield
    output.verbosity, output.use_color = verbosity, use_color
