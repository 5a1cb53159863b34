"""Pytest fixtures for Discrepancies tests."""

import io
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Dict, Generator, Optional, Union

import pytest
from rich.console import Console

from discrepancies.models import ExclusionRule, RuleKind
from discrepancies.ui import CompareTUI

Content = Union[str, bytes, None]


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: tests spanning several components")


def write_zip(path: Path, entries: Dict[str, Content]) -> Path:
    """Write a ZIP archive with the given entries, in order.

    A value of None creates a directory entry (the name should end in "/").
    """
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries.items():
            if content is None:
                archive.writestr(zipfile.ZipInfo(name), b"")
            else:
                archive.writestr(name, content)
    return path


def write_tree(root: Path, files: Dict[str, Content]) -> Path:
    """Create files (or, for None values, directories) below ``root``."""
    root.mkdir(parents=True, exist_ok=True)
    for rel_path, content in files.items():
        target = root / rel_path
        if content is None:
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content)
    return root


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for isolated test environments.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_zip(temp_dir: Path) -> Callable[..., Path]:
    """Return a factory writing ZIP archives into the temporary directory.

    Usage:
        archive = make_zip({"project/a.txt": "1"}, name="backup.zip")
    """
    def factory(entries: Dict[str, Content], name: str = "baseline.zip") -> Path:
        return write_zip(temp_dir / name, entries)

    return factory


@pytest.fixture
def make_tree(temp_dir: Path) -> Callable[..., Path]:
    """Return a factory creating a working directory in the temporary directory."""
    def factory(files: Dict[str, Content], name: str = "work") -> Path:
        return write_tree(temp_dir / name, files)

    return factory


@pytest.fixture
def sample_project(make_zip, make_tree) -> Dict[str, Path]:
    """Create a baseline archive and a working directory that differ.

    Archive (root folder "project"):
        project/readme.txt      "hello\\n"
        project/src/main.py     "print(1)\\n"
        project/src/old.py      "gone\\n"
        project/bin/app.exe     b"MZ"

    Working directory:
        readme.txt              "hello\\n"           (unchanged)
        src/main.py             "print(2)\\n"        (modified)
        src/new.py              "fresh\\n"           (added)
        bin/app.exe             b"MZ2"               (excluded by default rules)
        app.csproj              "<Project/>"         (excluded by default rules)

    Returns:
        Dictionary with "archive" and "workdir" paths.
    """
    archive = make_zip({
        "project/": None,
        "project/readme.txt": "hello\n",
        "project/src/main.py": "print(1)\n",
        "project/src/old.py": "gone\n",
        "project/bin/app.exe": b"MZ",
    })
    workdir = make_tree({
        "readme.txt": "hello\n",
        "src/main.py": "print(2)\n",
        "src/new.py": "fresh\n",
        "bin/app.exe": b"MZ2",
        "app.csproj": "<Project/>",
    })
    return {"archive": archive, "workdir": workdir}


@pytest.fixture
def sample_rules() -> list:
    """A small mixed rule set: directory glob, file glob, regex and a disabled rule."""
    return [
        ExclusionRule(pattern="node_modules", directory_scoped=True, comment="Dependencies"),
        ExclusionRule(pattern="*.log", comment="Logs"),
        ExclusionRule(pattern=r"^build-\d+$", kind=RuleKind.REGEX, directory_scoped=True),
        ExclusionRule(pattern="*.txt", enabled=False, comment="Disabled"),
    ]


@pytest.fixture
def tui_with_output() -> tuple[CompareTUI, io.StringIO]:
    """Create a CompareTUI with captured output.

    Returns:
        Tuple of (CompareTUI instance, StringIO for reading output).
    """
    output = io.StringIO()
    console = Console(file=output, force_terminal=True, width=120)
    return CompareTUI(console=console), output


@pytest.fixture
def config_path(temp_dir: Path) -> Path:
    """Location of an isolated settings file (not created)."""
    return temp_dir / "settings" / "config.json"


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch, tmp_path_factory) -> Optional[Path]:
    """Point the home directory at a temporary location so no test touches ~/.discrepancies."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home
