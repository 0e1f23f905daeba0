import shutil
from pathlib import Path

import pytest

from build_icons import get_parser

REPO_STYLES = Path(__file__).parent.parent / "src" / "styles"

SQUARE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">'
    '<path fill="#000" d="M4 4h16v16H4z"/></svg>'
)
CIRCLE = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
    '<circle cx="12" cy="12" r="8" style="fill:#000;opacity:0.5"/></svg>'
)
LINES = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
    '<path stroke="#000" data-name="top" d="M2 6h20"/>'
    '<path stroke="#000" d="M2 18h20"/></svg>'
)


def write_icons(directory: Path, icons):
    directory.mkdir(parents=True, exist_ok=True)
    for name, content in icons.items():
        (directory / name).write_text(content, encoding="utf-8")


@pytest.fixture
def project(tmp_path):
    """A project root with three icons and the shipped stylesheet sources."""
    write_icons(
        tmp_path / "src" / "icons",
        {
            "square.svg": SQUARE,
            "Arrow Left.svg": LINES,
            "circleFilled.svg": CIRCLE,
            ".hidden.svg": SQUARE,
            "notes.txt": "not an icon",
        },
    )
    shutil.copytree(REPO_STYLES, tmp_path / "src" / "styles")
    return tmp_path


@pytest.fixture
def make_args(project):
    def _make_args(*extra):
        return get_parser().parse_args(["--root", str(project), *extra])

    return _make_args
