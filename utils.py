import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path


COLORS = {
    "DEBUG": "\033[36m",  # cyan
    "INFO": "\033[32m",  # green
    "WARNING": "\033[33m",  # yellow
    "ERROR": "\033[31m",  # red
    "CRITICAL": "\033[1;31m",  # bold red
}
COLOR_RESET = "\033[0m"

CAMEL_RE = re.compile(r"([a-z])([A-Z])")
KEY_RE = re.compile(r"[\w-]+")


class ColorFormatter(logging.Formatter):
    def format(self, record):
        color = COLORS.get(record.levelname, "")
        record.levelname = f"{color}{record.levelname}{COLOR_RESET}"
        return super().format(record)


def setup_logging():
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter("%(levelname)s %(message)s"))
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.INFO)


class IconNameError(ValueError):
    pass


class DuplicateIconError(ValueError):
    pass


@dataclass(frozen=True)
class IconRecord:
    icon_name: str
    key: str
    icon_file_name: str
    title: str
    optimized_svg: str

    def __post_init__(self):
        if not self.key:
            raise ValueError(f"Icon key must not be empty (icon_name={self.icon_name!r})")


def is_icon_file(file_name: str) -> bool:
    return not file_name.startswith(".") and file_name.endswith(".svg")


def check_file_name(file_name: str):
    if file_name.count(".") > 1:
        raise IconNameError(
            f'svg filename "{file_name}" cannot contain more than one period'
        )


def derive_key(icon_name: str) -> str:
    """Lower-case the name and drop every space: "Arrow Left" -> "arrowleft"."""
    key = icon_name.lower().replace(" ", "")
    if not KEY_RE.fullmatch(key):
        raise IconNameError(
            f'icon "{icon_name}" does not produce a usable key (got "{key}")'
        )
    return key


def derive_title(icon_name: str) -> str:
    """Humanize an icon name for the sprite's <title>.

    camelCase boundaries and hyphens become spaces, then the first character
    of the result is upper-cased: "arrowLeft" -> "Arrow Left",
    "arrow-left" -> "Arrow left".
    """
    title = CAMEL_RE.sub(r"\1 \2", icon_name).replace("-", " ").strip()
    return title[:1].upper() + title[1:]


def make_record(file_name: str, optimized_svg: str) -> IconRecord:
    check_file_name(file_name)
    icon_name = Path(file_name).stem
    return IconRecord(
        icon_name=icon_name,
        key=derive_key(icon_name),
        icon_file_name=file_name.lower(),
        title=derive_title(icon_name),
        optimized_svg=optimized_svg,
    )


def sort_records(records):
    """Sort by key and reject keys shared by two source files."""
    ordered = sorted(records, key=lambda r: r.key)
    for prev, curr in zip(ordered, ordered[1:]):
        if prev.key == curr.key:
            raise DuplicateIconError(
                f'"{prev.icon_name}.svg" and "{curr.icon_name}.svg" both map to icon key "{curr.key}"'
            )
    return ordered


def reset_dir(path: Path):
    """Empty `path` or create it, so no asset from an earlier run survives."""
    if not path.exists():
        path.mkdir(parents=True)
        logging.debug(f"Created {path}")
        return

    for item in path.iterdir():
        if item.is_dir() and not item.is_symlink():
            shutil.rmtree(item)
        else:
            item.unlink()
    logging.debug(f"Emptied {path}")
