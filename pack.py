#!python3
"""Pack optimized SVGs into a JSON collection (dist/json/icons.json).

The collection maps each icon key to its markup and is what the
<icon-component> web component looks names up in at runtime.
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List

from svg import parse_svg
from utils import (
    IconRecord,
    check_file_name,
    is_icon_file,
    make_record,
    setup_logging,
    sort_records,
)

ICONS_DIST = Path("dist/icons")
OUTPUT = Path("dist/json/icons.json")


def pack_collection(records: List[IconRecord]) -> Dict[str, str]:
    return {r.key: r.optimized_svg for r in records}


def dump_collection(collection: Dict[str, str]) -> str:
    return json.dumps(collection, indent=2, ensure_ascii=False) + "\n"


def write_collection(records: List[IconRecord], output: Path, fallback_key: str = "fallback"):
    collection = pack_collection(records)
    if fallback_key not in collection:
        logging.warning(
            f'Collection has no "{fallback_key}" icon, unknown icon names will render nothing'
        )
    output.write_text(dump_collection(collection), encoding="utf-8")
    logging.info(f"Wrote {len(collection)} icons to {output}")


def pack(svg_dir: Path, output: Path):
    svgs = [p for p in sorted(svg_dir.iterdir()) if is_icon_file(p.name) and p.is_file()]
    if not svgs:
        raise FileNotFoundError(f"No SVG files found in {svg_dir}")

    records = []
    for svg_path in svgs:
        check_file_name(svg_path.name)
        content = svg_path.read_text(encoding="utf-8").strip()
        parse_svg(content, svg_path.name)
        records.append(make_record(svg_path.name, content))

    collection = pack_collection(sort_records(records))

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_collection(collection), encoding="utf-8")
    print(f"Wrote {len(collection)} icons to {output}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Pack emitted icons into a JSON collection")
    parser.add_argument(
        "--svg-dir",
        type=Path,
        default=ICONS_DIST,
        help="Directory containing optimized SVGs",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=OUTPUT,
        help="Output JSON file",
    )
    args = parser.parse_args()

    setup_logging()
    pack(args.svg_dir, args.output)
