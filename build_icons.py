#!python3
import argparse
import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from tqdm.asyncio import tqdm_asyncio

from config import (
    COLLECTION_DIST,
    ICONS_DIST,
    ICONS_SRC,
    OUTPUT_STYLES,
    SPRITE_DIST,
    STYLES_DIST,
    STYLES_SRC,
    BuildConfig,
    OptimizerConfig,
)
from pack import write_collection
from styles import compile_styles
from svg import build_sprite, optimize_svg
from utils import (
    IconRecord,
    check_file_name,
    is_icon_file,
    make_record,
    reset_dir,
    setup_logging,
    sort_records,
)


@dataclass
class BuildResult:
    records: List[IconRecord]
    written: List[Path] = field(default_factory=list)


def find_icons(src: Path) -> List[Path]:
    """List the icon files in `src`, failing on any badly named one."""
    paths = []
    for path in sorted(src.iterdir()):
        if not is_icon_file(path.name):
            continue
        if not path.is_file():
            logging.debug(f"Skipped {path.name}, not a file")
            continue
        check_file_name(path.name)
        paths.append(path)
    return paths


async def gather_or_cancel(aws, **tqdm_kwargs) -> list:
    """Run `aws` concurrently; on the first failure cancel and settle the rest, then re-raise."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await tqdm_asyncio.gather(*tasks, **tqdm_kwargs)
    except Exception:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def load_icon(path: Path, config: OptimizerConfig) -> IconRecord:
    raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
    optimized = await asyncio.to_thread(optimize_svg, raw, config, path.name)
    return make_record(path.name, optimized)


async def load_icons(src: Path, config: OptimizerConfig) -> List[IconRecord]:
    paths = find_icons(src)
    if not paths:
        logging.warning(f"No SVG files found in {src}")

    records = await gather_or_cancel(
        (load_icon(p, config) for p in paths),
        desc="Optimizing SVGs",
        unit=" files",
    )
    return sort_records(records)


async def write_icon_files(records: List[IconRecord], dist: Path) -> List[Path]:
    paths = [dist / r.icon_file_name for r in records]
    await gather_or_cancel(
        (
            asyncio.to_thread(path.write_text, r.optimized_svg, encoding="utf-8")
            for path, r in zip(paths, records)
        ),
        desc="Writing SVGs",
        unit=" files",
    )
    return paths


async def build(config: BuildConfig) -> BuildResult:
    # Everything is read and optimized before any output directory is touched.
    records = await load_icons(config.icons_src, config.optimizer)
    output_dirs = config.output_dirs()

    for d in output_dirs:
        reset_dir(d)

    result = BuildResult(records=records)
    result.written.extend(await write_icon_files(records, config.icons_dist))

    if config.emit_styles:
        css = compile_styles(config.styles, records)
        config.styles.output.write_text(css, encoding="utf-8")
        result.written.append(config.styles.output)

    if config.emit_sprite:
        config.sprite.write_text(build_sprite(records), encoding="utf-8")
        logging.info(f"Wrote sprite with {len(records)} symbols to {config.sprite}")
        result.written.append(config.sprite)

    if config.emit_collection:
        write_collection(records, config.collection, config.fallback_key)
        result.written.append(config.collection)

    return result


def main(args) -> int:
    try:
        config = BuildConfig.from_args(args)
        result = asyncio.run(build(config))
    except Exception:
        logging.exception("Icon build failed")
        return 1

    print(f"Icons compiled: {len(result.records)}")
    return 0


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Optimize SVG icons and build per-icon files, a stylesheet, a sprite and a JSON collection."
    )
    parser.add_argument("--root", type=Path, default=Path("."), help="Project root, other paths are relative to it")
    parser.add_argument("--src", type=Path, default=ICONS_SRC, help="Directory of source SVG icons")
    parser.add_argument("--icons-dist", type=Path, default=ICONS_DIST, help="Output directory for optimized icons")
    parser.add_argument("--styles-src", type=Path, default=STYLES_SRC, help="SASS entry file")
    parser.add_argument("--styles-dist", type=Path, default=STYLES_DIST, help="Compiled CSS file")
    parser.add_argument("--sprite", type=Path, default=SPRITE_DIST, help="Output sprite SVG")
    parser.add_argument("--collection", type=Path, default=COLLECTION_DIST, help="Output JSON collection")
    parser.add_argument(
        "--output-style",
        choices=OUTPUT_STYLES,
        default="compressed",
        help="CSS output style",
    )
    parser.add_argument("--no-styles", action="store_true", help="Skip the stylesheet")
    parser.add_argument("--no-sprite", action="store_true", help="Skip the sprite")
    parser.add_argument("--no-collection", action="store_true", help="Skip the JSON collection")
    parser.add_argument(
        "--single-pass",
        action="store_true",
        help="Run the optimizer once instead of until the output is stable",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def cli():
    args = get_parser().parse_args()

    setup_logging()
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    raise SystemExit(main(args))


if __name__ == "__main__":
    cli()
