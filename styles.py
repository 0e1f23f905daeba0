import logging
from typing import List

import sass

from config import StyleConfig
from utils import IconRecord


def icons_map(records: List[IconRecord]) -> sass.SassMap:
    return sass.SassMap((r.key, r.optimized_svg) for r in records)


def compile_styles(config: StyleConfig, records: List[IconRecord]) -> str:
    """Compile the SASS entry file with the icon markup available to it.

    `config.function_name` is registered as a zero-argument function that
    returns a map of icon key to optimized SVG markup, in icon order.
    """

    def get_icons_map():
        return icons_map(records)

    logging.info(f"Compiling {config.source.name} with {len(records)} icons")
    return sass.compile(
        filename=str(config.source),
        include_paths=[str(p) for p in config.include_paths],
        output_style=config.output_style,
        custom_functions={config.function_name: get_icons_map},
    )
