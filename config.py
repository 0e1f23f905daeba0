"""Build configuration.

Every stage receives one of these frozen objects explicitly; nothing in the
pipeline reads module-level state.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

ICONS_SRC = Path("src/icons")
ICONS_DIST = Path("dist/icons")
STYLES_SRC = Path("src/styles/main.scss")
STYLES_DIST = Path("dist/styles/main.css")
SPRITE_DIST = Path("dist/sprite/icons.svg")
COLLECTION_DIST = Path("dist/json/icons.json")

OUTPUT_STYLES = ("nested", "expanded", "compact", "compressed")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class OptimizerConfig:
    multipass: bool = True
    max_passes: int = 10
    precision: int = 5
    remove_dimensions: bool = True
    style_to_attrs: bool = True
    # [element:]attribute, both parts are regular expressions on local names
    remove_attrs: Tuple[str, ...] = ("path:(fill|stroke)", "fill", "data.*")
    sort_attrs: bool = True

    def __post_init__(self):
        if self.max_passes < 1:
            raise ConfigError(f"max_passes must be at least 1, got {self.max_passes}")


@dataclass(frozen=True)
class StyleConfig:
    source: Path
    output: Path
    include_paths: Tuple[Path, ...] = ()
    output_style: str = "compressed"
    function_name: str = "getIconsMap"

    def __post_init__(self):
        if self.output_style not in OUTPUT_STYLES:
            raise ConfigError(
                f"output_style must be one of {', '.join(OUTPUT_STYLES)}, got {self.output_style!r}"
            )


@dataclass(frozen=True)
class BuildConfig:
    icons_src: Path
    icons_dist: Path
    styles: StyleConfig
    sprite: Path
    collection: Path
    optimizer: OptimizerConfig = field(default_factory=OptimizerConfig)
    emit_styles: bool = True
    emit_sprite: bool = True
    emit_collection: bool = True
    fallback_key: str = "fallback"

    @classmethod
    def from_args(cls, args) -> "BuildConfig":
        root = Path(args.root).resolve()
        styles_src = root / args.styles_src
        return cls(
            icons_src=root / args.src,
            icons_dist=root / args.icons_dist,
            styles=StyleConfig(
                source=styles_src,
                output=root / args.styles_dist,
                include_paths=(styles_src.parent,),
                output_style=args.output_style,
            ),
            sprite=root / args.sprite,
            collection=root / args.collection,
            optimizer=OptimizerConfig(multipass=not args.single_pass),
            emit_styles=not args.no_styles,
            emit_sprite=not args.no_sprite,
            emit_collection=not args.no_collection,
        )

    def output_dirs(self):
        """Distinct directories reset before a build, parents before children."""
        dirs = [self.icons_dist]
        if self.emit_styles:
            dirs.append(self.styles.output.parent)
        if self.emit_sprite:
            dirs.append(self.sprite.parent)
        if self.emit_collection:
            dirs.append(self.collection.parent)

        unique = []
        for d in dirs:
            if d not in unique:
                unique.append(d)

        src = self.icons_src.resolve()
        for d in unique:
            resolved = d.resolve()
            if resolved == src or resolved in src.parents:
                raise ConfigError(
                    f"Refusing to reset {d}: it contains the icon source directory {self.icons_src}"
                )
        # Parents first: resetting a directory removes everything below it.
        return sorted(unique, key=lambda d: len(d.resolve().parts))
