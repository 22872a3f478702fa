"""Configuration loader for blockpress.toml."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .errors import ConfigError

CONFIG_FILENAME = "blockpress.toml"


@dataclass
class IdConfig:
    """Client id generation configuration."""
    prefix: str = "blk"


@dataclass
class BlogPolicy:
    """Field rules for blog posts."""
    title_min: int = 1
    title_max: int = 200
    summary_min: int = 0
    summary_max: int = 500
    content_min: int = 100
    require_category: bool = True


@dataclass
class GuidePolicy:
    """Field rules for guides."""
    title_min: int = 1
    title_max: int = 200
    summary_max: int = 500


@dataclass
class TagPolicy:
    """Tag rules shared by blogs and guides."""
    min_count: int = 1
    max_count: int = 10
    min_length: int = 2
    max_length: int = 15


@dataclass
class ValidationConfig:
    """Validation thresholds."""
    blog: BlogPolicy = field(default_factory=BlogPolicy)
    guide: GuidePolicy = field(default_factory=GuidePolicy)
    tags: TagPolicy = field(default_factory=TagPolicy)


@dataclass
class BlockpressConfig:
    """Complete blockpress configuration."""
    ids: IdConfig = field(default_factory=IdConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)


def _section(cls: type, data: Any, name: str) -> Any:
    """Build a flat dataclass section from a TOML table, checking value types."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"[{name}] must be a table")

    kwargs = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        expected = type(f.default)
        # bool is an int subclass; keep them apart
        if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
            raise ConfigError(f"{name}.{f.name} must be an integer, got {value!r}")
        if expected is not int and not isinstance(value, expected):
            raise ConfigError(
                f"{name}.{f.name} must be {expected.__name__}, got {value!r}"
            )
        kwargs[f.name] = value
    return cls(**kwargs)


def load_config(config_path: Path | None = None) -> BlockpressConfig:
    """
    Load configuration from blockpress.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/blockpress.toml

    Missing files fall back to defaults; an explicit path that does not
    exist is an error.

    Args:
        config_path: Explicit path to config file

    Returns:
        BlockpressConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    if config_path is not None and not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_FILENAME)

    for path in search_paths:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    toml_data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid TOML in {path}: {e}") from e
            break

    ids_config = _section(IdConfig, toml_data.get("ids"), "ids")

    validation_data = toml_data.get("validation", {})
    if not isinstance(validation_data, dict):
        raise ConfigError("[validation] must be a table")
    validation_config = ValidationConfig(
        blog=_section(BlogPolicy, validation_data.get("blog"), "validation.blog"),
        guide=_section(GuidePolicy, validation_data.get("guide"), "validation.guide"),
        tags=_section(TagPolicy, validation_data.get("tags"), "validation.tags"),
    )

    return BlockpressConfig(
        ids=ids_config,
        validation=validation_config,
    )
