"""Configuration loading and management for CXX Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.cxx-insight.toml)
    3. Project config (./cxx-insight.toml)
    4. Explicit config file
    5. Environment variables (CXX_INSIGHT_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(cyclomatic_threshold=12)
    >>> config.cyclomatic_threshold
    12
    >>> config.size_threshold
    20
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

DEFAULT_HEADER_SUFFIXES = (".h", ".hh", ".hpp", ".hxx", ".h++", ".inl")
DEFAULT_SOURCE_SUFFIXES = (".cc", ".cpp", ".cxx", ".c++", ".c")

ENV_PREFIX = "CXX_INSIGHT_"


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        Thresholds:
            cyclomatic_threshold: Functions with cyclomatic complexity above
                this are counted as complex
            cognitive_threshold: Functions with cognitive complexity above
                this raise a FunctionCognitiveComplexity issue
            size_threshold: Functions with more body lines than this are
                counted as big

        Issue reporting:
            secondary_locations: Attach one location per complexity
                increment to cognitive complexity issues

        File selection:
            header_suffixes: Suffixes of header-like files (public API
                documentation is only counted in these)
            source_suffixes: Suffixes of implementation files

        Execution:
            workers: Parallel workers for multi-file analysis (None = auto)
            verbosity: Logging verbosity level
    """

    cyclomatic_threshold: int = 10
    cognitive_threshold: int = 15
    size_threshold: int = 20

    secondary_locations: bool = False

    header_suffixes: tuple[str, ...] = DEFAULT_HEADER_SUFFIXES
    source_suffixes: tuple[str, ...] = DEFAULT_SOURCE_SUFFIXES

    workers: Optional[int] = None
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Reject out-of-range values before any traversal starts."""
        for name in ("cyclomatic_threshold", "cognitive_threshold", "size_threshold"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfigError(name, value, "must be an integer")
            if value < 0:
                raise InvalidConfigError(name, value, "must be non-negative")

        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "must be quiet, normal or verbose")

        for name in ("header_suffixes", "source_suffixes"):
            suffixes = getattr(self, name)
            if any(not s.startswith(".") for s in suffixes):
                raise InvalidConfigError(name, suffixes, "suffixes must start with '.'")

    @property
    def analyzed_suffixes(self) -> tuple[str, ...]:
        """All suffixes picked up when expanding directories."""
        return self.source_suffixes + self.header_suffixes

    def is_header(self, file: str) -> bool:
        """True if the file name ends with one of the header suffixes."""
        lower = file.lower()
        return any(lower.endswith(suffix) for suffix in self.header_suffixes)


DEFAULT_CONFIG = AnalysisConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is missing or unreadable, or a
            key is unknown
        InvalidConfigError: If a value is out of range
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".cxx-insight.toml"
    if global_config.exists():
        merged.update(_load_toml_section(global_config))

    project_config = Path.cwd() / "cxx-insight.toml"
    if project_config.exists():
        merged.update(_load_toml_section(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_section(config_file))

    merged.update(_load_env_vars())

    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"
    merged.update({k: v for k, v in overrides.items() if v is not None})

    for name in ("header_suffixes", "source_suffixes"):
        if name in merged and isinstance(merged[name], list):
            merged[name] = tuple(merged[name])

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CXX_INSIGHT_* environment variables.

    Supported environment variables:
        CXX_INSIGHT_CYCLOMATIC_THRESHOLD: int
        CXX_INSIGHT_COGNITIVE_THRESHOLD: int
        CXX_INSIGHT_SIZE_THRESHOLD: int
        CXX_INSIGHT_SECONDARY_LOCATIONS: bool (true/false/1/0)
        CXX_INSIGHT_WORKERS: int
        CXX_INSIGHT_VERBOSITY: quiet/normal/verbose
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that cannot be expressed as a single variable
    (the suffix tuples).
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is tuple:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_section(path: Path) -> dict[str, Any]:
    """Load a TOML config file.

    Settings may live at the top level or under a ``[cxx-insight]`` table.
    """
    try:
        data = _load_toml_file(path)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file '{path}': {e}")
    except ValueError as e:
        # tomllib.TOMLDecodeError subclasses ValueError
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
    section = data.get("cxx-insight")
    if isinstance(section, dict):
        return dict(section)
    return data


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    with open(path, "rb") as f:
        return tomllib.load(f)
