# Copyright (c) Syntropy Systems
"""Configuration management for holdout."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import cast

import yaml

from holdout.errors import ConfigurationError

CONFIG_FILE = "config.yaml"
_TRUE_WORDS = frozenset({"true", "yes", "1", "on"})
_FALSE_WORDS = frozenset({"false", "no", "0", "off"})


@dataclass
class HoldoutConfig:
    """Configuration for an evaluation run."""

    # Fraction of each label used for training
    ratio: float = 0.7

    # Trials per (method, dataset) pair
    repetitions: int = 10

    # Append the empty-instance set to every testing partition
    include_empty: bool = False

    # First trial seed is the smallest prime >= seed_floor
    seed_floor: int = 2

    # Maximum seeds handed out per pair (None: unbounded)
    seed_limit: int | None = None

    # Saved models are stored as "<namespace>@<method>"
    namespace: str = "AntiSpamClassifier"

    # Methods to evaluate, in order (empty: all registered methods)
    methods: list[str] = field(default_factory=list)

    # Directory for saved models (None: <.holdout dir>/models)
    store_dir: Path | None = None

    # Label and size of the empty-instance set
    empty_label: str = "spam"
    empty_count: int = 1

    def validate(self) -> None:
        """Check value ranges, raising ConfigurationError on the first problem."""
        if not 0 < self.ratio < 1:
            msg = f"ratio must be strictly between 0 and 1, got {self.ratio}"
            raise ConfigurationError(msg)
        if self.repetitions < 1:
            msg = "The specified number of repetitions is invalid: must be at least 1"
            raise ConfigurationError(msg)
        if self.seed_limit is not None and self.seed_limit < 0:
            msg = f"seed_limit must be non-negative, got {self.seed_limit}"
            raise ConfigurationError(msg)
        if not self.namespace:
            msg = "namespace must not be empty"
            raise ConfigurationError(msg)
        if "/" in self.namespace or "\\" in self.namespace:
            msg = (
                "namespace must not contain path separators, "
                f"got {self.namespace!r}"
            )
            raise ConfigurationError(msg)
        if not self.empty_label:
            msg = "empty_label must not be empty"
            raise ConfigurationError(msg)
        if self.empty_count < 0:
            msg = f"empty_count must be non-negative, got {self.empty_count}"
            raise ConfigurationError(msg)


def find_holdout_dir(start_path: Path | None = None) -> Path | None:
    """Find the nearest .holdout directory by walking up from start_path.

    Returns None if no .holdout directory is found.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        holdout_dir = current / ".holdout"
        if holdout_dir.is_dir():
            return holdout_dir
        current = current.parent

    # Check root
    holdout_dir = current / ".holdout"
    if holdout_dir.is_dir():
        return holdout_dir

    return None


def get_global_config_dir() -> Path:
    """Get the global holdout config directory (~/.holdout)."""
    return Path.home() / ".holdout"


def _int(data: dict[str, object], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"Config key '{key}' must be an integer, got {value!r}"
        raise ConfigurationError(msg)
    return value


def _str(data: dict[str, object], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"Config key '{key}' must be a string, got {value!r}"
        raise ConfigurationError(msg)
    return value


def _apply(config: HoldoutConfig, data: dict[str, object]) -> None:
    ratio = data.get("ratio")
    if ratio is not None:
        if isinstance(ratio, bool) or not isinstance(ratio, (int, float)):
            msg = f"Config key 'ratio' must be a number, got {ratio!r}"
            raise ConfigurationError(msg)
        config.ratio = float(ratio)

    repetitions = _int(data, "repetitions")
    if repetitions is not None:
        config.repetitions = repetitions

    include_empty = data.get("include_empty")
    if include_empty is not None:
        config.include_empty = parse_flag(str(include_empty))

    seed_floor = _int(data, "seed_floor")
    if seed_floor is not None:
        config.seed_floor = seed_floor
    if "seed_limit" in data:
        config.seed_limit = _int(data, "seed_limit")

    namespace = _str(data, "namespace")
    if namespace is not None:
        config.namespace = namespace

    methods = data.get("methods")
    if methods is not None:
        if not isinstance(methods, list) or not all(
            isinstance(m, str) for m in cast("list[object]", methods)
        ):
            msg = f"Config key 'methods' must be a list of names, got {methods!r}"
            raise ConfigurationError(msg)
        config.methods = cast("list[str]", methods)

    store_dir = _str(data, "store_dir")
    if store_dir is not None:
        config.store_dir = Path(store_dir).expanduser()

    empty_label = _str(data, "empty_label")
    if empty_label is not None:
        config.empty_label = empty_label
    empty_count = _int(data, "empty_count")
    if empty_count is not None:
        config.empty_count = empty_count


def find_config_file(holdout_dir: Path | None = None) -> Path | None:
    """Find the config file that applies when none is given explicitly."""
    if holdout_dir is None:
        holdout_dir = find_holdout_dir()
    if holdout_dir is not None:
        config_path = holdout_dir / CONFIG_FILE
        return config_path if config_path.exists() else None
    global_config = get_global_config_dir() / CONFIG_FILE
    return global_config if global_config.exists() else None


def load_config(
    config_path: Path | None = None,
    holdout_dir: Path | None = None,
) -> HoldoutConfig:
    """Load configuration from YAML or defaults.

    Looks for config in:
    1. Provided config_path
    2. Provided holdout_dir
    3. Nearest .holdout directory walking up
    4. ~/.holdout/config.yaml
    5. Defaults
    """
    config = HoldoutConfig()

    if config_path is None:
        config_path = find_config_file(holdout_dir)
        if config_path is None:
            return config
    elif not config_path.is_file():
        msg = f"Config file not found: {config_path}"
        raise ConfigurationError(msg)

    try:
        with config_path.open() as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        msg = f"Could not read config file {config_path}: {e}"
        raise ConfigurationError(msg) from e

    if raw is None:
        return config
    if not isinstance(raw, dict):
        msg = f"Config file {config_path} must contain a mapping"
        raise ConfigurationError(msg)

    _apply(config, cast("dict[str, object]", raw))
    return config


def get_store_dir(config: HoldoutConfig, holdout_dir: Path | None = None) -> Path:
    """Get the directory for saved models."""
    if config.store_dir is not None:
        return config.store_dir
    if holdout_dir is None:
        holdout_dir = find_holdout_dir()
    if holdout_dir is None:
        holdout_dir = Path.cwd() / ".holdout"
    return holdout_dir / "models"


def parse_repetitions(text: str) -> int:
    """Parse the repetition count argument."""
    try:
        value = int(text.strip())
    except ValueError as e:
        msg = f"The specified number of repetitions is invalid: {text!r}"
        raise ConfigurationError(msg) from e
    if value < 1:
        msg = f"The specified number of repetitions is invalid: {text!r}"
        raise ConfigurationError(msg)
    return value


def parse_flag(text: str) -> bool:
    """Parse a boolean flag (true/false, yes/no, 1/0, on/off)."""
    word = text.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    msg = f"The specified flag is invalid: {text!r} (expected true or false)"
    raise ConfigurationError(msg)


def resolve_data_root(text: str) -> Path:
    """Resolve the data set folder argument to an existing directory."""
    path = Path(text).expanduser()
    if not path.is_dir():
        msg = f"The specified data set folder is invalid: {text}"
        raise ConfigurationError(msg)
    return path.resolve()
