"""YAML config loading with env var expansion."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import DeobConfig

PROJECT_CONFIG = Path("luadeob.yaml")
USER_CONFIG = Path(".luadeob") / "config.yaml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def candidate_paths(cli_path: str | None = None) -> list[Path]:
    """Config files in the order they are tried.

    An explicit ``--config`` path replaces the search entirely; otherwise the
    project file wins over the per-user one.
    """
    if cli_path:
        path = Path(cli_path)
        if not path.exists():
            raise ValueError(f"Config file not found: {cli_path}")
        return [path]
    return [PROJECT_CONFIG, Path.home() / USER_CONFIG]


def load_config(cli_path: str | None = None) -> DeobConfig:
    """Build a DeobConfig from the first non-empty config file, or defaults."""
    for path in candidate_paths(cli_path):
        if not path.exists():
            continue
        raw = _read_mapping(path)
        if raw is None:
            continue
        try:
            return DeobConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
    return DeobConfig()


def _read_mapping(path: Path) -> dict | None:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"Could not read config {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping at top level")
    return raw


def _expand_env_vars(obj: object) -> object:
    """Replace ${VAR} in every string value; unset variables become empty."""
    if isinstance(obj, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj


# Default YAML template for `luadeob config init`
DEFAULT_CONFIG_TEMPLATE = """\
# luadeob.yaml

# Pipeline stages (run in this order; set false to skip)
stages:
  whitespace: true
  concat: true
  variables: true
  functions: true
  base64: true
  hex: true
  escapes: true
  formatting: true

# Identifier renaming
rename:
  min_length: 10               # names longer than this are renamed
  variable_prefix: "var_"
  function_prefix: "func_"

# Re-indentation
formatting:
  indent_width: 2

# Output
output:
  filename: "deobfuscated.lua" # used when --output points at a directory
  report: false                # write a techniques report next to the output
  report_suffix: ".techniques.yaml"

# Logging
log_level: "warn"              # debug | info | warn | error
log_format: "text"             # text | json
"""
