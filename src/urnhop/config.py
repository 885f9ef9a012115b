"""
Connection Configuration.

Settings are layered, lowest precedence first:
defaults -> .urnhop/config.yaml -> URNHOP_* environment variables -> CLI flags.

All values are treated as opaque strings; only `base_url` assembles them.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_DIR = ".urnhop"
CONFIG_FILE = "config.yaml"
DEFAULT_CONFIG_PATH = Path(CONFIG_DIR) / CONFIG_FILE

ENV_PREFIX = "URNHOP_"

# Config fields that may be overridden from the environment
ENV_FIELDS = ("scheme", "host", "port", "api_path", "token")


class CatalogConfig(BaseModel):
    """Where the catalog API lives and how to authenticate against it."""

    scheme: str = "http"
    host: str = "localhost"
    port: str = "8080"
    api_path: str = ""
    token: Optional[str] = None
    timeout: float = Field(default=30.0, gt=0)

    @property
    def base_url(self) -> str:
        """`{scheme}://{host}[:{port}]{api_path}` with a normalized path."""
        path = self.api_path.strip()
        if path and not path.startswith("/"):
            path = f"/{path}"
        path = path.rstrip("/")
        port = f":{self.port}" if self.port else ""
        return f"{self.scheme}://{self.host}{port}{path}"

    def merged(self, **overrides: Any) -> "CatalogConfig":
        """Copy with every non-None override applied."""
        updates = {key: value for key, value in overrides.items() if value is not None}
        return self.model_copy(update=updates)


def _read_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}

    section = data.get("catalog", {}) if isinstance(data, dict) else {}
    if not isinstance(section, dict):
        logger.warning(f"Ignoring malformed 'catalog' section in {path}")
        return {}
    # Blank YAML values mean "not set"
    return {key: str(value) if key in ENV_FIELDS else value
            for key, value in section.items() if value is not None}


def _read_env(environ: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    environ = os.environ if environ is None else environ
    values = {}
    for field in ENV_FIELDS:
        value = environ.get(f"{ENV_PREFIX}{field.upper()}")
        if value is not None:
            values[field] = value
    return values


def _apply_layer(base: CatalogConfig, values: Dict[str, Any], source: str) -> CatalogConfig:
    """Validate one settings layer on top of `base`; an invalid layer is skipped whole."""
    if not values:
        return base
    try:
        return CatalogConfig(**{**base.model_dump(), **values})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        logger.warning(f"Ignoring invalid settings from {source}: {problems}")
        return base


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
    **overrides: Any,
) -> CatalogConfig:
    """
    Build the effective configuration.

    A layer holding a value that does not validate is logged and ignored,
    leaving the lower layers in effect.

    Args:
        path: Config file; defaults to .urnhop/config.yaml in the working directory.
        environ: Environment mapping; defaults to os.environ.
        **overrides: Explicit values (e.g. CLI flags). None means "not given".
    """
    config_path = path or DEFAULT_CONFIG_PATH
    config = _apply_layer(CatalogConfig(), _read_file(config_path), str(config_path))
    config = _apply_layer(config, _read_env(environ), f"{ENV_PREFIX}* environment")
    return config.merged(**overrides)


def default_config_document() -> Dict[str, Any]:
    """The document written by `urnhop init`."""
    defaults = CatalogConfig()
    return {
        "version": "1.0",
        "catalog": {
            "scheme": defaults.scheme,
            "host": defaults.host,
            "port": defaults.port,
            "api_path": defaults.api_path,
            "token": "",
        },
    }
