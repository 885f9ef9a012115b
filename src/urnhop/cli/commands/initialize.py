"""
Init Command - Write a starter configuration file.
"""

from pathlib import Path

import click
import yaml

from ...config import CONFIG_DIR, CONFIG_FILE, default_config_document
from ..utils import echo_error, echo_info, echo_success


@click.command()
@click.option("-d", "--directory", type=click.Path(file_okay=False, path_type=Path),
              default=".", help="Project directory")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init(directory: Path, force: bool) -> None:
    """
    Create .urnhop/config.yaml with the default connection settings.
    """
    config_file = directory / CONFIG_DIR / CONFIG_FILE

    if config_file.exists() and not force:
        echo_error(f"{config_file} already exists. Use --force to overwrite.")
        raise SystemExit(1)

    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.safe_dump(default_config_document(), f, sort_keys=False)

    echo_success(f"Wrote {config_file}")
    echo_info("Set URNHOP_TOKEN in the environment rather than committing a token.")
