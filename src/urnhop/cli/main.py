"""
urnhop CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import explore, initialize, layout, show


@click.group()
@click.version_option(package_name="urnhop")
@click.option("-v", "--verbose", is_flag=True, help="Log endpoint attempts and fallbacks")
def main(verbose: bool):
    """urnhop: Metadata Catalog Neighborhood Explorer.

    Resolves an entity by URN and walks its parents, dependencies and
    embedded references one hop at a time.

    \b
    Quick Start:
      urnhop init
      urnhop show "urn:li:dataset:(urn:li:dataPlatform:hive,fct_users,PROD)"
      urnhop explore "urn:li:dataset:(urn:li:dataPlatform:hive,fct_users,PROD)"
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register commands
main.add_command(show.show)
main.add_command(layout.layout)
main.add_command(explore.explore)
main.add_command(initialize.init)

if __name__ == "__main__":
    main()
