import logging

import click

from .. import __version__


@click.version_option(__version__, "-V", "--version")
@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", help="Verbose logging", is_flag=True, default=False)
def cli(verbose):
    """
    Joint tables of two sparse Hi-C contact maps.

    Type -h or --help after any subcommand for more information.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


from . import create_table
