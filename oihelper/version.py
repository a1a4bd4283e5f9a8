import argparse
from importlib import metadata


def get_version() -> str:
    # Fall back to "unknown", e.g., when running from a checkout that was
    # never installed.
    try:
        return metadata.version('oihelper')
    except metadata.PackageNotFoundError:
        return 'unknown'


def add_version_arg(parser: argparse.ArgumentParser) -> None:
    """Adds the --version argument to the parser"""
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {get_version()}',
    )
