"""Argument parsing functionality for depmeta."""

import argparse

from .constants import Constants


def _add_common(parser):
    parser.add_argument("-m", "--maven",
                        dest="MAVEN",
                        help="Maven repository as NAME=URL (repeatable; default: Maven Central)",
                        action="append", type=str, default=[])
    parser.add_argument("-i", "--ivy",
                        dest="IVY",
                        help="Ivy repository as NAME=PATTERN (repeatable)",
                        action="append", type=str, default=[])
    parser.add_argument("-a", "--attribute",
                        dest="ATTRIBUTES",
                        help="Extra module attribute as KEY=VALUE, e.g. sbtVersion=1.0 (repeatable)",
                        action="append", type=str, default=[])


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depmeta",
        description="Look up published versions and homepage URLs of JVM dependencies",
        add_help=True,
    )
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML configuration file",
                        action="store", type=str)
    parser.add_argument("--cache-ttl",
                        dest="CACHE_TTL",
                        help=f"Cache time-to-live, e.g. 3600, 30min, 2h (default: {Constants.CACHE_TTL_SEC}s)",
                        action="store", type=str)
    parser.add_argument("--cache-dir",
                        dest="CACHE_DIR",
                        help="Directory to persist fetched metadata in",
                        action="store", type=str)
    parser.add_argument("--max-parent-depth",
                        dest="MAX_PARENT_DEPTH",
                        help="Maximum parent projects consulted for a URL",
                        action="store", type=int)
    parser.add_argument("--max-concurrency",
                        dest="MAX_CONCURRENCY",
                        help="Maximum concurrent lookups for 'urls'",
                        action="store", type=int)
    parser.add_argument("--timeout",
                        dest="REQUEST_TIMEOUT",
                        help="Per-request timeout in seconds",
                        action="store", type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store", type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

    subparsers = parser.add_subparsers(dest="command", required=True)

    versions = subparsers.add_parser("versions", help="List published versions of a dependency")
    versions.add_argument("coordinate", help="group:artifact:version")
    versions.add_argument("--fresh",
                          dest="FRESH",
                          help="Bypass the cache time-to-live",
                          action="store_true")
    _add_common(versions)

    url = subparsers.add_parser("url", help="Resolve the homepage/SCM URL of a dependency")
    url.add_argument("coordinate", help="group:artifact:version")
    _add_common(url)

    urls = subparsers.add_parser("urls", help="Map artifact names to URLs for several dependencies")
    urls.add_argument("coordinates", nargs="+", help="group:artifact:version ...")
    _add_common(urls)

    return parser.parse_args(argv)
