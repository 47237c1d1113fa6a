"""depmeta command line entry point."""

import asyncio
import json
import logging
import sys

from .args import parse_args
from .common.logging_utils import configure_logging
from .config import MetadataConfig
from .constants import Constants, ExitCodes
from .errors import ConfigError
from .models import MavenRepository, ScopedDependencies, ScopedDependency
from .parser import parse_attributes, parse_coordinate, parse_ivy_resolver, parse_maven_resolver
from .service import create_service

logger = logging.getLogger(__name__)


def build_resolvers(args):
    """Resolvers from ``--maven``/``--ivy``; Maven Central when none are given."""
    resolvers = [parse_maven_resolver(token) for token in args.MAVEN]
    resolvers.extend(parse_ivy_resolver(token) for token in args.IVY)
    if not resolvers:
        resolvers.append(MavenRepository(Constants.MAVEN_CENTRAL_NAME, Constants.MAVEN_CENTRAL_URL))
    return resolvers


async def run(args, config):
    """Run the selected command and return (payload, found)."""
    resolvers = build_resolvers(args)
    attributes = parse_attributes(args.ATTRIBUTES)
    async with create_service(config) as service:
        if args.command == "versions":
            dependency = ScopedDependency(parse_coordinate(args.coordinate, attributes), resolvers)
            if args.FRESH:
                versions = await service.get_versions_fresh(dependency)
            else:
                versions = await service.get_versions(dependency)
            return [str(v) for v in versions], bool(versions)
        if args.command == "url":
            dependency = ScopedDependency(parse_coordinate(args.coordinate, attributes), resolvers)
            url = await service.get_artifact_url(dependency)
            return (str(url) if url is not None else None), url is not None
        dependencies = ScopedDependencies(
            [parse_coordinate(token, attributes) for token in args.coordinates], resolvers
        )
        mapping = await service.get_artifact_id_url_mapping(dependencies)
        return {name: str(url) for name, url in sorted(mapping.items())}, bool(mapping)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)
    try:
        config = MetadataConfig.from_args(args)
        payload, found = asyncio.run(run(args, config))
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)

    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")
    if not found:
        sys.exit(ExitCodes.NOTHING_FOUND.value)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
