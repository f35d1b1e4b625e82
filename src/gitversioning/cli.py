"""gitversioning command line entry point.

    Returns:
        int: Exit code
"""
from __future__ import annotations

import json
import logging
import os
import sys
import xml.etree.ElementTree as ET

from .args import parse_args
from .common.log_once import DEFAULT_BOUNCER
from .common.logging_utils import add_file_handler, configure_logging
from .config import apply_env_overrides, apply_overrides, load_configuration
from .constants import ExitCodes
from .errors import ConfigurationError, GitVersioningError, RepositoryAccessError
from .inspector import GitRepositoryInspector
from .models import GAV, GAVGit
from .resolver import VersionResolver
from .rewriter import PomRewriter, parse_pom, read_gav

logger = logging.getLogger(__name__)

DEFAULT_DECLARED_VERSION = "0.0.0-SNAPSHOT"


def render(git_version: GAVGit, output_format: str, with_properties: bool) -> str:
    """Format a resolution for stdout."""
    if output_format == "json":
        return json.dumps(git_version.to_dict(), indent=2)
    lines = [git_version.version]
    if with_properties:
        lines.extend(f"{name}={value}" for name, value in git_version.properties().items())
    return "\n".join(lines)


def _coordinate(args) -> GAV:
    if args.POM:
        try:
            root = parse_pom(args.POM).getroot()
        except (OSError, ET.ParseError) as exc:
            raise ConfigurationError(f"Failed to read {args.POM}: {exc}") from exc
        return read_gav(root)
    return GAV(
        group_id=args.GROUP_ID,
        artifact_id=args.ARTIFACT_ID,
        version=args.DECLARED_VERSION or DEFAULT_DECLARED_VERSION,
    )


def run(args) -> int:
    """Resolve (and optionally rewrite) according to parsed arguments."""
    project_dir = os.path.dirname(os.path.abspath(args.POM)) if args.POM else args.DIRECTORY
    config = load_configuration(args.CONFIG, project_dir)
    config = apply_env_overrides(config)
    config = apply_overrides(config, args.PROVIDED_BRANCH, args.PROVIDED_TAG, args.TAG_ORDERING)

    if args.WRITE:
        if not args.POM:
            raise ConfigurationError("--write requires --pom")
        if PomRewriter(config, bouncer=DEFAULT_BOUNCER).write(args.POM, args.OUTPUT):
            logger.info("Wrote %s", args.OUTPUT or args.POM)

    if not config.enabled:
        logger.info("disabled")
        return ExitCodes.SUCCESS.value

    gav = _coordinate(args)
    if gav.version is None:
        # same fail-open as the rewriter: a model without a version is left alone
        logger.warning("skip - invalid model - 'version' is missing - %s", args.POM)
        return ExitCodes.SUCCESS.value

    resolver = VersionResolver(config, DEFAULT_BOUNCER)
    git_version = resolver.resolve(gav, GitRepositoryInspector(project_dir))
    print(render(git_version, args.OUTPUT_FORMAT, args.PROPERTIES))
    return ExitCodes.SUCCESS.value


def main(argv=None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL)
    if args.LOG_FILE:
        add_file_handler(args.LOG_FILE)

    try:
        return run(args)
    except RepositoryAccessError as exc:
        logger.error("%s", exc)
        return ExitCodes.REPOSITORY_ERROR.value
    except GitVersioningError as exc:
        logger.error("%s", exc)
        return ExitCodes.CONFIG_ERROR.value


if __name__ == "__main__":
    sys.exit(main())
