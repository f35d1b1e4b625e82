"""Argument parsing functionality for gitversioning."""

import argparse

from . import __version__
from .constants import TagOrdering


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="gitversioning",
        description=(
            "gitversioning - derive a project version from git branches, tags and commits"
        ),
        add_help=True,
    )

    parser.add_argument("-C", "--directory",
                        dest="DIRECTORY",
                        help="Directory inside the git work tree (default: current directory)",
                        action="store", type=str,
                        default=".")
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to the YAML configuration (default: <directory>/.gitversioning.yml)",
                        action="store", type=str)
    parser.add_argument("--branch",
                        dest="PROVIDED_BRANCH",
                        help="Use this branch name instead of the detected one; empty for no branch",
                        action="store", type=str)
    parser.add_argument("--tag",
                        dest="PROVIDED_TAG",
                        help="Use this tag instead of the detected ones; empty for no tags",
                        action="store", type=str)
    parser.add_argument("--tag-ordering",
                        dest="TAG_ORDERING",
                        help="Version ordering used to pick the latest matching tag",
                        action="store", type=str.lower,
                        choices=[o.value for o in TagOrdering])

    coordinate_group = parser.add_mutually_exclusive_group()
    coordinate_group.add_argument("--pom",
                                  dest="POM",
                                  help="Read the coordinate from this pom.xml",
                                  action="store", type=str)
    coordinate_group.add_argument("--declared-version",
                                  dest="DECLARED_VERSION",
                                  help="Declared project version (default: 0.0.0-SNAPSHOT)",
                                  action="store", type=str)
    parser.add_argument("--group-id",
                        dest="GROUP_ID",
                        help="Group id reported with --declared-version",
                        action="store", type=str)
    parser.add_argument("--artifact-id",
                        dest="ARTIFACT_ID",
                        help="Artifact id reported with --declared-version",
                        action="store", type=str)

    parser.add_argument("--write",
                        dest="WRITE",
                        help="Rewrite the pom given with --pom (in place unless --output is set)",
                        action="store_true")
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to write the rewritten pom to",
                        action="store", type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format for the resolved version",
                        action="store", type=str.lower,
                        choices=["text", "json"],
                        default="text")
    parser.add_argument("--properties",
                        dest="PROPERTIES",
                        help="Also print project.commit, project.tag and project.branch (text format)",
                        action="store_true")

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-V", "--version",
                        action="version",
                        version=f"%(prog)s {__version__}")

    return parser.parse_args(argv)
