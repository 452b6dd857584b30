"""Argument parsing functionality for ReleaseGate."""

import argparse
from typing import List, Optional

from constants import Constants, ReportFormats


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-C", "--project-dir",
                        dest="PROJECT_DIR",
                        help="Project directory holding gradle.properties and the version catalog",
                        action="store",
                        type=str,
                        default=".")
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to release configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--set",
                        dest="OVERRIDES",
                        help="Override a project property (KEY=VALUE format, can be used multiple times)",
                        action="append",
                        type=str,
                        default=[])
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="releasegate",
        description=(
            "ReleaseGate - patch upgrade audit and release artifact publishing"
        ),
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    check = subparsers.add_parser("check-patch",
                                  help="Check whether CANDIDATE is an acceptable patch upgrade over CURRENT")
    check.add_argument("candidate", help="Candidate version")
    check.add_argument("current", help="Currently pinned version")
    _add_common_args(check)

    base = subparsers.add_parser("base-version",
                                 help="Print the major.minor base of VERSION")
    base.add_argument("version", help="Full version string")
    _add_common_args(base)

    describe = subparsers.add_parser("describe",
                                     help="Print the release descriptor as JSON")
    _add_common_args(describe)

    audit = subparsers.add_parser("audit",
                                  help="List acceptable patch upgrades for the version catalog")
    audit.add_argument("--catalog",
                       dest="CATALOG",
                       help=f"Version catalog path (default: {Constants.CATALOG_FILE})",
                       action="store",
                       type=str)
    audit.add_argument("-o", "--output",
                       dest="OUTPUT",
                       help="Path to output file (JSON or CSV)",
                       action="store",
                       type=str)
    audit.add_argument("-f", "--format",
                       dest="OUTPUT_FORMAT",
                       help="Output format (json or csv). If not specified, inferred from --output extension; defaults to json.",
                       action="store",
                       type=str.lower,
                       choices=[f.value for f in ReportFormats])
    audit.add_argument("--error-on-updates",
                       dest="ERROR_ON_UPDATES",
                       help="Exit with a non-zero status code if patch updates are available.",
                       action="store_true")
    _add_common_args(audit)

    publish = subparsers.add_parser("publish-docs",
                                    help="Upload the Javadoc bundle to the documentation bucket")
    publish.add_argument("--docs-dir",
                         dest="DOCS_DIR",
                         help=f"Directory containing the bundle (default: {Constants.DOCS_DIR})",
                         action="store",
                         type=str,
                         default=Constants.DOCS_DIR)
    publish.add_argument("--pattern",
                         dest="DOCS_PATTERN",
                         help=f"Glob selecting the bundle (default: {Constants.DOCS_PATTERN})",
                         action="store",
                         type=str,
                         default=Constants.DOCS_PATTERN)
    publish.add_argument("--file",
                         dest="DOCS_FILES",
                         help="Explicit bundle file (can be used multiple times; exactly one must exist)",
                         action="append",
                         type=str)
    publish.add_argument("--dry-run",
                         dest="DRY_RUN",
                         help="Compute and log the upload target without uploading.",
                         action="store_true")
    _add_common_args(publish)

    return parser.parse_args(argv)
