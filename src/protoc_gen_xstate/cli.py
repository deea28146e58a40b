"""Command-line interface for generating XState scaffolding for *.proto services.

Without `--descriptor-set`, the process acts as a protoc plugin, e.g.

    protoc --plugin=protoc-gen-xstate --xstate_out=gen shop/order.proto

Notes:
    - The outputs of this generator import gRPC types from `@improbable-eng/grpc-web` and,
      for server-streaming methods, `Observable` from `rxjs`.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence

from protoc_gen_xstate.run import run, run_plugin

logger = logging.getLogger(__name__)

DEBUG_ENVIRONMENT_VARIABLE = "DEBUG"


def _log_level() -> int:
    """The log level, DEBUG if the `DEBUG` environment variable is set, INFO otherwise."""
    value = os.environ.get(DEBUG_ENVIRONMENT_VARIABLE, "")
    if value and value.lower() not in ("0", "false"):
        return logging.DEBUG
    return logging.INFO


def setup_parser() -> argparse.ArgumentParser:
    """Setup for the parser.

    Returns:
        argparse.ArgumentParser: The parser after setup.
    """
    parser = argparse.ArgumentParser(description="Generate XState event and service scaffolding for proto services.")

    parser.add_argument(
        "-d",
        "--descriptor-set",
        dest="descriptor_sets",
        type=str,
        nargs="+",
        default=[],
        help="serialized FileDescriptorSet files (protoc --descriptor_set_out --include_imports); "
        "if omitted, a CodeGeneratorRequest is read from stdin.",
    )

    parser.add_argument(
        "-f",
        "--files",
        type=str,
        nargs="+",
        default=[],
        help="proto paths to generate for; defaults to all files of the descriptor sets.",
    )

    parser.add_argument(
        "-o",
        "--output-dir",
        type=str,
        default="",
        help="directory to write all generated outputs; defaults to the working directory.",
    )

    parser.add_argument(
        "--import-suffix",
        type=str,
        default="",
        help="suffix of the generated base module that declares services and messages, e.g. '_pb'.",
    )

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the generator.

    Args:
        argv (Sequence[str] | None, optional): Run arguments. Defaults to None.

    Returns:
        int: Error code.
    """
    logging.basicConfig(level=_log_level(), stream=sys.stderr)

    parser = setup_parser()
    args = parser.parse_args(argv)

    if not args.descriptor_sets:
        if args.files or args.output_dir or args.import_suffix:
            parser.error("-f/--files, -o/--output-dir and --import-suffix require -d/--descriptor-set.")
        logger.debug("Reading CodeGeneratorRequest from stdin.")
        run_plugin(sys.stdin.buffer, sys.stdout.buffer)
        return 0

    root_directory = os.getcwd()
    logger.info("Working from root directory: %s", root_directory)

    run(args, root_directory)

    return 0
