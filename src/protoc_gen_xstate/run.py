"""Top-level module for XState module generation."""

from __future__ import annotations

import argparse
import logging
import os.path
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, fields
from typing import BinaryIO

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from protoc_gen_xstate import proto_types
from protoc_gen_xstate.descriptor import File
from protoc_gen_xstate.helper import replace_proto_suffix
from protoc_gen_xstate.writer import Writer

logger = logging.getLogger(__name__)


class InvalidParameterError(ValueError):
    """Raised when the plugin parameter string cannot be understood."""

    pass


@dataclass(frozen=True)
class Parameters:
    """Options that are passed to the plugin with `--xstate_opt`."""

    import_suffix: str = ""

    @classmethod
    def parse(cls, text: str) -> Parameters:
        """Parse a parameter string of the form `key=value,key2=value2`.

        Unknown keys, such as the `paths` option shared with other plugins, are logged and ignored.

        Args:
            text (str): The parameter string of the request, may be empty.

        Raises:
            InvalidParameterError: If an item has no value.

        Returns:
            Parameters: The parsed options.
        """
        values: dict[str, str] = {}
        for item in text.split(","):
            item = item.strip()
            if not item:
                continue

            key, sep, value = item.partition("=")
            if not sep:
                raise InvalidParameterError(f"Parameter '{item}' has no value, expected 'key=value'.")

            key = key.strip()
            if key not in {f.name for f in fields(cls)}:
                logger.warning("Ignoring unknown parameter '%s'.", key)
                continue

            values[key] = value.strip()

        return cls(**values)


@dataclass(frozen=True)
class GeneratedFile:
    """A rendered artifact, keyed by its output path."""

    name: str
    content: str


def should_generate(file: File) -> bool:
    """Whether a file gets an XState module.

    Files without locally declared messages are skipped, even when their services
    reference records that are imported from other files.

    Args:
        file (File): The file to check.

    Returns:
        bool: True, if the file declares at least one message and at least one service.
    """
    return len(file.messages) > 0 and len(file.services) > 0


def output_file_name(file: File) -> str:
    """The output path of a file's XState module, e.g. `shop/order.xstate.ts`."""
    return replace_proto_suffix(file.name, proto_types.XSTATE_SUFFIX)


def generate(files: dict[str, File], targets: Iterable[str], writer: Writer) -> list[GeneratedFile]:
    """Render the XState modules for a set of target files.

    Args:
        files (dict[str, File]): All known files, by proto path.
        targets (Iterable[str]): Proto paths of the files to generate for, in order.
        writer (Writer): The writer that renders each file.

    Returns:
        list[GeneratedFile]: One entry per target that passed `should_generate`.
    """
    generated: list[GeneratedFile] = []

    for target in targets:
        file = files[target]

        if not should_generate(file):
            logger.debug(
                "Skipping '%s' (%d message(s), %d service(s)).", file.name, len(file.messages), len(file.services)
            )
            continue

        generated.append(GeneratedFile(name=output_file_name(file), content=writer.dumps(file)))

    return generated


def process_request(request: plugin_pb2.CodeGeneratorRequest) -> plugin_pb2.CodeGeneratorResponse:
    """Handle a single protoc plugin request.

    Args:
        request (plugin_pb2.CodeGeneratorRequest): The request, as sent by protoc.

    Returns:
        plugin_pb2.CodeGeneratorResponse: The generated files, or an error message.
    """
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = proto_types.SUPPORTED_FEATURES

    try:
        parameters = Parameters.parse(request.parameter)
    except InvalidParameterError as e:
        logger.error("Invalid plugin parameter: %s", e)
        response.error = str(e)
        return response

    files = {proto.name: File.from_proto(proto) for proto in request.proto_file}
    writer = Writer(import_suffix=parameters.import_suffix)

    for generated in generate(files, request.file_to_generate, writer):
        response.file.add(name=generated.name, content=generated.content)
        logger.info("Generated '%s'.", generated.name)

    return response


def run_plugin(stdin: BinaryIO, stdout: BinaryIO) -> plugin_pb2.CodeGeneratorResponse:
    """Run as a protoc plugin: read a request from `stdin`, write the response to `stdout`.

    Args:
        stdin (BinaryIO): The stream that carries the serialized request.
        stdout (BinaryIO): The stream that receives the serialized response.

    Returns:
        plugin_pb2.CodeGeneratorResponse: The response that was written.
    """
    request = plugin_pb2.CodeGeneratorRequest.FromString(stdin.read())
    response = process_request(request)

    stdout.write(response.SerializeToString())
    stdout.flush()

    return response


def load_descriptor_sets(paths: Sequence[str]) -> dict[str, File]:
    """Load files from serialized `FileDescriptorSet`s.

    Such sets are written by `protoc --descriptor_set_out=... --include_imports`.

    Args:
        paths (Sequence[str]): Paths of the descriptor set files.

    Returns:
        dict[str, File]: All files of all sets, by proto path, in order of appearance.
    """
    files: dict[str, File] = {}

    for path in paths:
        with open(path, "rb") as f:
            descriptor_set = descriptor_pb2.FileDescriptorSet.FromString(f.read())

        for proto in descriptor_set.file:
            files.setdefault(proto.name, File.from_proto(proto))

        logger.info("Loaded %d file(s) from '%s'.", len(descriptor_set.file), path)

    return files


def run(args: argparse.Namespace, root_directory: str) -> list[str]:
    """Generate XState modules from descriptor sets and write them to disk.

    Args:
        args (argparse.Namespace): The arguments that were passed when calling the generator.
        root_directory (str): The directory, from which the generator is executed.

    Raises:
        InvalidParameterError: If a requested file is not part of any descriptor set.

    Returns:
        list[str]: Paths of the written files.
    """
    descriptor_sets: list[str] = [os.path.join(root_directory, p) for p in args.descriptor_sets]
    output_dir: str = os.path.join(root_directory, args.output_dir or "")
    import_suffix: str = getattr(args, "import_suffix", "") or ""

    files = load_descriptor_sets(descriptor_sets)

    targets: list[str] = args.files or list(files)
    unknown = [target for target in targets if target not in files]
    if unknown:
        raise InvalidParameterError(f"File(s) not found in descriptor sets: {', '.join(unknown)}")

    written: list[str] = []

    for generated in generate(files, targets, Writer(import_suffix=import_suffix)):
        output_path = os.path.join(output_dir, generated.name)
        os.makedirs(os.path.dirname(output_path), exist_ok=True)

        with open(output_path, "w", encoding="utf8") as output_file:
            output_file.write(generated.content)

        logger.info("Wrote '%s'.", output_path)
        written.append(output_path)

    return written
