"""Read-only descriptor model built from `FileDescriptorProto` messages.

The generator never touches the protobuf messages directly. Each `*.proto` file of a
request is converted once into a small tree of frozen dataclasses, which keeps the
declaration order of messages, services and methods.
"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass

from google.protobuf import descriptor_pb2

from protoc_gen_xstate import proto_types


def record_name(type_reference: str) -> str:
    """Resolve a fully qualified type reference to the record's own name.

    Examples:
        >>> record_name(".shop.CreateOrderRequest")
        'CreateOrderRequest'
        >>> record_name(".shop.Order.Line")
        'Line'

    Args:
        type_reference (str): The reference, as found in `MethodDescriptorProto.input_type`.

    Returns:
        str: The last dotted component of the reference.
    """
    return type_reference.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class Message:
    """A record type that is declared at the top level of a file."""

    name: str

    @classmethod
    def from_proto(cls, proto: descriptor_pb2.DescriptorProto) -> Message:
        return cls(name=proto.name)


@dataclass(frozen=True)
class Method:
    """A single RPC of a service.

    Attributes:
        service_name: Name of the service that declares this method.
        name: The method name, as declared.
        input_type: Name of the request record.
        output_type: Name of the response record.
        server_streaming: Whether the server answers with a stream of responses.
    """

    service_name: str
    name: str
    input_type: str
    output_type: str
    server_streaming: bool = False

    @classmethod
    def from_proto(cls, proto: descriptor_pb2.MethodDescriptorProto, service_name: str) -> Method:
        return cls(
            service_name=service_name,
            name=proto.name,
            input_type=record_name(proto.input_type),
            output_type=record_name(proto.output_type),
            server_streaming=proto.server_streaming,
        )


@dataclass(frozen=True)
class Service:
    """A service and its methods in declaration order."""

    name: str
    methods: tuple[Method, ...] = ()

    @classmethod
    def from_proto(cls, proto: descriptor_pb2.ServiceDescriptorProto) -> Service:
        return cls(name=proto.name, methods=tuple(Method.from_proto(m, proto.name) for m in proto.method))


@dataclass(frozen=True)
class File:
    """A `*.proto` file.

    Attributes:
        name: The proto path of the file, e.g. `shop/order.proto`.
        package: The protobuf package, may be empty.
        messages: Top-level messages declared in this file.
        services: Services declared in this file.
    """

    name: str
    package: str = ""
    messages: tuple[Message, ...] = ()
    services: tuple[Service, ...] = ()

    @classmethod
    def from_proto(cls, proto: descriptor_pb2.FileDescriptorProto) -> File:
        """Convert a file descriptor into the generator's model.

        Args:
            proto (descriptor_pb2.FileDescriptorProto): The descriptor, as sent by protoc.

        Returns:
            File: The converted file.
        """
        return cls(
            name=proto.name,
            package=proto.package,
            messages=tuple(Message.from_proto(m) for m in proto.message_type),
            services=tuple(Service.from_proto(s) for s in proto.service),
        )

    @property
    def base_name(self) -> str:
        """The file name without directory and without the `.proto` extension."""
        name = pathlib.PurePosixPath(self.name).name
        if name.endswith(proto_types.PROTO_SUFFIX):
            return name[: -len(proto_types.PROTO_SUFFIX)]
        return name
