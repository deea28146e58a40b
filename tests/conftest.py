"""Pytest configuration and fixtures for XState generator tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest
from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from protoc_gen_xstate.descriptor import File

# (method name, input record, output record, server streaming)
MethodSpec = tuple[str, str, str, bool]


def new_file_proto(
    name: str,
    package: str,
    messages: Sequence[str] = (),
    services: dict[str, Sequence[MethodSpec]] | None = None,
) -> descriptor_pb2.FileDescriptorProto:
    """Build a file descriptor, the way protoc would send it.

    Record references are fully qualified with the file's package.
    """
    proto = descriptor_pb2.FileDescriptorProto(name=name, package=package, syntax="proto3")

    for message in messages:
        proto.message_type.add(name=message)

    for service_name, methods in (services or {}).items():
        service = proto.service.add(name=service_name)
        for method_name, input_type, output_type, server_streaming in methods:
            service.method.add(
                name=method_name,
                input_type=f".{package}.{input_type}",
                output_type=f".{package}.{output_type}",
                server_streaming=server_streaming,
            )

    return proto


def new_request(
    protos: Sequence[descriptor_pb2.FileDescriptorProto],
    targets: Sequence[str] | None = None,
    parameter: str = "",
) -> plugin_pb2.CodeGeneratorRequest:
    """Build a plugin request; all files are targets unless given otherwise."""
    return plugin_pb2.CodeGeneratorRequest(
        file_to_generate=list(targets) if targets is not None else [p.name for p in protos],
        parameter=parameter,
        proto_file=list(protos),
    )


@pytest.fixture
def order_proto() -> descriptor_pb2.FileDescriptorProto:
    """A file with one service, mixing a unary and a server-streaming method."""
    return new_file_proto(
        "shop/order.proto",
        "shop",
        messages=["CreateOrderRequest", "CreateOrderResponse", "TrackRequest", "TrackResponse"],
        services={
            "OrderService": [
                ("Create", "CreateOrderRequest", "CreateOrderResponse", False),
                ("Track", "TrackRequest", "TrackResponse", True),
            ]
        },
    )


@pytest.fixture
def order_file(order_proto) -> File:
    return File.from_proto(order_proto)


@pytest.fixture
def two_services_proto() -> descriptor_pb2.FileDescriptorProto:
    """A file with two unary services."""
    return new_file_proto(
        "shop/catalog.proto",
        "shop",
        messages=["GetRequest", "GetResponse", "ListRequest", "ListResponse"],
        services={
            "ServiceA": [("Get", "GetRequest", "GetResponse", False)],
            "ServiceB": [("List", "ListRequest", "ListResponse", False)],
        },
    )


@pytest.fixture
def two_services_file(two_services_proto) -> File:
    return File.from_proto(two_services_proto)


@pytest.fixture
def messages_only_proto() -> descriptor_pb2.FileDescriptorProto:
    """A file that declares messages, but no service."""
    return new_file_proto("shop/types.proto", "shop", messages=["Money", "Address"])
