"""Helper functionality that is used in other modules of this package.

All functions are pure: they only read the descriptor model and always return the same
result for the same input.
"""

from __future__ import annotations

from collections.abc import Sequence

from protoc_gen_xstate import proto_types
from protoc_gen_xstate.descriptor import File, Method, Service


def event_type(method: Method) -> str:
    """The name of the event interface for a method.

    E.g. method `Create` of service `OrderService` becomes `EventOrderServiceCreate`.

    Args:
        method (Method): The method.

    Returns:
        str: The event type name.
    """
    return f"{proto_types.EVENT_PREFIX}{method.service_name}{method.name}"


def service_event_type(service: Service) -> str:
    """The name of the union over all event types of a service, e.g. `EventOrderService`."""
    return f"{proto_types.EVENT_PREFIX}{service.name}"


def event_types_for_service(service: Service) -> list[str]:
    """Event type names of a service's methods, in declaration order."""
    return [event_type(method) for method in service.methods]


def event_types_for_file(file: File) -> list[str]:
    """Event type names of all methods of a file, in service order, then method order."""
    out: list[str] = []
    for service in file.services:
        out.extend(event_types_for_service(service))
    return out


def event_types(node: File | Service | object) -> list[str]:
    """Event type names for a file or a service.

    Any other node yields an empty list, which keeps template walks total.

    Args:
        node (File | Service | object): The container to collect event types from.

    Returns:
        list[str]: The event type names.
    """
    match node:
        case File():
            return event_types_for_file(node)
        case Service():
            return event_types_for_service(node)
        case _:
            return []


def request_type(method: Method) -> str:
    return method.input_type


def response_type(method: Method) -> str:
    return method.output_type


def return_type(method: Method) -> str:
    """The result type of a dispatch table entry, without its type parameter."""
    if method.server_streaming:
        return proto_types.ReturnType.STREAM
    return proto_types.ReturnType.UNARY


def has_stream(file: File) -> bool:
    """Whether any method of any service in the file is server-streaming."""
    return any(method.server_streaming for service in file.services for method in service.methods)


def discriminant(package: str, method: Method) -> str:
    """The literal tag of an event interface, e.g. `shop.OrderService.Create`."""
    return f"{package}.{method.service_name}.{method.name}"


def import_names(file: File) -> list[str]:
    """Names imported from the file's generated base module.

    For each service, this is the service name followed by the request and response
    record of every method. Names are not deduplicated: a record that is used by
    several methods is listed once per use.

    Args:
        file (File): The file.

    Returns:
        list[str]: The names, in first-seen order.
    """
    out: list[str] = []
    for service in file.services:
        out.append(service.name)
        for method in service.methods:
            out.append(request_type(method))
            out.append(response_type(method))
    return out


def except_last(index: int, sequence: Sequence[object], separator: str) -> str:
    """Return the separator, unless the index points to the last element of the sequence.

    Args:
        index (int): The zero-based position of the current element.
        sequence (Sequence[object]): The sequence that is iterated.
        separator (str): The separator to place after the element.

    Returns:
        str: The separator, or an empty string for the last element.
    """
    if index == len(sequence) - 1:
        return ""
    return separator


def join_union(members: Sequence[str]) -> str:
    """Join union members by means of ' | ', without a trailing separator."""
    return "".join(
        f"{member}{except_last(index, members, proto_types.UNION_SEPARATOR)}" for index, member in enumerate(members)
    )


def module_name(file: File, suffix: str = "") -> str:
    """The name of the generated module that declares the file's services and records.

    E.g. `shop/order.proto` becomes `order`, or `order_pb` with a suffix of `_pb`.

    Args:
        file (File): The file.
        suffix (str, optional): Appended to the base name. Defaults to "".

    Returns:
        str: The module name, relative to the generated output.
    """
    return f"{file.base_name}{suffix}"


def replace_proto_suffix(original: str, suffix: str = proto_types.XSTATE_SUFFIX) -> str:
    """If found, replaces the .proto suffix of a path with another suffix.

    For example, `shop/order.proto` becomes `shop/order.xstate.ts`.

    Args:
        original (str): The path to replace the suffix in.
        suffix (str, optional): The new suffix. Defaults to `.xstate.ts`.

    Returns:
        str: The path with the replaced suffix.
    """
    if original.endswith(proto_types.PROTO_SUFFIX):
        return original[: -len(proto_types.PROTO_SUFFIX)] + suffix
    return original + suffix
