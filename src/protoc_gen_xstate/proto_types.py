"""Types and constants that are common to the generated XState modules."""

from __future__ import annotations

from google.protobuf.compiler import plugin_pb2

PROTO_SUFFIX = ".proto"
XSTATE_SUFFIX = ".xstate.ts"

TRANSPORT_IMPORT = 'import { grpc } from "@improbable-eng/grpc-web"'
STREAM_IMPORT = 'import { Observable } from "rxjs"'

EVENT_PREFIX = "Event"
UNION_SEPARATOR = " | "

SUPPORTED_FEATURES = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL


class ReturnType:
    """Result types of the generated dispatch table entries."""

    UNARY = "Promise"
    STREAM = "Observable"
