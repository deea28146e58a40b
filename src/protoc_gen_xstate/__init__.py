"""Generate XState event and service scaffolding for gRPC-web clients from *.proto files."""
