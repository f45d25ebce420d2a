"""gRPC transport layer for the route guide.

This package hosts:
- The protocol buffer contract (in `protos/`) and the modules compiled from it (`generated/`).
- Server bootstrap, client and interceptors.
- Thin service adapters that map gRPC requests to application services.
"""
