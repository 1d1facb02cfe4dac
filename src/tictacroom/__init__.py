"""
tictacroom package bootstrap.

Subpackages:
- interface: Adapters for HTTP, CLI, and telemetry layers.
- domain: Board model, wire protocol, and the two-player session state machine.
- infrastructure: Configuration and the in-memory message transport.
"""

__all__ = ["interface", "domain", "infrastructure"]
