"""
IR snapshot serialization.

The snapshot is the complete ordered resource list as pretty-printed JSON,
written after a successful generation run so other tools can consume the
compiled model without re-parsing Via source.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import TypeAdapter

from .resources import ResourceSpec

_RESOURCES_ADAPTER = TypeAdapter(list[ResourceSpec])


def dump_ir(resources: Sequence[ResourceSpec]) -> str:
    """Serialize resources to the IR snapshot format."""
    data = _RESOURCES_ADAPTER.dump_json(list(resources), indent=2)
    return data.decode("utf-8") + "\n"


def load_ir(text: str | bytes) -> list[ResourceSpec]:
    """Load resources back from an IR snapshot."""
    return _RESOURCES_ADAPTER.validate_json(text)
