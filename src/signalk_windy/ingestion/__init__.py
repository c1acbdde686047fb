"""Ingestion layer.

Turns Signal K deltas into updates of the observation buffer.
"""

__all__: list[str] = []
