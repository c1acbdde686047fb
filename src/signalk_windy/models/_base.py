"""Base model for the Windy.com request payload.

Every outbound payload model inherits from :class:`WindyBaseModel` which
provides ``alias_generator=to_camel`` so snake_case fields serialise to the
camelCase keys the station API expects (``share_option`` -> ``shareOption``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WindyBaseModel(BaseModel):
    """Base for Windy.com payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict using API key names; absent values stay as ``None``."""
        return self.model_dump(mode="json", by_alias=True)
