"""Base model for campustwin records.

Every wire-facing model inherits from :class:`TwinBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase JSON keys (``carbonScore``)
  map to snake_case fields (``carbon_score``).
* Frozen instances; a change of state is a new record.
* :meth:`TwinBaseModel.to_wire` producing the JSON shape served by the facade.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TwinBaseModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using the camelCase wire names."""
        return self.model_dump(by_alias=True, mode="json")
