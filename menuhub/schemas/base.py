from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

# Espaços removidos antes do min_length: "   " não é um nome válido.
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire (``basePrice``, ``tenantId``)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
