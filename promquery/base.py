"""
Shared pydantic base for wire models.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from .errors import MalformedPayload

LabelSet = Dict[str, str]


class WireModel(BaseModel):
    """
    Immutable model decoded from a Prometheus JSON payload.

    Field names are snake_case; the wire uses camelCase, which the alias
    generator covers. Fields with irregular wire names declare an explicit alias.
    Only the wire names are accepted as input keys.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
    )

    @classmethod
    def decode(cls, payload: Any):
        """Validate a decoded JSON value, reporting shape problems as MalformedPayload."""
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise MalformedPayload(f"{cls.__name__}: {_summarize(e)}") from e

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _summarize(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    return f"{location}: {first.get('msg')}"


def decode_as(type_: Any, payload: Any, what: str):
    """Validate payload against an arbitrary type (e.g. List[Alert]) via a TypeAdapter."""
    try:
        return TypeAdapter(type_).validate_python(payload)
    except ValidationError as e:
        raise MalformedPayload(f"{what}: {_summarize(e)}") from e
