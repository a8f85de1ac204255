from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

CENTS = Decimal("0.01")


def _money_to_json(value: Decimal) -> float:
    # arithmetic stays in Decimal; only the 2-place result leaves as a JSON number
    return float(value.quantize(CENTS, rounding=ROUND_HALF_UP))


Money = Annotated[Decimal, PlainSerializer(_money_to_json, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Serializes with camelCase keys; accepts camelCase or snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
