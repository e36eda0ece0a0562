"""
Payload schemas for client intents.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class IntentPayload(BaseModel):
    """Base for intent payloads: camelCase on the wire, extra keys ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PlayCardPayload(IntentPayload):
    """Payload for playCard."""

    card_index: StrictInt = Field(alias="cardIndex")
    tile_index: StrictInt = Field(alias="tileIndex")


class MoveUnitPayload(IntentPayload):
    """Payload for moveUnit."""

    from_index: StrictInt = Field(alias="fromIndex")
    to_index: StrictInt = Field(alias="toIndex")


class AttackUnitPayload(IntentPayload):
    """Payload for attackUnit."""

    attacker_index: StrictInt = Field(alias="attackerIndex")
    target_index: StrictInt = Field(alias="targetIndex")


def envelope(msg_type: str, data=None) -> dict:
    """Build an outgoing frame."""
    return {"type": msg_type, "data": data if data is not None else {}}
