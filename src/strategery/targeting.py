"""Per-tick decision on whether a character should drop its house target."""

from __future__ import annotations

import logging

from strategery.models import Character, House, HouseTarget

_logger = logging.getLogger("strategery.targeting")


def house_exists(house: House) -> bool:
    return house.culture.owns(house)


def carrying_empty(character: Character) -> bool:
    return character.carrying == 0


def house_full(house: House) -> bool:
    return house.resources_left >= house.type.max_resources


def carry_full(character: Character) -> bool:
    return character.carrying >= character.type.max_carry


def abandon_reason(character: Character, house: House) -> str | None:
    """Why ``character`` should stop working on ``house``, or None to keep going."""
    if not house_exists(house):
        return "house_gone"
    if house.culture is character.culture:
        if carrying_empty(character):
            return "nothing_to_build_with"
        if house_full(house):
            return "house_complete"
    elif carry_full(character):
        return "carry_full"
    return None


def reevaluate(character: Character) -> None:
    """Clear a house target that is no longer worth pursuing.

    Location targets and empty targets are left alone.
    """
    target = character.target
    if not isinstance(target, HouseTarget):
        return

    reason = abandon_reason(character, target.house)
    if reason is not None:
        character.target = None
        _logger.debug(
            "target_abandoned",
            extra={"character_id": character.id, "house_id": target.house.id, "reason": reason},
        )
