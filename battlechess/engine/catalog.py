"""Unit catalog, deck composition and the weapon triangle."""

import random

from .models import (
    Archetype, Card, MovementKind, MovementPattern, UnitArchetype, WeaponClass
)

UNIT_CATALOG: dict[Archetype, UnitArchetype] = {
    Archetype.SCOUT: UnitArchetype(
        archetype=Archetype.SCOUT,
        health=25,
        attack=30,
        movement=MovementPattern(MovementKind.JUMP, range=2),
        weapon=WeaponClass.SWORD,
        cost=1,
    ),
    Archetype.ARCHER: UnitArchetype(
        archetype=Archetype.ARCHER,
        health=50,
        attack=40,
        movement=MovementPattern(MovementKind.STRAIGHT, range=2),
        weapon=WeaponClass.BOW,
        cost=3,
    ),
    Archetype.KNIGHT: UnitArchetype(
        archetype=Archetype.KNIGHT,
        health=90,
        attack=60,
        movement=MovementPattern(MovementKind.ADJACENT, range=1),
        weapon=WeaponClass.LANCE,
        cost=5,
    ),
    Archetype.MAGE: UnitArchetype(
        archetype=Archetype.MAGE,
        health=35,
        attack=80,
        movement=MovementPattern(MovementKind.DIAGONAL, range=2),
        weapon=WeaponClass.STAFF,
        cost=6,
    ),
}

# Each weapon beats exactly the next one in this cycle.
WEAPON_CYCLE = (WeaponClass.SWORD, WeaponClass.STAFF, WeaponClass.BOW, WeaponClass.LANCE)

# Multipliers in percent so damage stays in integer arithmetic
ADVANTAGE_PERCENT = 120
DISADVANTAGE_PERCENT = 80
NEUTRAL_PERCENT = 100

DECK_COMPOSITION: dict[Archetype, int] = {
    Archetype.SCOUT: 6,
    Archetype.ARCHER: 6,
    Archetype.KNIGHT: 3,
    Archetype.MAGE: 2,
}


def stats_for(archetype: Archetype) -> UnitArchetype:
    """Look up the stat template for an archetype."""
    return UNIT_CATALOG[archetype]


def card_for(archetype: Archetype) -> Card:
    return Card(archetype=archetype, cost=UNIT_CATALOG[archetype].cost)


def build_deck(rng: random.Random) -> list[Card]:
    """Build a freshly shuffled draw pile."""
    deck = [
        card_for(archetype)
        for archetype, count in DECK_COMPOSITION.items()
        for _ in range(count)
    ]
    rng.shuffle(deck)
    return deck


def _beats(attacker: WeaponClass, defender: WeaponClass) -> bool:
    if attacker not in WEAPON_CYCLE or defender not in WEAPON_CYCLE:
        return False
    idx = WEAPON_CYCLE.index(attacker)
    return WEAPON_CYCLE[(idx + 1) % len(WEAPON_CYCLE)] == defender


def multiplier_percent(attacker: WeaponClass, defender: WeaponClass) -> int:
    """Damage multiplier as an integer percentage."""
    if _beats(attacker, defender):
        return ADVANTAGE_PERCENT
    if _beats(defender, attacker):
        return DISADVANTAGE_PERCENT
    return NEUTRAL_PERCENT


def damage_multiplier(attacker: WeaponClass, defender: WeaponClass) -> float:
    """
    Damage multiplier for an attacker weapon against a defender weapon.

    1.2 when the attacker's weapon beats the defender's, 0.8 the other way
    round, 1.0 for mirror matches and classes outside the cycle.
    """
    return multiplier_percent(attacker, defender) / 100


def compute_damage(attack: int, attacker: WeaponClass, defender: WeaponClass) -> int:
    """floor(attack * multiplier), without float rounding surprises."""
    return attack * multiplier_percent(attacker, defender) // 100
