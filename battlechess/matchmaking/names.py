"""Random display names for connecting players."""

import random

PLAYER_NAMES = (
    "TacticalMaster", "ChessWarrior", "BattleKnight", "StrategicMind", "GridCommander",
    "CardCrusader", "TacticalGenius", "BattleMage", "ChessLord", "WarChief",
    "GridMaster", "TacticianX", "BattleAce", "ChessHero", "WarStrategist",
    "TacticalBeast", "GridWarrior", "BattleProud", "ChessKing", "WarMaster",
)


def generate_player_name(rng: random.Random | None = None) -> str:
    """A handle from PLAYER_NAMES followed by a number below 999."""
    rng = rng or random
    return f"{rng.choice(PLAYER_NAMES)}{rng.randrange(999)}"
