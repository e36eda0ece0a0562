"""
BattleChess: authoritative server for a two-player tactical card battler.
"""

__version__ = "0.1.0"
