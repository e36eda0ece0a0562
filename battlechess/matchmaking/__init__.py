"""
Matchmaking for the BattleChess server.
"""

from battlechess.matchmaking.matchmaker import ActiveMatch, Matchmaker, WaitingPlayer

__all__ = ["ActiveMatch", "Matchmaker", "WaitingPlayer"]
