"""
Raffle Keeper – sorteo recurrente con aleatoriedad externa y upkeep automatizado.
"""

__version__ = "0.1.0"
