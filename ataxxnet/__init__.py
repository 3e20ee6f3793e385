"""Networked Ataxx: board rules, JSON line protocol, game server, automatic client and command line."""

__version__ = "0.1.0"
__all__ = ["cli", "client", "game", "protocol", "server"]