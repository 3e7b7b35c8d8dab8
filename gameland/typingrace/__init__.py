"""Typing race: lobby, rooms and the game server."""