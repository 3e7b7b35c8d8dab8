"""Coda: tiles and hands, game server and terminal client."""