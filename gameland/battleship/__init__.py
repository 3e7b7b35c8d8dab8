"""Battleship: boards, computer opponent, terminal client and match server."""