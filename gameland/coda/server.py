"""Two-player Coda server: each connection is handled on its own thread."""

from __future__ import annotations

import argparse
import contextlib
import logging
import re
import socket
import threading
import time

from .tiles import MAX_PLAYERS, CodaGame, GuessResult, Hand

PORT = 8080
_BUFSIZE = 1024
_log = logging.getLogger(__name__)

MSG_JOIN = "게임에 참여하시겠습니까? (y/n): \n"
MSG_WAITING = "다른 플레이어를 기다리는 중입니다...\n"
MSG_REFUSED = "게임을 거부하셨습니다. 연결을 종료합니다...\n"
MSG_OPPONENT_REFUSED = "상대 플레이어가 게임을 거부하여 연결을 종료합니다...\n"
MSG_OPPONENT_LEFT = "상대 플레이어가 연결을 해제하여 게임을 종료합니다...\n"
MSG_YOUR_TURN = "\n당신의 차례입니다.\n"
MSG_OPPONENT_TURN = "\n상대방의 차례입니다. 잠시 기다려주세요.\n"
MSG_BAD_FORMAT = "입력 형식이 올바르지 않습니다. 예: 1 B 5\n"
MSG_CORRECT = "정답입니다!\n"
MSG_WIN = "게임 종료: 당신이 이겼습니다!\n"
MSG_LOSE = "게임 종료: 당신이 졌습니다!\n"
MSG_AGAIN = "다시 추측하시겠습니까? (y/n): \n"
MSG_WRONG = "틀렸습니다. 새로운 타일을 뽑습니다.\n"

_GUESS_RE = re.compile(r"\s*([+-]?\d+)(?!\d)\s*(\S)\s*([+-]?\d+)")


def format_tiles(opponent: Hand, own: Hand) -> str:
    """Board text: the opponent's tiles with hidden ones masked, then one's own."""
    theirs = "".join(tile.label(hidden=True) + " " for tile in opponent)
    mine = "".join(tile.label() + " " for tile in own)
    return f"상대의 타일: {theirs}\n당신의 타일: {mine}"


def parse_guess(text: str) -> tuple[int, str, int]:
    """Parse ``position colour number`` such as ``1 B 5``."""
    match = _GUESS_RE.match(text)
    if match is None:
        raise ValueError(f"malformed guess: {text!r}")
    return int(match.group(1)), match.group(2), int(match.group(3))


def _close(conn: socket.socket | None) -> None:
    if conn is None:
        return
    with contextlib.suppress(OSError):
        conn.shutdown(socket.SHUT_RDWR)
    with contextlib.suppress(OSError):
        conn.close()


class CodaServer:
    """Holds the shared game and coordinates turns between two players."""

    wait_interval = 1.0

    def __init__(self, host: str = "0.0.0.0", port: int = PORT, game: CodaGame | None = None) -> None:
        self.host = host
        self.port = port
        self.game = game if game is not None else CodaGame()
        self.player_count = 0
        self.current_turn = 0
        self.ready: list[bool | None] = [None] * MAX_PLAYERS
        self.sockets: list[socket.socket | None] = [None] * MAX_PLAYERS
        self._cond = threading.Condition()

    @staticmethod
    def _send(conn: socket.socket, message: str) -> None:
        conn.sendall(message.encode("utf-8"))

    @staticmethod
    def _recv(conn: socket.socket) -> str:
        return conn.recv(_BUFSIZE).decode("utf-8", errors="replace")

    def _notify_and_close(self, player_id: int, message: str) -> None:
        with self._cond:
            conn = self.sockets[player_id]
        if conn is None:
            return
        with contextlib.suppress(OSError):
            self._send(conn, message)
        _close(conn)

    def _advance_turn(self) -> None:
        with self._cond:
            self.current_turn = (self.current_turn + 1) % MAX_PLAYERS
            self._cond.notify_all()

    def handle_client(self, conn: socket.socket, player_id: int) -> None:
        """Run one player's session from the join question to the end of the game."""
        opponent = 1 - player_id
        with self._cond:
            self.sockets[player_id] = conn
            self._cond.wait_for(lambda: self.player_count >= MAX_PLAYERS)
        try:
            if not self._join(conn, player_id, opponent):
                return
            self._send(conn, f"게임 시작! 당신은 플레이어 {player_id + 1}입니다.\n")
            self._play(conn, player_id, opponent)
        except OSError as exc:
            _log.info("player %d connection ended: %s", player_id + 1, exc)
        finally:
            _close(conn)

    def _join(self, conn: socket.socket, player_id: int, opponent: int) -> bool:
        self._send(conn, MSG_JOIN)
        answer = self._recv(conn)
        if answer[:1] in ("y", "Y") and answer:
            with self._cond:
                self.ready[player_id] = True
                self._cond.notify_all()
            self._send(conn, MSG_WAITING)
            with self._cond:
                self._cond.wait_for(
                    lambda: all(state is True for state in self.ready) or False in self.ready
                )
                return False not in self.ready

        if answer:
            with contextlib.suppress(OSError):
                self._send(conn, MSG_REFUSED)
        with self._cond:
            opponent_state = self.ready[opponent]
            self.ready[player_id] = False
            self._cond.notify_all()
        if opponent_state is not False:
            self._notify_and_close(opponent, MSG_OPPONENT_REFUSED)
        return False

    def _play(self, conn: socket.socket, player_id: int, opponent: int) -> None:
        while True:
            with self._cond:
                my_turn = self.current_turn == player_id
                info = format_tiles(self.game.hands[opponent], self.game.hands[player_id])
            if not my_turn:
                self._send(conn, info + MSG_OPPONENT_TURN)
                time.sleep(self.wait_interval)
                continue

            self._send(conn, info + MSG_YOUR_TURN)
            data = self._recv(conn)
            if not data:
                self._notify_and_close(opponent, MSG_OPPONENT_LEFT)
                return
            _log.info("플레이어 %d: %s", player_id + 1, data)

            try:
                position, color, number = parse_guess(data)
            except ValueError:
                self._send(conn, MSG_BAD_FORMAT)
                continue

            with self._cond:
                result = self.game.hands[opponent].guess(position, color, number)
                won = result is GuessResult.CORRECT and self.game.hands[opponent].all_revealed()

            if result is GuessResult.CORRECT:
                self._send(conn, MSG_CORRECT)
                if won:
                    self._send(conn, MSG_WIN)
                    self._notify_and_close(opponent, MSG_LOSE)
                    return
                self._send(conn, MSG_AGAIN)
                answer = self._recv(conn)
                if answer[:1] in ("n", "N") and answer:
                    self._advance_turn()
            else:
                if result is GuessResult.INVALID_POSITION:
                    _log.info("player %d chose an invalid position", player_id + 1)
                self._send(conn, MSG_WRONG)
                with self._cond:
                    drawn = self.game.draw_tile(player_id)
                if drawn is None:
                    _log.info("no more tiles to draw")
                else:
                    self._send(conn, f"새로 뽑은 타일: {drawn.label()}\n")
                self._advance_turn()

    def serve_forever(self) -> None:
        """Accept up to two players and serve each on a daemon thread."""
        with socket.create_server((self.host, self.port), backlog=MAX_PLAYERS) as server:
            print(f"포트 {self.port}에서 서버가 대기 중입니다.")
            while True:
                conn, _addr = server.accept()
                print("새로운 연결이 수락되었습니다.")
                with self._cond:
                    if self.player_count >= MAX_PLAYERS:
                        _close(conn)
                        continue
                    player_id = self.player_count
                    self.player_count += 1
                    self.sockets[player_id] = conn
                    self._cond.notify_all()
                threading.Thread(
                    target=self.handle_client, args=(conn, player_id), daemon=True
                ).start()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Coda game server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    server = CodaServer(args.host, args.port, CodaGame())
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        return 0
    except OSError as exc:
        print(f"서버 시작 실패: {exc}")
        return 1
    return 0