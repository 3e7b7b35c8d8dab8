"""Room, chat and scoring server for the multiplayer typing race."""

from __future__ import annotations

import argparse
import codecs
import contextlib
import itertools
import logging
import re
import signal
import socket
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

from .rooms import (
    GAME_MODE_MAX_BYTES,
    MESSAGE_MAX_BYTES,
    ROOM_NAME_MAX_BYTES,
    Lobby,
    Room,
    game_list_text,
    help_text,
)

SERVER_PORT = 12345
LOG_FILE = "server.log"
CHAT_MAX_BYTES = 1999
_RECV_SIZE = 2047
_ACCEPT_TIMEOUT = 1.0

ERR_NOT_IN_ROOM = "ERROR 방에 먼저 참여해야 합니다.\n"
ERR_ALREADY_IN_ROOM = "ERROR 이미 방에 참여 중입니다.\n"
ERR_NO_SUCH_ROOM = "ERROR 존재하지 않는 방 ID입니다.\n"
ERR_ROOM_NOT_FOUND = "ERROR 방을 찾을 수 없습니다.\n"
ERR_GAME_ALREADY_OVER = "ERROR 게임이 이미 종료되었습니다.\n"
ERR_USER_NOT_FOUND = "ERROR 사용자를 찾을 수 없습니다.\n"
ERR_SET_GAME_FORMAT = "ERROR 올바른 형식으로 입력하세요. 예: /set_game <모드> <시간>\n"
ERR_NOT_HOST = "ERROR 게임 설정은 방장만 할 수 있습니다.\n"
ERR_ALREADY_READY = "ERROR 이미 READY 상태입니다.\n"
ERR_UNKNOWN_COMMAND = "ERROR 알 수 없는 명령어입니다.\n"
MSG_READY = "레디되었습니다. 모든 플레이어가 레디를 입력하면 게임이 시작됩니다.\n"
MSG_GAME_STARTED = "GAME_STARTED\n"

_INT_RE = re.compile(r"\s*([+-]?\d+)")
_SET_GAME_RE = re.compile(r"\s*(\S+)\s+([+-]?\d+)")

_log = logging.getLogger(__name__)


def _clip(text: str, max_bytes: int) -> str:
    return text.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")


def _first_line(text: str) -> str:
    return text.split("\n", 1)[0]


def _leading_int(text: str) -> int | None:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else None


def _close(conn: Any) -> None:
    with contextlib.suppress(OSError, AttributeError):
        conn.shutdown(socket.SHUT_RDWR)
    with contextlib.suppress(OSError):
        conn.close()


def _new_decoder() -> Any:
    return codecs.getincrementaldecoder("utf-8")(errors="replace")


@dataclass(eq=False)
class Session:
    """One client connection and where it currently is."""

    conn: Any
    conn_id: int
    name: str = ""
    room_id: int | None = None
    _decoder: Any = field(default_factory=_new_decoder, init=False, repr=False)

    def send(self, message: str) -> bool:
        """Send a message; False if the connection is gone."""
        try:
            self.conn.sendall(message.encode("utf-8"))
        except OSError:
            return False
        return True

    def decode(self, data: bytes) -> str:
        """Decode received bytes, keeping split characters for the next chunk."""
        return self._decoder.decode(data)


class TypingServer:
    """Serves the lobby: rooms, chat, game settings, readiness and scores."""

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = SERVER_PORT,
        lobby: Lobby | None = None,
        log_path: str | None = LOG_FILE,
    ) -> None:
        self.host = host
        self.port = port
        self.lobby = lobby if lobby is not None else Lobby()
        self.address: tuple[str, int] | None = None
        self.listening = threading.Event()
        self._sessions: dict[int, Session] = {}
        self._ids = itertools.count(1)
        self._running = True
        self._closed = False
        self._log_lock = threading.Lock()
        self._log_file = open(log_path, "a", encoding="utf-8") if log_path else None
        self._routes: tuple[tuple[str, Callable[[Session, str], None]], ...] = (
            ("/create_room ", self._create_room),
            ("/join_room ", self._join_room),
            ("/chat ", self._chat),
            ("GAME_OVER ", self._game_over_score),
            ("/set_game ", self._set_game),
            ("/ready", self._ready),
            ("/game_list", self._game_list),
            ("/help", self._help),
            ("/list", self._room_list),
            ("SCORE ", self._score),
        )

    def _record(self, text: str) -> None:
        _log.info("%s", text.rstrip("\n"))
        with self._log_lock:
            if self._log_file is not None:
                self._log_file.write(text if text.endswith("\n") else text + "\n")
                self._log_file.flush()

    def _send(self, session: Session, message: str) -> None:
        if session.send(message):
            self._record(f"메시지 전송: {message}")

    def _broadcast(self, message: str, room_id: int, exclude: int | None = None) -> None:
        with self.lobby.lock:
            room = self.lobby.find_room(room_id)
            if room is None:
                return
            targets = [
                self._sessions.get(user.conn_id)
                for user in room.users
                if user.conn_id != exclude
            ]
        for target in targets:
            if target is not None:
                self._send(target, message)

    def register(self, session: Session, name: str):
        """Add the connection's user under the name it sent and welcome it."""
        user = self.lobby.add_user(session.conn_id, name.rstrip("\r\n"))
        session.name = user.name
        with self.lobby.lock:
            self._sessions[session.conn_id] = session
        self._record(f"사용자 이름 수신: {user.name} (연결 {session.conn_id})")
        self._send(session, f"WELCOME {user.name}\n")
        return user

    def handle_message(self, session: Session, message: str) -> None:
        """Act on one received message and send the replies it calls for."""
        self._record(f"받은 메시지 from {session.name}: {message}")
        with self.lobby.lock:
            if message == "GAME_OVER":
                self._game_over_all(session)
                return
            for prefix, handler in self._routes:
                if message.startswith(prefix):
                    handler(session, message[len(prefix):])
                    return
            self._send(session, ERR_UNKNOWN_COMMAND)

    def _create_room(self, session: Session, rest: str) -> None:
        room_name = _clip(_first_line(rest), ROOM_NAME_MAX_BYTES)
        room = self.lobby.create_room(room_name, session.conn_id)
        self._send(session, f"ROOM_CREATED {room.id} {room.name}\n")
        host = self.lobby.find_user(session.conn_id)
        if host is None:
            return
        self.lobby.join_room(room, host)
        host.room_id = room.id
        session.room_id = room.id
        self._record(f"사용자 {session.name}가 방 ID {room.id}에 참여했습니다.")
        self._broadcast(f"USER_JOINED {host.name}\n", room.id, session.conn_id)

    def _join_room(self, session: Session, rest: str) -> None:
        room_id = _leading_int(rest)
        room = self.lobby.find_room(room_id) if room_id is not None else None
        if room is None:
            self._send(session, ERR_NO_SUCH_ROOM)
            return
        user = self.lobby.find_user(session.conn_id)
        if user is None:
            self._send(session, ERR_USER_NOT_FOUND)
            return
        if user.room_id is not None:
            self._send(session, ERR_ALREADY_IN_ROOM)
            return
        self.lobby.join_room(room, user)
        session.room_id = room.id
        self._record(f"사용자 {session.name}가 방 ID {room.id}에 참여했습니다.")
        self._broadcast(f"USER_JOINED {user.name}\n", room.id, session.conn_id)

    def _chat(self, session: Session, rest: str) -> None:
        if session.room_id is None:
            self._send(session, ERR_NOT_IN_ROOM)
            return
        text = _clip(_first_line(rest), CHAT_MAX_BYTES)
        formatted = _clip(f"CHAT {session.name}: {text}\n", MESSAGE_MAX_BYTES)
        self._broadcast(formatted, session.room_id)

    def _game_over_all(self, session: Session) -> None:
        sender = self.lobby.find_user(session.conn_id)
        if sender is None:
            self._record("게임 오버 메시지를 보낸 사용자를 찾을 수 없습니다.")
            return
        message = f"GAME_OVER\n게임이 종료되었습니다. 최종승리자 : {sender.name}\n"
        targets = [self._sessions.get(user.conn_id) for user in self.lobby.users]
        for target in targets:
            if target is not None:
                self._send(target, message)
        self._record(f"모든 클라이언트에게 GAME_OVER 메시지 전송 완료: {message}")

    def _announce_winner(self, room: Room, exclude: int | None) -> None:
        winner = room.winner()
        if winner is not None:
            message = f"GAME_OVER\n승자가 결정되었습니다: {winner.name}님!\n"
            self._broadcast(message, room.id, exclude)
        room.game_started = False
        room.scores.clear()

    def _scored_room(self, session: Session, rest: str) -> tuple[Room, int] | None:
        """Shared checks of GAME_OVER and SCORE up to the room lookup."""
        if session.room_id is None:
            self._send(session, ERR_NOT_IN_ROOM)
            return None
        score = _leading_int(rest)
        room = self.lobby.find_room(session.room_id)
        if room is None:
            self._send(session, ERR_ROOM_NOT_FOUND)
            return None
        return room, score if score is not None else 0

    def _game_over_score(self, session: Session, rest: str) -> None:
        found = self._scored_room(session, rest)
        if found is None:
            return
        room, score = found
        if room.game_over:
            self._send(session, ERR_GAME_ALREADY_OVER)
            return
        user = self.lobby.find_user(session.conn_id)
        if user is None:
            self._send(session, ERR_USER_NOT_FOUND)
            return
        room.scores.insert(0, (user, score))
        room.game_over = True
        self._announce_winner(room, session.conn_id)

    def _score(self, session: Session, rest: str) -> None:
        found = self._scored_room(session, rest)
        if found is None:
            return
        room, score = found
        user = self.lobby.find_user(session.conn_id)
        if user is None:
            self._send(session, ERR_USER_NOT_FOUND)
            return
        room.scores.insert(0, (user, score))
        if len(room.scores) >= room.member_count():
            self._announce_winner(room, None)

    def _set_game(self, session: Session, rest: str) -> None:
        if session.room_id is None:
            self._send(session, ERR_NOT_IN_ROOM)
            return
        match = _SET_GAME_RE.match(rest)
        if match is None:
            self._send(session, ERR_SET_GAME_FORMAT)
            return
        room = self.lobby.find_room(session.room_id)
        if room is None:
            self._send(session, ERR_ROOM_NOT_FOUND)
            return
        if room.host_id != session.conn_id:
            self._send(session, ERR_NOT_HOST)
            return
        room.game_mode = _clip(match.group(1), GAME_MODE_MAX_BYTES)
        room.time_limit = int(match.group(2))
        room.ready_count = 0
        room.game_started = False
        self._record(f"게임 설정 업데이트: 모드={room.game_mode}, 시간 제한={room.time_limit}")
        self._broadcast(
            f"GAME_SETTINGS {room.game_mode} {room.time_limit}\n", room.id, session.conn_id
        )

    def _start_game(self, room: Room) -> None:
        self._broadcast(MSG_GAME_STARTED, room.id)
        room.game_started = True
        room.game_over = False
        room.scores.clear()

    def _ready(self, session: Session, rest: str) -> None:
        if session.room_id is None:
            self._send(session, ERR_NOT_IN_ROOM)
            return
        room = self.lobby.find_room(session.room_id)
        if room is None:
            self._send(session, ERR_ROOM_NOT_FOUND)
            return
        user = self.lobby.find_user(session.conn_id)
        if user is None:
            self._send(session, ERR_USER_NOT_FOUND)
            return
        if user.is_ready:
            self._send(session, ERR_ALREADY_READY)
            return
        user.is_ready = True
        room.ready_count += 1
        total = room.member_count()
        self._record(f"사용자 {session.name}가 READY 상태 ({room.ready_count}/{total})")
        if room.ready_count >= total and not room.game_started:
            self._broadcast(MSG_GAME_STARTED, room.id)
            self._start_game(room)
        else:
            self._send(session, MSG_READY)

    def _game_list(self, session: Session, rest: str) -> None:
        self._send(session, game_list_text())

    def _help(self, session: Session, rest: str) -> None:
        self._send(session, help_text())

    def _room_list(self, session: Session, rest: str) -> None:
        self._send(session, self.lobby.room_list_text())

    def disconnect(self, session: Session) -> None:
        """Remove a departing user from its room and the lobby, then close it."""
        self._record(f"사용자 {session.name}가 연결을 종료했습니다.")
        with self.lobby.lock:
            if session.room_id is not None:
                room = self.lobby.find_room(session.room_id)
                user = self.lobby.find_user(session.conn_id)
                if room is not None and user is not None:
                    new_host = self.lobby.leave_room(room, user)
                    self._broadcast(f"USER_LEFT {session.name}\n", room.id, session.conn_id)
                    if new_host is not None:
                        self._broadcast(f"HOST_CHANGED {new_host.name}\n", room.id)
            session.room_id = None
            self.lobby.remove_user(session.conn_id)
            self._sessions.pop(session.conn_id, None)
        _close(session.conn)

    def _serve_client(self, conn: socket.socket, conn_id: int) -> None:
        session = Session(conn, conn_id)
        try:
            first = conn.recv(_RECV_SIZE)
        except OSError:
            first = b""
        if not first:
            self._record(f"연결 {conn_id}에서 이름을 수신하지 못했습니다. 연결 종료.")
            _close(conn)
            return
        self.register(session, session.decode(first))
        try:
            while self._running:
                data = conn.recv(_RECV_SIZE)
                if not data:
                    break
                text = session.decode(data)
                if text:
                    self.handle_message(session, text)
        except OSError as exc:
            self._record(f"recv 실패: {exc}")
        finally:
            self.disconnect(session)

    def serve_forever(self) -> None:
        """Accept clients, one thread each, until shutdown() is called."""
        with socket.create_server((self.host, self.port), backlog=10) as server:
            server.settimeout(_ACCEPT_TIMEOUT)
            self.address = server.getsockname()[:2]
            self._record(f"서버가 포트 {self.address[1]}에서 리슨 중입니다...")
            self.listening.set()
            while self._running:
                try:
                    conn, _addr = server.accept()
                except socket.timeout:
                    continue
                except OSError as exc:
                    if not self._running:
                        break
                    self._record(f"어셉트 실패: {exc}")
                    continue
                conn.settimeout(None)
                conn_id = next(self._ids)
                self._record(f"새로운 연결: {conn_id}")
                threading.Thread(
                    target=self._serve_client, args=(conn, conn_id), daemon=True
                ).start()

    def shutdown(self) -> None:
        """Close every connection, forget all rooms and users, close the log."""
        with self.lobby.lock:
            if self._closed:
                return
            self._closed = True
            self._running = False
            sessions = list(self._sessions.values())
            self._sessions.clear()
            self.lobby.rooms.clear()
            self.lobby.users.clear()
        self._record("서버 종료 시그널 수신. 클린업을 진행합니다...")
        for session in sessions:
            _close(session.conn)
        with self._log_lock:
            if self._log_file is not None:
                self._log_file.close()
                self._log_file = None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Typing race server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=SERVER_PORT)
    parser.add_argument("--log", default=LOG_FILE)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        server = TypingServer(args.host, args.port, Lobby(), args.log)
    except OSError as exc:
        print(f"로그 파일 열기 실패: {exc}")
        return 1

    def _stop(signum, frame) -> None:
        server.shutdown()

    for name in ("SIGINT", "SIGTERM", "SIGQUIT"):
        if hasattr(signal, name):
            signal.signal(getattr(signal, name), _stop)
    try:
        server.serve_forever()
    except OSError as exc:
        print(f"서버 시작 실패: {exc}")
        server.shutdown()
        return 1
    server.shutdown()
    print("서버가 정상적으로 종료되었습니다.")
    return 0