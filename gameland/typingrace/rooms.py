"""Users, rooms and the lobby that holds them for the typing race server."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

NAME_MAX_BYTES = 49
ROOM_NAME_MAX_BYTES = 99
GAME_MODE_MAX_BYTES = 49
MESSAGE_MAX_BYTES = 2047

DEFAULT_GAME_MODE = "기본모드"
DEFAULT_TIME_LIMIT = 90

GAME_MODES = ("산성비", "스피드모드", "멀티타이핑", "타임어택")

NO_ROOMS_TEXT = "현재 사용 가능한 방이 없습니다.\n"

_HELP_TEXT = (
    "사용 가능한 명령어:\n"
    "/create_room <방 이름>     : 방을 생성합니다.\n"
    "/join_room <방 ID>        : 방에 참여합니다.\n"
    "/list                     : 방 목록을 조회합니다.\n"
    "/chat <메시지>             : 채팅 메시지를 보냅니다.\n"
    "/set_game <모드> <시간>    : 게임 설정을 변경합니다. (방장만 가능)\n"
    "/game_list                : 사용 가능한 게임 모드를 조회합니다.\n"
    "/ready                    : 게임 준비를 완료합니다.\n"
    "/topic <주제>              : GPT를 통해 주제에 맞는 단어를 가져옵니다.\n"
    "/help                     : 도움말을 표시합니다.\n"
)

_log = logging.getLogger(__name__)


def _clip(text: str, max_bytes: int) -> str:
    """Cut text to at most ``max_bytes`` of UTF-8 without splitting a character."""
    return text.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")


@dataclass(eq=False)
class User:
    """A connected player, identified by its connection id."""

    conn_id: int
    name: str
    room_id: int | None = None
    is_ready: bool = False

    def __post_init__(self) -> None:
        self.name = _clip(self.name, NAME_MAX_BYTES)


@dataclass(eq=False)
class Room:
    """A game room; members and scores are kept newest first."""

    id: int
    name: str
    host_id: int
    users: list[User] = field(default_factory=list)
    game_mode: str = DEFAULT_GAME_MODE
    time_limit: int = DEFAULT_TIME_LIMIT
    ready_count: int = 0
    game_started: bool = False
    game_over: bool = False
    scores: list[tuple[User, int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.name = _clip(self.name, ROOM_NAME_MAX_BYTES)
        self.game_mode = _clip(self.game_mode, GAME_MODE_MAX_BYTES)

    def member_count(self) -> int:
        return len(self.users)

    def winner(self) -> User | None:
        """The user with the highest score; ties go to the newest score."""
        best: tuple[User, int] | None = None
        for entry in self.scores:
            if best is None or entry[1] > best[1]:
                best = entry
        return best[0] if best is not None else None


class Lobby:
    """All connected users and all rooms, guarded by one reentrant lock."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.users: list[User] = []
        self.rooms: list[Room] = []
        self._next_room_id = 1

    def add_user(self, conn_id: int, name: str) -> User:
        user = User(conn_id, name)
        with self.lock:
            self.users.insert(0, user)
        return user

    def remove_user(self, conn_id: int) -> User | None:
        with self.lock:
            user = self.find_user(conn_id)
            if user is not None:
                self.users.remove(user)
            return user

    def find_user(self, conn_id: int) -> User | None:
        with self.lock:
            return next((user for user in self.users if user.conn_id == conn_id), None)

    def create_room(self, name: str, host_id: int) -> Room:
        with self.lock:
            room = Room(self._next_room_id, name, host_id)
            self._next_room_id += 1
            self.rooms.insert(0, room)
        host = self.find_user(host_id)
        _log.info(
            "방 생성: ID=%d, 이름=%s, 호스트=%s",
            room.id,
            room.name,
            host.name if host is not None else host_id,
        )
        return room

    def find_room(self, room_id: int) -> Room | None:
        with self.lock:
            return next((room for room in self.rooms if room.id == room_id), None)

    def join_room(self, room: Room, user: User) -> bool:
        """Put a user in a room; False if the user was already a member."""
        with self.lock:
            if any(member.conn_id == user.conn_id for member in room.users):
                return False
            room.users.insert(0, user)
            user.room_id = room.id
            return True

    def leave_room(self, room: Room, user: User) -> User | None:
        """Take a user out of a room; return the new host if the host left."""
        with self.lock:
            member = next((m for m in room.users if m.conn_id == user.conn_id), None)
            if member is None:
                return None
            room.users.remove(member)
            user.room_id = None
            if room.host_id == user.conn_id and room.users:
                new_host = room.users[0]
                room.host_id = new_host.conn_id
                return new_host
            return None

    def room_list_text(self) -> str:
        with self.lock:
            if not self.rooms:
                return NO_ROOMS_TEXT
            lines = "".join(
                f"방 ID: {room.id}, 방 이름: {room.name}, "
                f"게임 모드: {room.game_mode}, 시간 제한: {room.time_limit}초\n"
                for room in self.rooms
            )
        return _clip("현재 방 목록:\n" + lines, MESSAGE_MAX_BYTES)


def help_text() -> str:
    """The command summary sent in reply to /help."""
    return _HELP_TEXT


def game_list_text() -> str:
    """The numbered list of game modes sent in reply to /game_list."""
    body = "".join(f"{number}. {mode}\n" for number, mode in enumerate(GAME_MODES, 1))
    return _clip("사용 가능한 게임 모드:\n" + body, MESSAGE_MAX_BYTES)