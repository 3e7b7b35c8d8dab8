import random
import socket
import threading

import pytest

from gameland.coda.server import CodaServer, format_tiles, parse_guess
from gameland.coda.tiles import CodaGame, Hand, Tile


class _Reader:
    def __init__(self, sock):
        sock.settimeout(5)
        self.sock = sock
        self.buf = b""

    def until(self, marker):
        needle = marker.encode()
        while needle not in self.buf:
            chunk = self.sock.recv(4096)
            if not chunk:
                raise AssertionError(f"connection closed before {marker!r}")
            self.buf += chunk
        end = self.buf.index(needle) + len(needle)
        head, self.buf = self.buf[:end], self.buf[end:]
        return head.decode("utf-8", errors="replace")

    def rest(self):
        while True:
            chunk = self.sock.recv(4096)
            if not chunk:
                break
            self.buf += chunk
        data, self.buf = self.buf, b""
        return data.decode("utf-8", errors="replace")


def _start(server):
    server.player_count = 2
    pairs = [socket.socketpair() for _ in range(2)]
    threads = [
        threading.Thread(target=server.handle_client, args=(pairs[i][0], i), daemon=True)
        for i in range(2)
    ]
    for thread in threads:
        thread.start()
    clients = [pair[1] for pair in pairs]
    return clients, [_Reader(c) for c in clients], threads


def _finish(clients, threads):
    for thread in threads:
        thread.join(timeout=5)
    for client in clients:
        client.close()
    assert not any(thread.is_alive() for thread in threads)


def test_format_tiles_masks_hidden_opponent_tiles():
    opponent = Hand([Tile(2, "B"), Tile(7, "W", revealed=True)])
    own = Hand([Tile(1, "W")])
    assert format_tiles(opponent, own) == "상대의 타일: [B?] [W7] \n당신의 타일: [W1] "


@pytest.mark.parametrize(
    "text, expected",
    [("1 B 5", (1, "B", 5)), ("  2W3\n", (2, "W", 3)), ("4 W 12", (4, "W", 12))],
)
def test_parse_guess(text, expected):
    assert parse_guess(text) == expected


@pytest.mark.parametrize("text", ["B 5", "1 B", "", "15 5", "hello"])
def test_parse_guess_rejects_malformed(text):
    with pytest.raises(ValueError):
        parse_guess(text)


def test_refusal_ends_both_sessions():
    server = CodaServer("127.0.0.1", 0, CodaGame(random.Random(2)))
    clients, readers, threads = _start(server)
    readers[0].until("게임에 참여하시겠습니까?")
    readers[1].until("게임에 참여하시겠습니까?")
    clients[1].sendall(b"n")
    assert "게임을 거부하셨습니다." in readers[1].rest()
    assert "상대 플레이어가 게임을 거부하여 연결을 종료합니다..." in readers[0].rest()
    _finish(clients, threads)
    assert server.ready[1] is False


def test_full_reveal_wins_the_game():
    game = CodaGame(random.Random(3))
    game.hands[0] = Hand([Tile(4, "W")])
    game.hands[1] = Hand([Tile(9, "B")])
    server = CodaServer("127.0.0.1", 0, game)
    server.wait_interval = 0.01
    clients, readers, threads = _start(server)
    readers[0].until("게임에 참여하시겠습니까?")
    readers[1].until("게임에 참여하시겠습니까?")
    clients[0].sendall(b"y")
    readers[0].until("다른 플레이어를 기다리는 중입니다...")
    clients[1].sendall(b"y")
    assert "[B?]" in readers[0].until("당신의 차례입니다.")
    clients[0].sendall(b"1 B 9")
    out0 = readers[0].rest()
    assert "정답입니다!" in out0
    assert "게임 종료: 당신이 이겼습니다!" in out0
    out1 = readers[1].rest()
    assert "상대방의 차례입니다" in out1
    assert "게임 종료: 당신이 졌습니다!" in out1
    _finish(clients, threads)
    assert game.hands[1].all_revealed()


def test_wrong_guess_draws_and_passes_turn():
    game = CodaGame(random.Random(4))
    game.hands[0] = Hand([Tile(4, "W")])
    game.hands[1] = Hand([Tile(9, "B")])
    server = CodaServer("127.0.0.1", 0, game)
    server.wait_interval = 0.01
    clients, readers, threads = _start(server)
    readers[0].until("게임에 참여하시겠습니까?")
    readers[1].until("게임에 참여하시겠습니까?")
    clients[0].sendall(b"y")
    readers[0].until("다른 플레이어를 기다리는 중입니다...")
    clients[1].sendall(b"y")
    readers[0].until("당신의 차례입니다.")
    clients[0].sendall(b"hello")
    readers[0].until("입력 형식이 올바르지 않습니다.")
    readers[0].until("당신의 차례입니다.")
    clients[0].sendall(b"1 B 8")
    readers[0].until("틀렸습니다. 새로운 타일을 뽑습니다.")
    readers[0].until("새로 뽑은 타일: [")
    readers[1].until("당신의 차례입니다.")
    assert server.current_turn == 1
    assert len(game.hands[0]) == 2
    clients[1].close()
    assert "상대 플레이어가 연결을 해제하여 게임을 종료합니다..." in readers[0].rest()
    _finish(clients, threads)