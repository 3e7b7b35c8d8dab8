import pytest

from gameland.coda.client import Prompt, classify_message


def test_join_question():
    prompt = classify_message("게임에 참여하시겠습니까? (y/n): \n")
    assert prompt is Prompt.JOIN
    assert not prompt.ends_session
    assert "(y/n)" in prompt.input_label


def test_turn_message_with_tiles():
    text = "상대의 타일: [B?] \n당신의 타일: [W1] \n당신의 차례입니다.\n"
    assert classify_message(text) is Prompt.TURN
    assert Prompt.TURN.max_input > Prompt.JOIN.max_input


def test_guess_again_after_correct():
    assert classify_message("정답입니다!\n다시 추측하시겠습니까? (y/n): \n") is Prompt.GUESS_AGAIN


@pytest.mark.parametrize(
    "text",
    [
        "상대 플레이어가 연결을 해제하여 게임을 종료합니다...\n",
        "연결을 해제하셨습니다.",
        "게임을 거부하셨습니다. 연결을 종료합니다...\n",
        "상대 플레이어가 게임을 거부하여 연결을 종료합니다...\n",
    ],
)
def test_farewell_messages_end_session(text):
    prompt = classify_message(text)
    assert prompt is Prompt.FAREWELL
    assert prompt.ends_session
    assert prompt.input_label is None


def test_win_and_loss():
    win = classify_message("정답입니다!\n게임 종료: 당신이 이겼습니다!\n")
    loss = classify_message("게임 종료: 당신이 졌습니다!\n")
    assert win is Prompt.VICTORY
    assert loss is Prompt.DEFEAT
    assert win.ends_session and loss.ends_session
    assert win.linger > Prompt.FAREWELL.linger


def test_informational_messages_need_no_answer():
    assert classify_message("상대의 타일: [B?] \n상대방의 차례입니다. 잠시 기다려주세요.\n") is None
    assert classify_message("다른 플레이어를 기다리는 중입니다...\n") is None


def test_join_takes_precedence_over_turn():
    text = "게임에 참여하시겠습니까? (y/n): \n당신의 차례입니다.\n"
    assert classify_message(text) is Prompt.JOIN