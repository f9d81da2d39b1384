import random

import pytest

from quiz_server.models import Quiz
from quiz_server.services.play import PlayRound, PlaySession, PlayState
from quiz_server.services.session_manager import QuizSession
from tests.conftest import CAPITALS, ScriptedConnection, answer_for

QUESTIONS = [question for question, _ in CAPITALS]


def make_quizzes():
    return [Quiz(id=i, question=q, answer=a) for i, (q, a) in enumerate(CAPITALS, start=1)]


class TestPlayRound:

    def test_draw_exhausts_without_repeats(self):
        round_ = PlayRound(make_quizzes(), random.Random(3))
        drawn = []
        while round_:
            before = len(round_)
            drawn.append(round_.draw().id)
            assert len(round_) == before - 1

        assert sorted(drawn) == [1, 2, 3, 4]

    def test_draw_from_empty_round_fails(self):
        with pytest.raises(IndexError):
            PlayRound([]).draw()

    def test_every_quiz_can_come_first(self):
        firsts = {PlayRound(make_quizzes(), random.Random(seed)).draw().id for seed in range(200)}
        assert firsts == {1, 2, 3, 4}

    def test_round_works_on_a_snapshot(self):
        quizzes = make_quizzes()
        round_ = PlayRound(quizzes, random.Random(0))
        round_.draw()

        assert len(quizzes) == 4
        assert len(round_) == 3


# --- Full rounds through a session ---

@pytest.mark.asyncio
async def test_all_correct_asks_each_quiz_once(run_session, store):
    lines = ["play"] + [answer_for] * len(CAPITALS)
    connection, _ = await run_session(store, lines, rng=random.Random(11))

    for question in QUESTIONS:
        assert connection.sent.count(f"{question}? ") == 1
    for hits in range(1, 5):
        assert f"CORRECT - {hits} hits so far\n" in connection.sent
    assert connection.sent[-3:] == ["Nothing left to ask.\n", "End of quiz. Score: 4\n", "quiz > "]
    assert connection.prompts == 2


@pytest.mark.asyncio
async def test_first_wrong_answer_ends_round(run_session, store):
    connection, _ = await run_session(store, ["p", "Atlantis"])

    asked = [text for text in connection.sent if text.rstrip().endswith("?")]
    assert len(asked) == 1
    assert "INCORRECT.\n" in connection.sent
    assert "End of quiz. Score: 0\n" in connection.sent
    assert "Nothing left to ask.\n" not in connection.sent
    assert connection.prompts == 2


@pytest.mark.asyncio
async def test_wrong_answer_after_two_hits(run_session, store):
    lines = ["play", answer_for, answer_for, "no idea"]
    connection, _ = await run_session(store, lines, rng=random.Random(5))

    assert "CORRECT - 2 hits so far\n" in connection.sent
    assert connection.sent[-3:] == ["INCORRECT.\n", "End of quiz. Score: 2\n", "quiz > "]


@pytest.mark.asyncio
async def test_empty_collection_has_nothing_to_ask(run_session, empty_store):
    connection, _ = await run_session(empty_store, ["play"])

    assert connection.sent == [
        "CORE Quiz\n",
        "quiz > ",
        "Nothing left to ask.\n",
        "End of quiz. Score: 0\n",
        "quiz > ",
    ]


@pytest.mark.asyncio
async def test_hang_up_mid_round_writes_no_result(run_session, store):
    connection, session = await run_session(store, ["play", answer_for], rng=random.Random(2))

    assert "CORRECT - 1 hits so far\n" in connection.sent
    assert "End of quiz" not in connection.output
    assert connection.prompts == 1
    assert not session.active


@pytest.mark.asyncio
async def test_play_session_state_machine(store, settings):
    connection = ScriptedConnection([answer_for, answer_for, answer_for, answer_for])
    session = QuizSession(connection, store, settings)
    play = PlaySession(session, random.Random(7))

    assert play.state is PlayState.INIT
    score = await play.run()

    assert score == 4
    assert play.state is PlayState.FINISHED
    assert play.exhausted
    assert len(play.round) == 0


@pytest.mark.asyncio
async def test_round_does_not_requery_the_store(store, settings):
    calls = []
    original = store.list_all

    async def counting_list_all():
        calls.append(1)
        return await original()

    store.list_all = counting_list_all
    connection = ScriptedConnection([answer_for] * 4)
    session = QuizSession(connection, store, settings)

    await PlaySession(session, random.Random(1)).run()

    assert len(calls) == 1
