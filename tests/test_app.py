import json

import pytest
from unittest.mock import patch, MagicMock
from study_helper.app import SessionExitRequested, session_prompt, session_int_prompt


def test_session_exit_requested_is_exception():
    with pytest.raises(SessionExitRequested):
        raise SessionExitRequested()


def test_session_prompt_raises_on_q():
    with patch("study_helper.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_raises_on_menu():
    with patch("study_helper.app.Prompt.ask", return_value="menu"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_returns_normal_input():
    with patch("study_helper.app.Prompt.ask", return_value="hello"):
        result = session_prompt("test prompt")
        assert result == "hello"


def test_session_int_prompt_raises_on_q():
    with patch("study_helper.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_int_prompt("pick", choices=["1", "2", "3", "4"])


def test_session_int_prompt_returns_normal_input():
    with patch("study_helper.app.Prompt.ask", return_value="3"):
        result = session_int_prompt("pick", choices=["1", "2", "3", "4"])
        assert result == 3


from study_helper.app import (
    run_flashcard_session, run_self_test, run_quiz_session, cmd_generate, cmd_demo, cmd_load,
    cmd_export, ask_count,
)
from study_helper.config import Config
from study_helper.db import get_setting
from study_helper.flashcards import (
    create_flashcard_set, create_flashcard, get_flashcard, list_flashcard_sets,
)
from study_helper.quiz import create_quiz, make_question, get_quiz_attempts, list_quizzes
from study_helper.notes import list_notes


def _cards(db, count):
    fs = create_flashcard_set(db, "Deck", "bio")
    return [create_flashcard(db, fs.id, f"Q{i}", f"A{i}") for i in range(count)]


def _quiz(db):
    return create_quiz(db, "Capitals", "geo", questions=[
        make_question("short", "Capital of France?", "Paris", id="q1"),
        make_question("truefalse", "Berlin is in Germany", "True", id="q2"),
        make_question("mcq", "Capital of Italy?", "Rome", options=["Rome", "Milan"], id="q3"),
    ])


def test_run_flashcard_session_saves_learned_then_exits_on_q(db):
    """Flip, mark learned, move on, then 'q' leaves the session."""
    cards = _cards(db, 2)
    with patch("study_helper.app.Prompt.ask", side_effect=["f", "l", "n", "q"]):
        with pytest.raises(SessionExitRequested):
            run_flashcard_session(db, cards)
    assert get_flashcard(db, cards[0].id).learned is True
    assert get_flashcard(db, cards[1].id).learned is False


def test_run_flashcard_session_empty_set(db):
    with patch("study_helper.app.Prompt.ask") as ask:
        run_flashcard_session(db, [])
    ask.assert_not_called()


def test_run_self_test_needs_four_cards(db):
    with patch("study_helper.app.Prompt.ask") as ask:
        run_self_test(_cards(db, 3))
    ask.assert_not_called()


def test_run_self_test_asks_every_card(db):
    cards = _cards(db, 4)
    with patch("study_helper.app.Prompt.ask", return_value="1") as ask:
        run_self_test(cards)
    assert ask.call_count == 4
    # self-tests are never stored
    assert all(get_flashcard(db, c.id).learned is False for c in cards)


def test_run_quiz_session_records_attempt(db):
    quiz = _quiz(db)
    # short answer, then option 1 (True), option 1 (Rome), then no retry
    with patch("study_helper.app.Prompt.ask", side_effect=["Paris", "1", "1", "n"]):
        run_quiz_session(db, quiz)
    attempts = get_quiz_attempts(db, quiz.id)
    assert len(attempts) == 1
    assert attempts[0].score == 3


def test_run_quiz_session_exit_stores_nothing(db):
    quiz = _quiz(db)
    with patch("study_helper.app.Prompt.ask", side_effect=["Paris", "q"]):
        with pytest.raises(SessionExitRequested):
            run_quiz_session(db, quiz)
    assert get_quiz_attempts(db, quiz.id) == []


def test_run_quiz_session_retry(db):
    quiz = _quiz(db)
    answers = ["Paris", "1", "1", "y", "Lyon", "2", "2", "n"]
    with patch("study_helper.app.Prompt.ask", side_effect=answers):
        run_quiz_session(db, quiz)
    assert [a.score for a in get_quiz_attempts(db, quiz.id)] == [3, 0]


def test_cmd_generate_from_demo_notes(db):
    cmd_demo(db)
    with patch("study_helper.app.Prompt.ask", side_effect=["all", "both", "basic", ""]), \
            patch("study_helper.app.IntPrompt.ask", side_effect=[10, 5]):
        cmd_generate(db, Config(db_path=db))
    generated = [s for s in list_flashcard_sets(db) if s.title == "Flashcards from 3 notes"]
    assert len(generated) == 1
    assert set(generated[0].note_ids) == {n.id for n in list_notes(db)}
    assert any(q.title == "Quiz from 3 notes" for q in list_quizzes(db))


def test_cmd_generate_falls_back_when_ai_unavailable(db):
    cmd_demo(db)
    with patch("study_helper.app.Prompt.ask", side_effect=["1", "flashcards", "ai", "Big O"]), \
            patch("study_helper.app.IntPrompt.ask", side_effect=[4, 5]):
        cmd_generate(db, Config(db_path=db))
    assert get_setting(db, "generator") == "basic"
    created = [s for s in list_flashcard_sets(db) if s.title == "Big O"]
    assert len(created) == 1
    assert created[0].source == "generated"


def test_cmd_generate_reports_remote_failure(db):
    from study_helper.remote import RemoteGenerationError
    cmd_demo(db)
    generator = MagicMock()
    generator.is_available.return_value = True
    generator.kind = "ai"
    generator.generate.side_effect = RemoteGenerationError("boom")
    with patch("study_helper.app.get_generator", return_value=generator), \
            patch("study_helper.app.Prompt.ask", side_effect=["all", "both", "ai", ""]), \
            patch("study_helper.app.IntPrompt.ask", side_effect=[10, 5]):
        cmd_generate(db, Config(db_path=db))
    assert len(list_flashcard_sets(db)) == 2


def test_cmd_load_rejects_bad_file(db, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"hello": "world"}))
    with patch("study_helper.app.Prompt.ask", return_value=str(bad)):
        cmd_load(db)
    assert list_flashcard_sets(db) == []


def test_ask_count_reprompts_until_not_negative():
    with patch("study_helper.app.IntPrompt.ask", side_effect=[-2, -1, 3]) as ask:
        assert ask_count("Max flashcards", default=10) == 3
    assert ask.call_count == 3


def test_cmd_generate_with_negative_maximum(db):
    cmd_demo(db)
    with patch("study_helper.app.Prompt.ask", side_effect=["all", "both", "basic", ""]), \
            patch("study_helper.app.IntPrompt.ask", side_effect=[-4, 10, 5]):
        cmd_generate(db, Config(db_path=db))
    assert any(s.title == "Flashcards from 3 notes" for s in list_flashcard_sets(db))


def test_cmd_export_one_set(db, tmp_path):
    cmd_demo(db)
    target = tmp_path / "set.json"
    with patch("study_helper.app.Prompt.ask", side_effect=["set", str(target)]), \
            patch("study_helper.app.IntPrompt.ask", return_value=1):
        cmd_export(db)
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["type"] == "flashcard_set"
    assert data["data"]["set"]["title"] == list_flashcard_sets(db)[0].title


def test_cmd_export_one_quiz(db, tmp_path):
    quiz = _quiz(db)
    target = tmp_path / "quiz.json"
    with patch("study_helper.app.Prompt.ask", side_effect=["quiz", str(target)]), \
            patch("study_helper.app.IntPrompt.ask", return_value=1):
        cmd_export(db)
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["type"] == "quiz"
    assert [q["prompt"] for q in data["data"]["questions"]] == [q.prompt for q in quiz.questions]


def test_cmd_export_everything(db, tmp_path):
    cmd_demo(db)
    target = tmp_path / "all.json"
    with patch("study_helper.app.Prompt.ask", side_effect=["all", str(target)]):
        cmd_export(db)
    data = json.loads(target.read_text(encoding="utf-8"))
    assert len(data["flashcard_sets"]) == 2


def test_cmd_export_nothing_to_pick(db):
    with patch("study_helper.app.Prompt.ask", side_effect=["quiz"]) as ask:
        cmd_export(db)
    assert ask.call_count == 1
