# tests/test_transfer.py
import pytest

from study_helper.db import init_db
from study_helper.flashcards import (
    create_flashcard_set, create_flashcard, list_flashcard_sets, get_flashcards_by_set,
)
from study_helper.quiz import create_quiz, make_question, list_quizzes
from study_helper.transfer import (
    export_flashcard_set, export_quiz, export_all, import_all, ImportFormatError,
)


def _materials(db):
    fs = create_flashcard_set(db, "Cells", "bio", description="Basics")
    create_flashcard(db, fs.id, "What is a cell?", "The basic unit of life", learned=True)
    create_flashcard(db, fs.id, "What is a membrane?", "The cell boundary")
    quiz = create_quiz(db, "Cell quiz", "bio", questions=[
        make_question("truefalse", "Cells are alive", "True"),
        make_question("mcq", "Powerhouse?", "Mitochondria", options=["Mitochondria", "Nucleus"]),
    ])
    return fs, quiz


def test_export_flashcard_set(db):
    fs, _ = _materials(db)
    exported = export_flashcard_set(db, fs.id)
    assert exported["type"] == "flashcard_set"
    assert exported["version"] == 1
    assert exported["data"]["set"] == {"title": "Cells", "description": "Basics"}
    assert exported["data"]["cards"] == [
        {"question": "What is a cell?", "answer": "The basic unit of life"},
        {"question": "What is a membrane?", "answer": "The cell boundary"},
    ]


def test_export_quiz(db):
    _, quiz = _materials(db)
    exported = export_quiz(db, quiz.id)
    assert exported["type"] == "quiz"
    assert exported["data"]["title"] == "Cell quiz"
    assert [q["type"] for q in exported["data"]["questions"]] == ["truefalse", "mcq"]
    assert exported["data"]["questions"][1]["correct_answer"] == "Mitochondria"


def test_export_unknown_ids(db):
    assert export_flashcard_set(db, "missing") is None
    assert export_quiz(db, "missing") is None


def test_export_all_then_import_into_fresh_db(db, tmp_path):
    fs, quiz = _materials(db)
    data = export_all(db)
    assert data["version"] == 1
    assert "exported_at" in data

    other = str(tmp_path / "other.db")
    init_db(other)
    counts = import_all(other, data)
    assert counts == {"flashcard_sets": 1, "flashcards": 2, "quizzes": 1}

    imported_set = list_flashcard_sets(other)[0]
    assert imported_set.title == "Cells (imported)"
    assert imported_set.id != fs.id
    cards = get_flashcards_by_set(other, imported_set.id)
    assert [c.question for c in cards] == ["What is a cell?", "What is a membrane?"]
    assert cards[0].learned is True

    imported_quiz = list_quizzes(other)[0]
    assert imported_quiz.title == "Cell quiz (imported)"
    assert imported_quiz.id != quiz.id
    assert [q.prompt for q in imported_quiz.questions] == ["Cells are alive", "Powerhouse?"]


def test_import_into_same_db_keeps_originals(db):
    _materials(db)
    import_all(db, export_all(db))
    titles = [s.title for s in list_flashcard_sets(db)]
    assert titles == ["Cells", "Cells (imported)"]
    sets = list_flashcard_sets(db)
    assert len(get_flashcards_by_set(db, sets[0].id)) == 2
    assert len(get_flashcards_by_set(db, sets[1].id)) == 2


def test_import_skips_cards_without_set(db):
    data = {
        "version": 1,
        "flashcard_sets": [],
        "flashcards": [{"id": "c1", "set_id": "gone", "question": "Q", "answer": "A"}],
        "quizzes": [],
    }
    assert import_all(db, data) == {"flashcard_sets": 0, "flashcards": 0, "quizzes": 0}


# --- Edge case tests ---


@pytest.mark.parametrize("data", [
    None,
    [],
    {"flashcard_sets": [], "flashcards": [], "quizzes": []},
    {"version": 1, "flashcard_sets": {}, "flashcards": [], "quizzes": []},
])
def test_import_rejects_wrong_shape(db, data):
    with pytest.raises(ImportFormatError):
        import_all(db, data)


def test_import_rejects_missing_fields(db):
    data = {"version": 1, "flashcard_sets": [{"id": "s1"}], "flashcards": [], "quizzes": []}
    with pytest.raises(ImportFormatError):
        import_all(db, data)


def test_import_rejects_invalid_question_and_writes_nothing(db):
    data = {
        "version": 1,
        "flashcard_sets": [{"id": "s1", "title": "Cells", "subject_id": "bio"}],
        "flashcards": [{"id": "c1", "set_id": "s1", "question": "Q", "answer": "A"}],
        "quizzes": [
            {"id": "z1", "title": "Fine", "subject_id": "bio", "questions": [
                {"type": "short", "prompt": "Explain", "correct_answer": "x"},
            ]},
            {"id": "z2", "title": "Broken", "subject_id": "bio", "questions": [
                {"type": "mcq", "prompt": "Pick", "correct_answer": "A", "options": ["B", "C"]},
            ]},
        ],
    }
    with pytest.raises(ImportFormatError):
        import_all(db, data)
    assert list_flashcard_sets(db) == []
    assert list_quizzes(db) == []
