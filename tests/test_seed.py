# tests/test_seed.py
from study_helper.flashcards import list_flashcard_sets, get_flashcards_by_set
from study_helper.notes import list_notes
from study_helper.quiz import list_quizzes
from study_helper.seed import seed_demo, is_seeded


def test_seed_demo_counts(db):
    counts = seed_demo(db)
    assert counts == {"notes": 3, "flashcard_sets": 2, "quizzes": 1}
    assert [n.title for n in list_notes(db)] == ["Big O Notation", "Process States", "SQL Joins"]


def test_seed_demo_links_sets_to_notes(db):
    seed_demo(db)
    note_ids = {n.id for n in list_notes(db)}
    sets = list_flashcard_sets(db)
    assert [len(get_flashcards_by_set(db, s.id)) for s in sets] == [3, 2]
    for s in sets:
        assert s.note_ids
        assert set(s.note_ids) <= note_ids


def test_seed_demo_quiz_is_valid(db):
    seed_demo(db)
    quiz = list_quizzes(db)[0]
    assert {q.type for q in quiz.questions} == {"mcq", "truefalse", "short"}
    for q in quiz.questions:
        if q.type == "mcq":
            assert q.correct_answer in q.options
        if q.type == "truefalse":
            assert q.options == ["True", "False"]


def test_is_seeded(db):
    assert not is_seeded(db)
    seed_demo(db)
    assert is_seeded(db)


def test_seed_demo_only_once(db):
    seed_demo(db)
    assert seed_demo(db) == {"notes": 0, "flashcard_sets": 0, "quizzes": 0}
    assert len(list_notes(db)) == 3
    assert len(list_flashcard_sets(db)) == 2
