"""JSON export and import of study materials."""
import logging
from datetime import datetime

from study_helper.flashcards import (
    get_flashcard_set, get_flashcards_by_set, list_flashcard_sets, list_flashcards,
    create_flashcard_set, create_flashcard,
)
from study_helper.quiz import get_quiz, list_quizzes, create_quiz, make_question
from study_helper.db import generate_id

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1
IMPORTED_SUFFIX = " (imported)"


class ImportFormatError(Exception):
    """The data to import is not a study materials export."""


def export_flashcard_set(db_path: str, set_id: str) -> dict | None:
    flashcard_set = get_flashcard_set(db_path, set_id)
    if flashcard_set is None:
        return None
    cards = get_flashcards_by_set(db_path, set_id)
    return {
        "type": "flashcard_set",
        "version": EXPORT_VERSION,
        "data": {
            "set": {"title": flashcard_set.title, "description": flashcard_set.description},
            "cards": [{"question": c.question, "answer": c.answer} for c in cards],
        },
    }


def export_quiz(db_path: str, quiz_id: str) -> dict | None:
    quiz = get_quiz(db_path, quiz_id)
    if quiz is None:
        return None
    return {
        "type": "quiz",
        "version": EXPORT_VERSION,
        "data": {
            "title": quiz.title,
            "description": quiz.description,
            "questions": [
                {
                    "type": q.type,
                    "prompt": q.prompt,
                    "options": q.options,
                    "correct_answer": q.correct_answer,
                    "explanation": q.explanation,
                }
                for q in quiz.questions
            ],
        },
    }


def export_all(db_path: str) -> dict:
    return {
        "version": EXPORT_VERSION,
        "exported_at": datetime.now().isoformat(),
        "flashcard_sets": [s.to_dict() for s in list_flashcard_sets(db_path)],
        "flashcards": [c.to_dict() for c in list_flashcards(db_path)],
        "quizzes": [q.to_dict() for q in list_quizzes(db_path)],
    }


def import_all(db_path: str, data: dict) -> dict:
    """Re-create exported sets, cards and quizzes under fresh ids.

    Cards follow their set to its new id; cards whose set is not part of the
    export are skipped.
    """
    if (
        not isinstance(data, dict)
        or not data.get("version")
        or not isinstance(data.get("flashcard_sets"), list)
        or not isinstance(data.get("flashcards"), list)
        or not isinstance(data.get("quizzes"), list)
    ):
        raise ImportFormatError("Invalid file format")

    try:
        # questions are checked before anything is written
        quiz_questions = [
            [
                make_question(**{**q, "id": q.get("id") or generate_id()})
                for q in item.get("questions", [])
            ]
            for item in data["quizzes"]
        ]
    except (KeyError, TypeError, AttributeError) as e:
        raise ImportFormatError(f"Invalid file format: bad question {e}") from e
    except ValueError as e:
        raise ImportFormatError(f"Invalid question: {e}") from e

    try:
        set_ids = {}
        for item in data["flashcard_sets"]:
            new_set = create_flashcard_set(
                db_path,
                title=item["title"] + IMPORTED_SUFFIX,
                subject_id=item.get("subject_id", ""),
                note_ids=item.get("note_ids", []),
                source=item.get("source", "manual"),
                description=item.get("description"),
            )
            set_ids[item["id"]] = new_set.id

        cards = 0
        for item in data["flashcards"]:
            new_set_id = set_ids.get(item.get("set_id"))
            if new_set_id is None:
                continue
            create_flashcard(
                db_path, new_set_id, item["question"], item["answer"],
                learned=bool(item.get("learned", False)),
            )
            cards += 1

        for item, questions in zip(data["quizzes"], quiz_questions):
            create_quiz(
                db_path,
                title=item["title"] + IMPORTED_SUFFIX,
                subject_id=item.get("subject_id", ""),
                questions=questions,
                note_ids=item.get("note_ids", []),
                source=item.get("source", "manual"),
                description=item.get("description"),
            )
    except (KeyError, TypeError) as e:
        raise ImportFormatError(f"Invalid file format: missing {e}") from e

    counts = {
        "flashcard_sets": len(set_ids),
        "flashcards": cards,
        "quizzes": len(data["quizzes"]),
    }
    logger.info("Imported %s", counts)
    return counts
