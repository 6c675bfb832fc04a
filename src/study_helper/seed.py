"""Seed the database with demo notes, flashcards and a quiz."""
import json
from pathlib import Path

from study_helper.db import get_setting, set_setting
from study_helper.flashcards import create_flashcard_set, create_flashcard
from study_helper.notes import create_note
from study_helper.quiz import create_quiz, make_question

CONTENT_DIR = Path(__file__).parent / "content"


def is_seeded(db_path: str) -> bool:
    """Check whether the demo data has already been loaded."""
    return get_setting(db_path, "demo_seeded") == "1"


def seed_demo(db_path: str) -> dict:
    """Insert the demo content from demo.json once. Returns what was created."""
    if is_seeded(db_path):
        return {"notes": 0, "flashcard_sets": 0, "quizzes": 0}
    data = json.loads((CONTENT_DIR / "demo.json").read_text(encoding="utf-8"))

    note_ids = {}
    for note in data["notes"]:
        created = create_note(db_path, note["title"], note["content"], subject_id=note["subject_id"])
        note_ids[note["key"]] = created.id

    for item in data["flashcard_sets"]:
        flashcard_set = create_flashcard_set(
            db_path,
            title=item["title"],
            subject_id=item["subject_id"],
            note_ids=[note_ids[k] for k in item["notes"]],
            source=item["source"],
            description=item.get("description"),
        )
        for card in item["cards"]:
            create_flashcard(
                db_path, flashcard_set.id, card["question"], card["answer"], learned=card["learned"],
            )

    for item in data["quizzes"]:
        create_quiz(
            db_path,
            title=item["title"],
            subject_id=item["subject_id"],
            questions=[make_question(**q) for q in item["questions"]],
            note_ids=[note_ids[k] for k in item["notes"]],
            source=item["source"],
        )

    set_setting(db_path, "demo_seeded", "1")
    return {
        "notes": len(data["notes"]),
        "flashcard_sets": len(data["flashcard_sets"]),
        "quizzes": len(data["quizzes"]),
    }
