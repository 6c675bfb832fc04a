"""Flashcard sets and flashcards."""
import logging

from study_helper.db import (
    list_records, get_record, create_record, update_record, remove_record,
)
from study_helper.models import FlashcardSet, Flashcard

logger = logging.getLogger(__name__)

SETS = "flashcard_sets"
CARDS = "flashcards"


# --- Flashcard sets ---


def list_flashcard_sets(db_path: str) -> list[FlashcardSet]:
    return [FlashcardSet.from_dict(r) for r in list_records(db_path, SETS)]


def get_flashcard_set(db_path: str, set_id: str) -> FlashcardSet | None:
    record = get_record(db_path, SETS, set_id)
    return FlashcardSet.from_dict(record) if record else None


def get_flashcard_sets_by_subject(db_path: str, subject_id: str) -> list[FlashcardSet]:
    return [s for s in list_flashcard_sets(db_path) if s.subject_id == subject_id]


def create_flashcard_set(
    db_path: str,
    title: str,
    subject_id: str,
    note_ids: list[str] | None = None,
    source: str = "manual",
    description: str | None = None,
) -> FlashcardSet:
    record = create_record(db_path, SETS, {
        "title": title,
        "subject_id": subject_id,
        "note_ids": list(note_ids or []),
        "source": source,
        "description": description,
    })
    return FlashcardSet.from_dict(record)


def create_empty_flashcard_set(
    db_path: str, subject_id: str, title: str, description: str | None = None
) -> FlashcardSet:
    return create_flashcard_set(db_path, title, subject_id, description=description)


def update_flashcard_set(db_path: str, set_id: str, **patch) -> FlashcardSet | None:
    record = update_record(db_path, SETS, set_id, patch)
    return FlashcardSet.from_dict(record) if record else None


def delete_flashcard_set(db_path: str, set_id: str) -> bool:
    """Delete a set together with all of its cards."""
    cards = get_flashcards_by_set(db_path, set_id)
    for card in cards:
        remove_record(db_path, CARDS, card.id)
    logger.debug("Removed %d cards with set %s", len(cards), set_id)
    return remove_record(db_path, SETS, set_id)


# --- Flashcards ---


def list_flashcards(db_path: str) -> list[Flashcard]:
    return [Flashcard.from_dict(r) for r in list_records(db_path, CARDS)]


def get_flashcard(db_path: str, card_id: str) -> Flashcard | None:
    record = get_record(db_path, CARDS, card_id)
    return Flashcard.from_dict(record) if record else None


def get_flashcards_by_set(db_path: str, set_id: str) -> list[Flashcard]:
    return [c for c in list_flashcards(db_path) if c.set_id == set_id]


def create_flashcard(
    db_path: str, set_id: str, question: str, answer: str, learned: bool = False
) -> Flashcard:
    if get_record(db_path, SETS, set_id) is None:
        raise ValueError(f"Flashcard set {set_id} does not exist")
    record = create_record(db_path, CARDS, {
        "set_id": set_id,
        "question": question,
        "answer": answer,
        "learned": learned,
    })
    return Flashcard.from_dict(record)


def add_flashcard_to_set(db_path: str, set_id: str, question: str, answer: str) -> Flashcard:
    return create_flashcard(db_path, set_id, question, answer)


def update_flashcard(db_path: str, card_id: str, **patch) -> Flashcard | None:
    if "set_id" in patch and get_record(db_path, SETS, patch["set_id"]) is None:
        raise ValueError(f"Flashcard set {patch['set_id']} does not exist")
    record = update_record(db_path, CARDS, card_id, patch)
    return Flashcard.from_dict(record) if record else None


def delete_flashcard(db_path: str, card_id: str) -> bool:
    return remove_record(db_path, CARDS, card_id)


def mark_flashcard_learned(db_path: str, card_id: str, learned: bool) -> Flashcard | None:
    return update_flashcard(db_path, card_id, learned=learned)
