"""Note records that study material is generated from."""
from study_helper.db import list_records, get_record, create_record, remove_record
from study_helper.models import Note

NOTES = "notes"


def create_note(db_path: str, title: str, content: str, subject_id: str = "") -> Note:
    record = create_record(db_path, NOTES, {
        "title": title,
        "content": content,
        "subject_id": subject_id,
    })
    return Note.from_dict(record)


def list_notes(db_path: str) -> list[Note]:
    return [Note.from_dict(r) for r in list_records(db_path, NOTES)]


def get_note(db_path: str, note_id: str) -> Note | None:
    record = get_record(db_path, NOTES, note_id)
    return Note.from_dict(record) if record else None


def get_notes_by_ids(db_path: str, note_ids: list[str]) -> list[Note]:
    """Notes in the order the ids were given; unknown ids are skipped."""
    by_id = {note.id: note for note in list_notes(db_path)}
    return [by_id[i] for i in note_ids if i in by_id]


def delete_note(db_path: str, note_id: str) -> bool:
    return remove_record(db_path, NOTES, note_id)
