"""Data classes for the study domain model."""
from dataclasses import dataclass, field, asdict
from typing import Optional

QUESTION_TYPES = ("mcq", "truefalse", "short")
GENERATION_MODES = ("flashcards", "quiz", "both")
SOURCES = ("manual", "generated")
TRUE_FALSE_OPTIONS = ["True", "False"]


@dataclass
class Note:
    id: str
    title: str
    content: str = ""
    subject_id: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Note":
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            content=str(data.get("content", "")),
            subject_id=str(data.get("subject_id", "")),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class FlashcardSet:
    id: str
    title: str
    subject_id: str
    note_ids: list[str] = field(default_factory=list)
    source: str = "manual"
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "FlashcardSet":
        return cls(
            id=data["id"],
            title=data["title"],
            subject_id=data.get("subject_id", ""),
            note_ids=list(data.get("note_ids", [])),
            source=data.get("source", "manual"),
            description=data.get("description"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Flashcard:
    id: str
    set_id: str
    question: str
    answer: str
    learned: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Flashcard":
        return cls(
            id=data["id"],
            set_id=data["set_id"],
            question=data.get("question", ""),
            answer=data.get("answer", ""),
            learned=bool(data.get("learned", False)),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class QuizQuestion:
    id: str
    type: str
    prompt: str
    correct_answer: str
    options: Optional[list[str]] = None
    explanation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "QuizQuestion":
        qtype = data.get("type", "short")
        options = data.get("options")
        if qtype == "truefalse":
            options = list(TRUE_FALSE_OPTIONS)
        elif qtype == "short":
            options = None
        return cls(
            id=data["id"],
            type=qtype,
            prompt=data.get("prompt", ""),
            correct_answer=data.get("correct_answer", ""),
            options=list(options) if options is not None else None,
            explanation=data.get("explanation"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Quiz:
    id: str
    subject_id: str
    title: str
    note_ids: list[str] = field(default_factory=list)
    questions: list[QuizQuestion] = field(default_factory=list)
    source: str = "manual"
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Quiz":
        return cls(
            id=data["id"],
            subject_id=data.get("subject_id", ""),
            title=data["title"],
            note_ids=list(data.get("note_ids", [])),
            questions=[QuizQuestion.from_dict(q) for q in data.get("questions", [])],
            source=data.get("source", "manual"),
            description=data.get("description"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AttemptAnswer:
    question_id: str
    answer: str
    correct: bool


@dataclass
class QuizAttempt:
    id: str
    quiz_id: str
    score: int
    total_questions: int
    answers: list[AttemptAnswer] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def ratio(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return self.score / self.total_questions

    @property
    def percentage(self) -> int:
        return round(self.ratio * 100)

    @classmethod
    def from_dict(cls, data: dict) -> "QuizAttempt":
        return cls(
            id=data["id"],
            quiz_id=data["quiz_id"],
            score=int(data["score"]),
            total_questions=int(data["total_questions"]),
            answers=[AttemptAnswer(**a) for a in data.get("answers", [])],
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict:
        return asdict(self)


# --- Generation results (not yet persisted, so no ids or timestamps) ---


@dataclass
class GenerationRequest:
    notes: list[Note]
    subject_id: str
    title: str = ""
    mode: str = "both"
    max_flashcards: int = 10
    max_quiz_questions: int = 5
    question_types: tuple = QUESTION_TYPES

    def __post_init__(self):
        if self.max_flashcards < 0 or self.max_quiz_questions < 0:
            raise ValueError("Maximum counts cannot be negative")


@dataclass
class GeneratedFlashcard:
    question: str
    answer: str
    learned: bool = False


@dataclass
class GeneratedFlashcardSet:
    set: dict
    cards: list[GeneratedFlashcard] = field(default_factory=list)


@dataclass
class GenerationResult:
    flashcard_set: Optional[GeneratedFlashcardSet] = None
    quiz: Optional[dict] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.flashcard_set is None and self.quiz is None
