"""Study material generators and persistence of their results."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from study_helper.flashcards import create_flashcard_set, create_flashcard
from study_helper.models import FlashcardSet, Flashcard, Quiz, GenerationRequest, GenerationResult
from study_helper.quiz import create_quiz

logger = logging.getLogger(__name__)

GENERATOR_KINDS = ("basic", "ai")

EMPTY_RESULT_WARNING = (
    "Could not extract enough content. "
    "Try adding more formatted content (headings, lists, bold text)."
)


class StudyGenerator(ABC):
    """Turns notes into a flashcard set and/or a quiz."""

    kind: str = ""
    name: str = ""

    @abstractmethod
    def generate(self, request: GenerationRequest) -> GenerationResult:
        ...

    @abstractmethod
    def is_available(self) -> bool:
        ...


def get_generator(kind: str, config=None, **kwargs) -> StudyGenerator:
    """Return the generator for kind ("ai" or "basic"); anything else is basic."""
    if kind == "ai":
        from study_helper.remote import RemoteGenerator
        base_url = config.ai_base_url if config else None
        timeout = config.ai_timeout if config else None
        return RemoteGenerator(base_url, timeout=timeout, **kwargs)
    from study_helper.heuristic import HeuristicGenerator
    return HeuristicGenerator(**kwargs)


def default_title(kind: str, note_count: int) -> str:
    plural = "s" if note_count != 1 else ""
    return f"{kind} from {note_count} note{plural}"


@dataclass
class SavedMaterials:
    flashcard_set: Optional[FlashcardSet] = None
    flashcards: list[Flashcard] = field(default_factory=list)
    quiz: Optional[Quiz] = None
    warnings: list[str] = field(default_factory=list)


def save_generation_result(db_path: str, result: GenerationResult) -> SavedMaterials:
    """Persist a generator's output: the set, then its cards, then the quiz."""
    saved = SavedMaterials(warnings=list(result.warnings))
    if result.flashcard_set is not None:
        saved.flashcard_set = create_flashcard_set(db_path, **result.flashcard_set.set)
        saved.flashcards = [
            create_flashcard(
                db_path, saved.flashcard_set.id, card.question, card.answer, learned=card.learned,
            )
            for card in result.flashcard_set.cards
        ]
    if result.quiz is not None:
        saved.quiz = create_quiz(db_path, **result.quiz)
    logger.info(
        "Saved %d flashcards and %d quiz questions",
        len(saved.flashcards), len(saved.quiz.questions) if saved.quiz else 0,
    )
    return saved


def generate_study_materials(
    db_path: str, generator: StudyGenerator, request: GenerationRequest
) -> SavedMaterials:
    result = generator.generate(request)
    return save_generation_result(db_path, result)
