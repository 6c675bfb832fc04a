"""Client for a remote AI study material service.

The service receives the selected notes and the generation parameters and
answers with raw flashcards and quiz questions, which are normalised here
into the same result shape the heuristic generator produces.
"""
import logging

import requests

from study_helper.db import generate_id
from study_helper.quiz import validate_question
from study_helper.generation import StudyGenerator, EMPTY_RESULT_WARNING, default_title
from study_helper.models import (
    GenerationRequest, GenerationResult, GeneratedFlashcard, GeneratedFlashcardSet,
    QuizQuestion, QUESTION_TYPES, TRUE_FALSE_OPTIONS,
)

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/study/generate"
STATUS_PATH = "/api/study/status"


class RemoteGenerationError(Exception):
    """The remote service could not be reached or returned an unusable response."""


def _text(value) -> str:
    return str(value) if value is not None else ""


def normalize_flashcards(raw) -> list[GeneratedFlashcard]:
    if not isinstance(raw, list):
        return []
    cards = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        card = GeneratedFlashcard(
            question=_text(item.get("question")),
            answer=_text(item.get("answer")),
            learned=False,
        )
        if card.question or card.answer:
            cards.append(card)
    return cards


def normalize_question(raw: dict) -> QuizQuestion | None:
    if not isinstance(raw, dict):
        return None
    options = raw.get("options")
    options = [_text(o) for o in options] if isinstance(options, list) else None
    qtype = raw.get("type")
    if qtype not in QUESTION_TYPES:
        qtype = "mcq" if options else "short"
    correct = _text(raw.get("correctAnswer"))
    if qtype == "truefalse":
        options = list(TRUE_FALSE_OPTIONS)
        # match the canonical casing so the stored question stays consistent
        correct = next((o for o in options if o.lower() == correct.strip().lower()), correct)
    elif qtype == "mcq":
        if not options:
            qtype, options = "short", None
        elif correct not in options:
            options.append(correct)
    else:
        options = None
    explanation = raw.get("explanation")
    question = QuizQuestion(
        id=_text(raw.get("id")) or generate_id(),
        type=qtype,
        prompt=_text(raw.get("prompt")),
        correct_answer=correct,
        options=options,
        explanation=_text(explanation) if explanation else None,
    )
    try:
        validate_question(question)
    except ValueError as e:
        logger.warning("Dropping unusable question from AI service: %s", e)
        return None
    return question


class RemoteGenerator(StudyGenerator):
    kind = "ai"
    name = "AI Generator"

    def __init__(self, base_url: str | None, timeout: float | None = None, session=None):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def is_available(self) -> bool:
        """Ask the service whether generation is configured. Never raises."""
        if not self.base_url:
            return False
        try:
            response = self.session.get(self.base_url + STATUS_PATH, timeout=self.timeout)
            if not response.ok:
                return False
            return response.json().get("available") is True
        except (requests.RequestException, ValueError, AttributeError) as e:
            logger.warning("AI availability check failed: %s", e)
            return False

    def _post(self, payload: dict) -> dict:
        if not self.base_url:
            raise RemoteGenerationError("AI generation is not configured")
        try:
            response = self.session.post(
                self.base_url + GENERATE_PATH, json=payload, timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("AI generation request failed: %s", e)
            raise RemoteGenerationError(f"AI service unreachable: {e}") from e
        if not response.ok:
            try:
                body = response.json()
                message = body.get("message") or body.get("error")
            except (ValueError, AttributeError):
                message = None
            logger.error("AI generation returned %s", response.status_code)
            raise RemoteGenerationError(message or f"AI generation failed ({response.status_code})")
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteGenerationError("AI service returned malformed JSON") from e
        if not isinstance(data, dict):
            raise RemoteGenerationError("AI service returned an unexpected payload")
        return data

    def generate(self, request: GenerationRequest) -> GenerationResult:
        notes = request.notes
        data = self._post({
            "notes": [{"id": n.id, "title": n.title, "content": n.content} for n in notes],
            "subjectId": request.subject_id,
            "title": request.title,
            "mode": request.mode,
            "maxFlashcards": request.max_flashcards,
            "maxQuizQuestions": request.max_quiz_questions,
            "questionTypes": list(request.question_types),
        })

        warnings = data.get("warnings")
        result = GenerationResult(
            warnings=[_text(w) for w in warnings] if isinstance(warnings, list) else [],
        )
        note_ids = [n.id for n in notes]

        cards = normalize_flashcards(data.get("flashcards"))
        if cards:
            result.flashcard_set = GeneratedFlashcardSet(
                set={
                    "title": request.title or default_title("AI Flashcards", len(notes)),
                    "subject_id": request.subject_id,
                    "note_ids": note_ids,
                    "source": "generated",
                },
                cards=cards,
            )

        raw_quiz = data.get("quiz")
        if isinstance(raw_quiz, dict):
            raw_questions = raw_quiz.get("questions")
            questions = [
                q for q in map(normalize_question, raw_questions if isinstance(raw_questions, list) else [])
                if q is not None
            ]
            if questions:
                result.quiz = {
                    "title": _text(raw_quiz.get("title")) or request.title
                    or default_title("AI Quiz", len(notes)),
                    "subject_id": request.subject_id,
                    "note_ids": note_ids,
                    "questions": questions,
                    "source": "generated",
                }

        if result.is_empty:
            result.warnings.append(EMPTY_RESULT_WARNING)
        return result
