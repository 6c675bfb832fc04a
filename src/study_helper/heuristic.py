"""Rule-based study material generator (no AI required).

Flashcards and quiz questions are built from the formatting of a note:
emphasised terms, headings and list items. Every note gets the same share
of the requested totals, and the combined output is then cut back to the
requested maximum.
"""
import logging
import math
import random
import re

from study_helper.db import generate_id
from study_helper.extractor import (
    strip_html, extract_sentences, extract_key_terms, extract_list_items,
    extract_headings, first_sentence,
)
from study_helper.generation import StudyGenerator, EMPTY_RESULT_WARNING, default_title
from study_helper.quiz import normalize_answer
from study_helper.models import (
    GenerationRequest, GenerationResult, GeneratedFlashcard, GeneratedFlashcardSet,
    QuizQuestion, TRUE_FALSE_OPTIONS,
)

logger = logging.getLogger(__name__)

MIN_NOTE_LENGTH = 50
MAX_TRUE_FALSE = 3
MAX_MCQ = 2
MAX_SHORT = 2
MCQ_MIN_TERMS = 4
MAX_LIST_POINTS = 5


def _find_sentence(sentences: list[str], term: str) -> str | None:
    needle = term.lower()
    return next((s for s in sentences if needle in s.lower()), None)


def _blank_out(sentence: str, term: str) -> str:
    return re.sub(re.escape(term), "_____", sentence, flags=re.IGNORECASE)


def _distinct_others(terms: list[str], term: str) -> list[str]:
    """Other terms that grade differently from term and from each other."""
    seen = {normalize_answer(term)}
    others = []
    for other in terms:
        key = normalize_answer(other)
        if key not in seen:
            seen.add(key)
            others.append(other)
    return others


def flashcards_from_note(html: str, max_cards: int) -> list[GeneratedFlashcard]:
    plain = strip_html(html)
    sentences = extract_sentences(plain)
    terms = extract_key_terms(html)
    headings = extract_headings(html)
    items = extract_list_items(html)
    cards = []

    # Definitions: up to half the budget
    for term in terms[:math.ceil(max_cards / 2)]:
        sentence = _find_sentence(sentences, term)
        if sentence:
            cards.append(GeneratedFlashcard(question=f'What is "{term}"?', answer=sentence))

    # Explanations: up to a quarter of the budget
    for heading in headings[:math.ceil(max_cards / 4)]:
        position = plain.find(heading)
        if position < 0:
            continue
        sentence = first_sentence(plain[position + len(heading):])
        if sentence:
            cards.append(GeneratedFlashcard(question=f"Explain: {heading}", answer=sentence))

    if len(items) >= 3:
        topic = headings[0] if headings else "this topic"
        points = "\n".join(f"{i}. {item}" for i, item in enumerate(items[:MAX_LIST_POINTS], 1))
        cards.append(GeneratedFlashcard(question=f"List key points about {topic}", answer=points))

    return cards[:max_cards]


def quiz_questions_from_note(
    html: str, max_questions: int, question_types, rng: random.Random
) -> list[QuizQuestion]:
    plain = strip_html(html)
    sentences = extract_sentences(plain)
    terms = extract_key_terms(html)
    headings = extract_headings(html)
    questions = []

    if "truefalse" in question_types:
        # Statements are copied from the notes, so the answer is always True
        for sentence in sentences[:MAX_TRUE_FALSE]:
            if 30 < len(sentence) < 150:
                questions.append(QuizQuestion(
                    id=generate_id(),
                    type="truefalse",
                    prompt=f"True or False: {sentence}",
                    options=list(TRUE_FALSE_OPTIONS),
                    correct_answer="True",
                    explanation="This statement is directly from the notes.",
                ))

    if "mcq" in question_types and len(terms) >= MCQ_MIN_TERMS:
        for term in terms[:MAX_MCQ]:
            sentence = _find_sentence(sentences, term)
            if not sentence:
                continue
            others = _distinct_others(terms, term)
            if len(others) < 3:
                continue
            options = [term] + rng.sample(others, 3)
            rng.shuffle(options)
            clue = _blank_out(sentence, term)[:100]
            questions.append(QuizQuestion(
                id=generate_id(),
                type="mcq",
                prompt=f'Which term best completes: "{clue}..."?',
                options=options,
                correct_answer=term,
                explanation=f'The correct answer is "{term}" based on the note content.',
            ))

    if "short" in question_types:
        for heading in headings[:MAX_SHORT]:
            questions.append(QuizQuestion(
                id=generate_id(),
                type="short",
                prompt=f"Briefly explain: {heading}",
                correct_answer=sentences[0] if sentences else "Answer based on your understanding.",
                explanation="Open-ended question to test understanding.",
            ))

    return questions[:max_questions]


class HeuristicGenerator(StudyGenerator):
    kind = "basic"
    name = "Basic Generator"

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def is_available(self) -> bool:
        return True

    def generate(self, request: GenerationRequest) -> GenerationResult:
        notes = request.notes
        warnings = []
        if not notes:
            warnings.append("No notes selected. Please select at least one note.")
            return GenerationResult(warnings=warnings)

        want_cards = request.mode in ("flashcards", "both")
        want_quiz = request.mode in ("quiz", "both")
        card_budget = math.ceil(request.max_flashcards / len(notes))
        question_budget = math.ceil(request.max_quiz_questions / len(notes))

        cards = []
        questions = []
        for note in notes:
            content = note.content or ""
            if len(strip_html(content)) < MIN_NOTE_LENGTH:
                logger.info("Skipping note %s: too little content", note.id)
                warnings.append(f'Note "{note.title}" has very little content.')
                continue
            if want_cards:
                cards.extend(flashcards_from_note(content, card_budget))
            if want_quiz:
                questions.extend(quiz_questions_from_note(
                    content, question_budget, request.question_types, self.rng,
                ))

        cards = cards[:request.max_flashcards]
        questions = questions[:request.max_quiz_questions]
        note_ids = [note.id for note in notes]
        result = GenerationResult(warnings=warnings)
        if cards:
            result.flashcard_set = GeneratedFlashcardSet(
                set={
                    "title": request.title or default_title("Flashcards", len(notes)),
                    "subject_id": request.subject_id,
                    "note_ids": note_ids,
                    "source": "generated",
                },
                cards=cards,
            )
        if questions:
            result.quiz = {
                "title": request.title or default_title("Quiz", len(notes)),
                "subject_id": request.subject_id,
                "note_ids": note_ids,
                "questions": questions,
                "source": "generated",
            }
        if result.is_empty:
            warnings.append(EMPTY_RESULT_WARNING)
        return result
