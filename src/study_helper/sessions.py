"""Flashcard review, flashcard self-tests and quiz taking.

Sessions keep navigation state in memory only. Learned flags and quiz
attempts are written to the store the moment they happen, so abandoning a
session never needs cleanup.
"""
import random
from dataclasses import dataclass, field

from study_helper.flashcards import mark_flashcard_learned
from study_helper.models import Flashcard, Quiz, QuizAttempt
from study_helper.quiz import grade_quiz, create_quiz_attempt, is_correct_answer, normalize_answer

FILTERS = ("all", "learned", "unlearned")
MIN_TEST_CARDS = 4


class QuizNotReadyError(Exception):
    """Raised when a quiz is submitted before every question is answered, or twice."""


class FlashcardSession:
    """Walk through a deck, flipping cards and marking them learned."""

    def __init__(self, db_path: str, cards: list[Flashcard], rng: random.Random | None = None):
        self.db_path = db_path
        self.cards = list(cards)
        self.rng = rng or random.Random()
        self.filter = "all"
        self.deck: list[Flashcard] = []
        self.index = 0
        self.flipped = False
        self._apply_filter()

    def _apply_filter(self) -> None:
        if self.filter == "learned":
            self.deck = [c for c in self.cards if c.learned]
        elif self.filter == "unlearned":
            self.deck = [c for c in self.cards if not c.learned]
        else:
            self.deck = list(self.cards)
        self.index = 0
        self.flipped = False

    @property
    def current(self) -> Flashcard | None:
        return self.deck[self.index] if self.deck else None

    @property
    def learned_count(self) -> int:
        return sum(1 for c in self.cards if c.learned)

    @property
    def progress(self) -> float:
        if not self.deck:
            return 0.0
        return (self.index + 1) / len(self.deck) * 100

    def set_filter(self, name: str) -> None:
        if name not in FILTERS:
            raise ValueError(f"Unknown filter: {name}")
        self.filter = name
        self._apply_filter()

    def flip(self) -> bool:
        self.flipped = not self.flipped
        return self.flipped

    def next(self) -> bool:
        if self.index >= len(self.deck) - 1:
            return False
        self.index += 1
        self.flipped = False
        return True

    def previous(self) -> bool:
        if self.index == 0:
            return False
        self.index -= 1
        self.flipped = False
        return True

    def shuffle(self) -> None:
        self.rng.shuffle(self.deck)
        self.index = 0
        self.flipped = False

    def toggle_learned(self) -> Flashcard | None:
        """Flip the learned flag of the current card without leaving it."""
        card = self.current
        if card is None:
            return None
        updated = mark_flashcard_learned(self.db_path, card.id, not card.learned)
        if updated is None:
            return None
        self.cards = [updated if c.id == card.id else c for c in self.cards]
        self.deck[self.index] = updated
        return updated


@dataclass
class SelfTestQuestion:
    card: Flashcard
    options: list[str]


def build_self_test(cards: list[Flashcard], rng: random.Random | None = None) -> list[SelfTestQuestion]:
    """Multiple choice questions using other cards' answers as distractors.

    Returns an empty list when the deck cannot give every card three distinct
    wrong answers (fewer than four cards or four distinct answers).
    """
    rng = rng or random.Random()
    # answers that grade the same count once
    answers = {}
    for card in cards:
        answers.setdefault(normalize_answer(card.answer), card.answer)
    if len(cards) < MIN_TEST_CARDS or len(answers) < MIN_TEST_CARDS:
        return []
    questions = []
    for card in cards:
        key = normalize_answer(card.answer)
        wrong = rng.sample([a for k, a in answers.items() if k != key], 3)
        options = [card.answer] + wrong
        rng.shuffle(options)
        questions.append(SelfTestQuestion(card=card, options=options))
    rng.shuffle(questions)
    return questions


@dataclass
class FlashcardSelfTest:
    """Scores a self-test built from a deck. Results are not stored."""

    questions: list[SelfTestQuestion]
    index: int = 0
    picks: dict = field(default_factory=dict)

    @property
    def current(self) -> SelfTestQuestion | None:
        return self.questions[self.index] if self.index < len(self.questions) else None

    @property
    def finished(self) -> bool:
        return self.index >= len(self.questions)

    def pick(self, option: str) -> bool:
        question = self.current
        if question is None:
            raise IndexError("No more questions in this test")
        correct = is_correct_answer(option, question.card.answer)
        self.picks[question.card.id] = (option, correct)
        self.index += 1
        return correct

    @property
    def score(self) -> int:
        return sum(1 for _, correct in self.picks.values() if correct)

    @property
    def percentage(self) -> int:
        if not self.questions:
            return 0
        return round(self.score / len(self.questions) * 100)


class QuizSession:
    """Answer the questions of a quiz in any order, then submit once."""

    def __init__(self, db_path: str, quiz: Quiz):
        self.db_path = db_path
        self.quiz = quiz
        self.index = 0
        self.answers: dict[str, str] = {}
        self.attempt: QuizAttempt | None = None

    @property
    def submitted(self) -> bool:
        return self.attempt is not None

    @property
    def current(self):
        questions = self.quiz.questions
        return questions[self.index] if questions else None

    @property
    def answered_count(self) -> int:
        return sum(1 for q in self.quiz.questions if q.id in self.answers)

    @property
    def can_submit(self) -> bool:
        return (
            not self.submitted
            and bool(self.quiz.questions)
            and self.answered_count == len(self.quiz.questions)
        )

    def answer(self, text: str) -> None:
        question = self.current
        if question is None:
            raise QuizNotReadyError("This quiz has no questions")
        self.answer_question(question.id, text)

    def answer_question(self, question_id: str, text: str) -> None:
        if self.submitted:
            raise QuizNotReadyError("This attempt has already been submitted")
        if not any(q.id == question_id for q in self.quiz.questions):
            raise KeyError(question_id)
        self.answers[question_id] = text

    def next(self) -> bool:
        if self.index >= len(self.quiz.questions) - 1:
            return False
        self.index += 1
        return True

    def previous(self) -> bool:
        if self.index == 0:
            return False
        self.index -= 1
        return True

    def go_to(self, index: int) -> None:
        if not 0 <= index < len(self.quiz.questions):
            raise IndexError(index)
        self.index = index

    def submit(self) -> QuizAttempt:
        """Grade every question and store the attempt."""
        if self.submitted:
            raise QuizNotReadyError("This attempt has already been submitted")
        if not self.can_submit:
            missing = len(self.quiz.questions) - self.answered_count
            raise QuizNotReadyError(f"{missing} question(s) still need an answer")
        results, score = grade_quiz(self.quiz, self.answers)
        self.attempt = create_quiz_attempt(
            self.db_path, self.quiz.id, score, len(self.quiz.questions), results,
        )
        return self.attempt

    def retry(self) -> "QuizSession":
        return QuizSession(self.db_path, self.quiz)
