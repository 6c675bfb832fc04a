"""Quizzes, their embedded questions, grading and attempt history."""
import logging

from study_helper.db import (
    list_records, get_record, create_record, update_record, remove_record, generate_id,
)
from study_helper.models import (
    Quiz, QuizQuestion, QuizAttempt, AttemptAnswer, QUESTION_TYPES, TRUE_FALSE_OPTIONS,
)

logger = logging.getLogger(__name__)

QUIZZES = "quizzes"
ATTEMPTS = "quiz_attempts"


# --- Grading ---


def normalize_answer(answer: str | None) -> str:
    return (answer or "").strip().lower()


def is_correct_answer(answer: str | None, correct_answer: str) -> bool:
    """Exact match after trimming and lowercasing. No fuzzy matching."""
    return normalize_answer(answer) == normalize_answer(correct_answer)


def grade_quiz(quiz: Quiz, answers: dict) -> tuple[list[AttemptAnswer], int]:
    """Grade every question of the quiz; missing answers count as wrong."""
    results = []
    for question in quiz.questions:
        answer = answers.get(question.id) or ""
        results.append(AttemptAnswer(
            question_id=question.id,
            answer=answer,
            correct=is_correct_answer(answer, question.correct_answer),
        ))
    return results, sum(1 for r in results if r.correct)


# --- Questions ---


def validate_question(question: QuizQuestion) -> None:
    """Raise ValueError if the question breaks the type/options invariants."""
    if question.type not in QUESTION_TYPES:
        raise ValueError(f"Unknown question type: {question.type}")
    if not question.prompt.strip() or not question.correct_answer.strip():
        raise ValueError("Prompt and correct answer are required")
    if question.type == "mcq":
        if not question.options or question.correct_answer not in question.options:
            raise ValueError("Multiple choice options must include the correct answer")
    elif question.type == "truefalse":
        if question.options != TRUE_FALSE_OPTIONS:
            raise ValueError("True/false options must be exactly True and False")
        if question.correct_answer not in TRUE_FALSE_OPTIONS:
            raise ValueError("True/false answer must be True or False")


def make_question(
    type: str,
    prompt: str,
    correct_answer: str,
    options: list[str] | None = None,
    explanation: str | None = None,
    id: str | None = None,
) -> QuizQuestion:
    if type == "truefalse":
        options = list(TRUE_FALSE_OPTIONS)
    elif type == "short":
        options = None
    question = QuizQuestion(
        id=id or generate_id(),
        type=type,
        prompt=prompt,
        correct_answer=correct_answer,
        options=list(options) if options is not None else None,
        explanation=explanation,
    )
    validate_question(question)
    return question


def _question_dicts(questions) -> list[dict]:
    """Validated question dicts; raises ValueError on the first bad question."""
    result = []
    for q in questions:
        if not isinstance(q, QuizQuestion):
            q = QuizQuestion.from_dict({**q, "id": q.get("id") or generate_id()})
        validate_question(q)
        result.append(q.to_dict())
    return result


# --- Quizzes ---


def list_quizzes(db_path: str) -> list[Quiz]:
    return [Quiz.from_dict(r) for r in list_records(db_path, QUIZZES)]


def get_quiz(db_path: str, quiz_id: str) -> Quiz | None:
    record = get_record(db_path, QUIZZES, quiz_id)
    return Quiz.from_dict(record) if record else None


def get_quizzes_by_subject(db_path: str, subject_id: str) -> list[Quiz]:
    return [q for q in list_quizzes(db_path) if q.subject_id == subject_id]


def create_quiz(
    db_path: str,
    title: str,
    subject_id: str,
    questions: list | None = None,
    note_ids: list[str] | None = None,
    source: str = "manual",
    description: str | None = None,
) -> Quiz:
    record = create_record(db_path, QUIZZES, {
        "title": title,
        "subject_id": subject_id,
        "note_ids": list(note_ids or []),
        "questions": _question_dicts(questions or []),
        "source": source,
        "description": description,
    })
    return Quiz.from_dict(record)


def create_empty_quiz(
    db_path: str, subject_id: str, title: str, description: str | None = None
) -> Quiz:
    return create_quiz(db_path, title, subject_id, description=description)


def update_quiz(db_path: str, quiz_id: str, **patch) -> Quiz | None:
    if "questions" in patch:
        patch["questions"] = _question_dicts(patch["questions"])
    record = update_record(db_path, QUIZZES, quiz_id, patch)
    return Quiz.from_dict(record) if record else None


def delete_quiz(db_path: str, quiz_id: str) -> bool:
    """Delete a quiz together with its attempt history."""
    attempts = get_quiz_attempts(db_path, quiz_id)
    for attempt in attempts:
        remove_record(db_path, ATTEMPTS, attempt.id)
    logger.debug("Removed %d attempts with quiz %s", len(attempts), quiz_id)
    return remove_record(db_path, QUIZZES, quiz_id)


def add_quiz_question(
    db_path: str,
    quiz_id: str,
    type: str,
    prompt: str,
    correct_answer: str,
    options: list[str] | None = None,
    explanation: str | None = None,
) -> Quiz | None:
    quiz = get_quiz(db_path, quiz_id)
    if quiz is None:
        return None
    question = make_question(type, prompt, correct_answer, options, explanation)
    return update_quiz(db_path, quiz_id, questions=quiz.questions + [question])


def update_quiz_question(db_path: str, quiz_id: str, question_id: str, **patch) -> Quiz | None:
    """Patch one embedded question in place. None if the quiz or question is unknown."""
    quiz = get_quiz(db_path, quiz_id)
    if quiz is None:
        return None
    questions = []
    found = False
    for question in quiz.questions:
        if question.id == question_id:
            fields = {**question.to_dict(), **patch, "id": question.id}
            question = make_question(**fields)
            found = True
        questions.append(question)
    if not found:
        return None
    return update_quiz(db_path, quiz_id, questions=questions)


def delete_quiz_question(db_path: str, quiz_id: str, question_id: str) -> Quiz | None:
    """Remove one embedded question. None if the quiz or question is unknown."""
    quiz = get_quiz(db_path, quiz_id)
    if quiz is None:
        return None
    questions = [q for q in quiz.questions if q.id != question_id]
    if len(questions) == len(quiz.questions):
        return None
    return update_quiz(db_path, quiz_id, questions=questions)


# --- Attempts ---


def get_quiz_attempts(db_path: str, quiz_id: str) -> list[QuizAttempt]:
    return [
        QuizAttempt.from_dict(r) for r in list_records(db_path, ATTEMPTS)
        if r["quiz_id"] == quiz_id
    ]


def list_quiz_attempts(db_path: str) -> list[QuizAttempt]:
    return [QuizAttempt.from_dict(r) for r in list_records(db_path, ATTEMPTS)]


def create_quiz_attempt(
    db_path: str,
    quiz_id: str,
    score: int,
    total_questions: int,
    answers: list[AttemptAnswer],
) -> QuizAttempt:
    """Store a graded attempt. Counts must agree with the quiz as it is now."""
    quiz = get_quiz(db_path, quiz_id)
    if quiz is None:
        raise ValueError(f"Quiz {quiz_id} does not exist")
    if total_questions != len(quiz.questions):
        raise ValueError(
            f"Attempt covers {total_questions} questions but the quiz has {len(quiz.questions)}"
        )
    if len(answers) != total_questions:
        raise ValueError(f"Expected {total_questions} answers, got {len(answers)}")
    if not 0 <= score <= total_questions:
        raise ValueError(f"Score {score} out of range for {total_questions} questions")
    if score != sum(1 for a in answers if a.correct):
        raise ValueError("Score does not match the number of correct answers")
    record = create_record(db_path, ATTEMPTS, {
        "quiz_id": quiz_id,
        "score": score,
        "total_questions": total_questions,
        "answers": [
            {"question_id": a.question_id, "answer": a.answer, "correct": a.correct}
            for a in answers
        ],
    })
    return QuizAttempt.from_dict(record)


def get_best_attempt(db_path: str, quiz_id: str) -> QuizAttempt | None:
    """Highest score ratio; equal ratios go to the earliest attempt."""
    best = None
    attempts = get_quiz_attempts(db_path, quiz_id)
    for attempt in sorted(attempts, key=lambda a: a.created_at or ""):
        if best is None or attempt.ratio > best.ratio:
            best = attempt
    return best


def get_latest_attempt(db_path: str, quiz_id: str) -> QuizAttempt | None:
    attempts = get_quiz_attempts(db_path, quiz_id)
    if not attempts:
        return None
    # stored order breaks timestamp ties
    return max(enumerate(attempts), key=lambda pair: (pair[1].created_at or "", pair[0]))[1]
