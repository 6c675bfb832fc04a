"""Study progress statistics."""
from study_helper.flashcards import list_flashcard_sets, list_flashcards
from study_helper.quiz import list_quizzes, list_quiz_attempts


def get_score_label(score: float) -> str:
    if score >= 80:
        return "GREAT"
    elif score >= 65:
        return "GOOD"
    elif score >= 50:
        return "NEEDS WORK"
    return "KEEP PRACTISING"


def get_score_color(score: float) -> str:
    if score >= 80:
        return "green"
    elif score >= 65:
        return "yellow"
    elif score >= 50:
        return "dark_orange"
    return "red"


def get_study_stats(db_path: str) -> dict:
    cards = list_flashcards(db_path)
    attempts = list_quiz_attempts(db_path)
    if attempts:
        avg = sum(a.ratio * 100 for a in attempts) / len(attempts)
    else:
        avg = 0
    return {
        "flashcard_sets": len(list_flashcard_sets(db_path)),
        "flashcards": len(cards),
        "learned_flashcards": sum(1 for c in cards if c.learned),
        "quizzes": len(list_quizzes(db_path)),
        "quiz_attempts": len(attempts),
        "avg_quiz_score": round(avg),
    }
