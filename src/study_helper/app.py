"""Interactive CLI application."""
import json
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt, IntPrompt

from study_helper.config import Config
from study_helper.db import init_db, get_setting, set_setting
from study_helper.seed import seed_demo
from study_helper.notes import list_notes
from study_helper.importer import import_note_file
from study_helper.flashcards import list_flashcard_sets, get_flashcards_by_set
from study_helper.quiz import list_quizzes, get_best_attempt, get_quiz_attempts
from study_helper.generation import get_generator, generate_study_materials, GENERATOR_KINDS
from study_helper.models import GenerationRequest, GENERATION_MODES
from study_helper.remote import RemoteGenerationError
from study_helper.sessions import (
    FlashcardSession, QuizSession, FlashcardSelfTest, build_self_test, FILTERS,
)
from study_helper.dashboard import get_study_stats, get_score_label, get_score_color
from study_helper.transfer import (
    export_all, export_flashcard_set, export_quiz, import_all, ImportFormatError,
)

console = Console()
logger = logging.getLogger(__name__)

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """The user asked to leave the current session."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str]) -> int:
    answer = Prompt.ask(prompt, choices=choices + list(EXIT_WORDS), show_choices=False)
    if answer in EXIT_WORDS:
        raise SessionExitRequested()
    return int(answer)


def show_welcome():
    console.print(Panel(
        "[bold]Study Helper[/bold]\n[dim]Flashcards and quizzes from your notes[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("notes", "List notes"),
        ("import", "Import a note from a file"),
        ("generate", "Generate flashcards / quiz from notes"),
        ("sets", "List flashcard sets"),
        ("study", "Review a flashcard set"),
        ("test", "Multiple choice self-test on a set"),
        ("quizzes", "List quizzes"),
        ("take", "Take a quiz"),
        ("stats", "Study statistics"),
        ("export", "Export study materials"),
        ("load", "Import exported study materials"),
        ("demo", "Load demo content"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def choose(items: list, label) -> object | None:
    """Let the user pick one item by number."""
    if not items:
        return None
    for i, item in enumerate(items, 1):
        console.print(f"  [cyan]{i}[/cyan]) {label(item)}")
    index = IntPrompt.ask("Select", choices=[str(i) for i in range(1, len(items) + 1)])
    return items[index - 1]


def ask_count(prompt: str, default: int) -> int:
    while True:
        value = IntPrompt.ask(prompt, default=default)
        if value >= 0:
            return value
        console.print("[red]Please enter 0 or more.[/red]")


def run_flashcard_session(db_path: str, cards: list) -> None:
    session = FlashcardSession(db_path, cards)
    if not cards:
        console.print("[yellow]No cards in this set yet.[/yellow]")
        return
    console.print("[dim]n=next  p=previous  f=flip  l=toggle learned  s=shuffle  "
                  "all/learned/unlearned=filter  q=quit[/dim]")
    while True:
        card = session.current
        if card is None:
            console.print(f"[yellow]No {session.filter} cards. Try another filter.[/yellow]")
        else:
            side = card.answer if session.flipped else card.question
            status = "[green]learned[/green]" if card.learned else ""
            console.print(Panel(
                side,
                title=f"Card {session.index + 1}/{len(session.deck)} {status}",
                subtitle=f"{session.learned_count}/{len(session.cards)} learned",
                border_style="green" if session.flipped else "cyan",
            ))
        action = session_prompt("Action", default="f").strip().lower()
        if action == "n":
            session.next()
        elif action == "p":
            session.previous()
        elif action == "f":
            session.flip()
        elif action == "l":
            session.toggle_learned()
        elif action == "s":
            session.shuffle()
            console.print("[dim]Cards shuffled[/dim]")
        elif action in FILTERS:
            session.set_filter(action)
        else:
            console.print("[red]Unknown action.[/red]")


def run_self_test(cards: list) -> None:
    questions = build_self_test(cards)
    if not questions:
        console.print("[yellow]You need at least 4 cards with different answers for test mode.[/yellow]")
        return
    test = FlashcardSelfTest(questions)
    while not test.finished:
        question = test.current
        console.print(Panel(question.card.question, title=f"Question {test.index + 1}/{len(questions)}"))
        for i, option in enumerate(question.options, 1):
            console.print(f"  [cyan]{i})[/cyan] {option}")
        choice = session_int_prompt("Your answer", [str(i) for i in range(1, len(question.options) + 1)])
        if test.pick(question.options[choice - 1]):
            console.print("[green]Correct![/green]")
        else:
            console.print(f"[red]Incorrect.[/red] Answer: [green]{question.card.answer}[/green]")
    color = get_score_color(test.percentage)
    console.print(f"[bold]Score: {test.score}/{len(questions)} "
                  f"([{color}]{test.percentage}%[/{color}])[/bold]\n")


def run_quiz_session(db_path: str, quiz) -> None:
    session = QuizSession(db_path, quiz)
    while True:
        console.print(f"\n[bold]{quiz.title}[/bold] ({len(quiz.questions)} questions)\n")
        for i, question in enumerate(quiz.questions):
            session.go_to(i)
            console.print(f"[bold]Q{i + 1}.[/bold] {question.prompt}")
            if question.options:
                for j, option in enumerate(question.options, 1):
                    console.print(f"  [cyan]{j})[/cyan] {option}")
                choice = session_int_prompt(
                    "Your answer", [str(j) for j in range(1, len(question.options) + 1)],
                )
                session.answer(question.options[choice - 1])
            else:
                session.answer(session_prompt("Your answer"))
            console.print()

        attempt = session.submit()
        for result, question in zip(attempt.answers, quiz.questions):
            if result.correct:
                console.print(f"[green]✓[/green] {question.prompt}")
            else:
                console.print(f"[red]✗[/red] {question.prompt}\n"
                              f"    You: {result.answer or '-'}  Correct: [green]{question.correct_answer}[/green]")
            if question.explanation:
                console.print(f"    [dim]{question.explanation}[/dim]")
        color = get_score_color(attempt.percentage)
        console.print(f"\n[bold]Score: {attempt.score}/{attempt.total_questions} "
                      f"([{color}]{attempt.percentage}%[/{color}])[/bold]\n")
        if Prompt.ask("Retry?", choices=["y", "n"], default="n") != "y":
            return
        session = session.retry()


def cmd_notes(db_path: str):
    notes = list_notes(db_path)
    if not notes:
        console.print("[yellow]No notes yet. Use 'import' or 'demo'.[/yellow]")
        return
    table = Table(title="Notes")
    table.add_column("#", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Subject")
    for i, note in enumerate(notes, 1):
        table.add_row(str(i), note.title, note.subject_id)
    console.print(table)


def cmd_import(db_path: str):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    subject = Prompt.ask("Subject", default="")
    note = import_note_file(db_path, file_path, subject_id=subject)
    console.print(f"[green]Imported {note.title} ({len(note.content)} chars)[/green]")


def cmd_generate(db_path: str, config: Config):
    notes = list_notes(db_path)
    if not notes:
        console.print("[yellow]Add some notes first.[/yellow]")
        return
    cmd_notes(db_path)
    picked = Prompt.ask("Notes to use (comma separated numbers, or 'all')", default="all")
    if picked.strip().lower() == "all":
        selected = notes
    else:
        indexes = {int(p) for p in picked.split(",") if p.strip().isdigit()}
        selected = [n for i, n in enumerate(notes, 1) if i in indexes]
    if not selected:
        console.print("[yellow]No notes selected. Please select at least one note.[/yellow]")
        return

    mode = Prompt.ask("Generate", choices=list(GENERATION_MODES), default="both")
    kind = Prompt.ask(
        "Generator", choices=list(GENERATOR_KINDS), default=get_setting(db_path, "generator", "basic"),
    )
    generator = get_generator(kind, config)
    if not generator.is_available():
        console.print("[yellow]AI generation is not available, using the basic generator.[/yellow]")
        generator = get_generator("basic")
    set_setting(db_path, "generator", generator.kind)

    request = GenerationRequest(
        notes=selected,
        subject_id=selected[0].subject_id,
        title=Prompt.ask("Title", default=""),
        mode=mode,
        max_flashcards=ask_count("Max flashcards", default=10),
        max_quiz_questions=ask_count("Max quiz questions", default=5),
    )
    try:
        saved = generate_study_materials(db_path, generator, request)
    except RemoteGenerationError as e:
        logger.error("Generation failed: %s", e)
        console.print("[red]Generation failed, try again.[/red]")
        return

    for warning in saved.warnings:
        console.print(f"[yellow]{warning}[/yellow]")
    if saved.flashcard_set:
        console.print(f"[green]Created set '{saved.flashcard_set.title}' "
                      f"with {len(saved.flashcards)} cards[/green]")
    if saved.quiz:
        console.print(f"[green]Created quiz '{saved.quiz.title}' "
                      f"with {len(saved.quiz.questions)} questions[/green]")
    if not saved.flashcard_set and not saved.quiz:
        console.print("[yellow]Nothing was created. Add more notes or richer formatting.[/yellow]")


def cmd_sets(db_path: str):
    sets = list_flashcard_sets(db_path)
    if not sets:
        console.print("[yellow]No flashcard sets yet. Use 'generate'.[/yellow]")
        return
    table = Table(title="Flashcard Sets")
    table.add_column("Title", style="cyan")
    table.add_column("Cards", justify="right")
    table.add_column("Learned", justify="right")
    table.add_column("Source")
    for s in sets:
        cards = get_flashcards_by_set(db_path, s.id)
        table.add_row(s.title, str(len(cards)), str(sum(1 for c in cards if c.learned)), s.source)
    console.print(table)


def _pick_set(db_path: str):
    sets = list_flashcard_sets(db_path)
    if not sets:
        console.print("[yellow]No flashcard sets yet. Use 'generate'.[/yellow]")
        return None
    return choose(sets, lambda s: s.title)


def cmd_study(db_path: str):
    flashcard_set = _pick_set(db_path)
    if flashcard_set:
        run_flashcard_session(db_path, get_flashcards_by_set(db_path, flashcard_set.id))


def cmd_test(db_path: str):
    flashcard_set = _pick_set(db_path)
    if flashcard_set:
        run_self_test(get_flashcards_by_set(db_path, flashcard_set.id))


def cmd_quizzes(db_path: str):
    quizzes = list_quizzes(db_path)
    if not quizzes:
        console.print("[yellow]No quizzes yet. Use 'generate'.[/yellow]")
        return
    table = Table(title="Quizzes")
    table.add_column("Title", style="cyan")
    table.add_column("Questions", justify="right")
    table.add_column("Attempts", justify="right")
    table.add_column("Best", justify="right")
    for q in quizzes:
        best = get_best_attempt(db_path, q.id)
        best_text = f"{best.percentage}%" if best else "-"
        table.add_row(q.title, str(len(q.questions)), str(len(get_quiz_attempts(db_path, q.id))), best_text)
    console.print(table)


def cmd_take(db_path: str):
    quizzes = [q for q in list_quizzes(db_path) if q.questions]
    if not quizzes:
        console.print("[yellow]No quizzes with questions yet. Use 'generate'.[/yellow]")
        return
    quiz = choose(quizzes, lambda q: f"{q.title} ({len(q.questions)} questions)")
    run_quiz_session(db_path, quiz)


def cmd_stats(db_path: str):
    stats = get_study_stats(db_path)
    score = stats["avg_quiz_score"]
    color = get_score_color(score)
    console.print(Panel(
        f"Flashcard sets: [bold]{stats['flashcard_sets']}[/bold]  |  "
        f"Cards learned: [bold]{stats['learned_flashcards']}/{stats['flashcards']}[/bold]\n"
        f"Quizzes: [bold]{stats['quizzes']}[/bold]  |  Attempts: [bold]{stats['quiz_attempts']}[/bold]  |  "
        f"Avg score: [{color}]{score}% {get_score_label(score)}[/{color}]",
        title="Study Statistics", border_style="blue",
    ))


def cmd_export(db_path: str):
    what = Prompt.ask("Export", choices=["all", "set", "quiz"], default="all")
    if what == "set":
        chosen = choose(list_flashcard_sets(db_path), lambda s: s.title)
        data = export_flashcard_set(db_path, chosen.id) if chosen else None
        default = "flashcard-set.json"
    elif what == "quiz":
        chosen = choose(list_quizzes(db_path), lambda q: q.title)
        data = export_quiz(db_path, chosen.id) if chosen else None
        default = "quiz.json"
    else:
        data = export_all(db_path)
        default = "study-materials.json"
    if data is None:
        console.print("[yellow]Nothing to export.[/yellow]")
        return
    target = Prompt.ask("Export to", default=default)
    Path(target).write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    console.print(f"[green]Exported to {target}[/green]")


def cmd_load(db_path: str):
    source = Prompt.ask("File path")
    if not Path(source).exists():
        console.print(f"[red]File not found: {source}[/red]")
        return
    try:
        counts = import_all(db_path, json.loads(Path(source).read_text(encoding="utf-8")))
    except (ImportFormatError, ValueError) as e:
        console.print(f"[red]Import failed: {e}[/red]")
        return
    console.print(f"[green]Imported {counts['flashcard_sets']} sets, {counts['flashcards']} cards, "
                  f"{counts['quizzes']} quizzes[/green]")


def cmd_demo(db_path: str):
    created = seed_demo(db_path)
    if not any(created.values()):
        console.print("[dim]Demo content is already loaded.[/dim]")
        return
    console.print(f"[green]Loaded {created['notes']} notes, {created['flashcard_sets']} sets "
                  f"and {created['quizzes']} quiz[/green]")


def main():
    config = Config.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    db_path = config.db_path
    init_db(db_path)

    show_welcome()

    commands = {
        "notes": cmd_notes,
        "import": cmd_import,
        "sets": cmd_sets,
        "study": cmd_study,
        "test": cmd_test,
        "quizzes": cmd_quizzes,
        "take": cmd_take,
        "stats": cmd_stats,
        "export": cmd_export,
        "load": cmd_load,
        "demo": cmd_demo,
    }
    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="sets").strip().lower()
        try:
            if choice == "generate":
                cmd_generate(db_path, config)
            elif choice in commands:
                commands[choice](db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Happy studying![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("[dim]Back to the menu.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command %s failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
