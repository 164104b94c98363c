"""Console entry point for VocaLoop."""
import argparse
import logging
import sys
from typing import Callable, List, Optional, TextIO

from vocaloop import __version__
from vocaloop.config import QUIZ_TYPES, settings
from vocaloop.logging_config import setup_logging
from vocaloop.models.base import SessionLocal, init_db
from vocaloop.models.learning_models import LearningStatus, QuizType
from vocaloop.monitoring import start_monitoring
from vocaloop.services.grading import grade_short_answer, multiple_choice_options
from vocaloop.services.learning_rate import STATUS_CONFIG
from vocaloop.services.study_service import StudyService, StudySession
from vocaloop.services.word_service import WordService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vocaloop", description="Vocabulary quizzes with adaptive scoring.")
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="add a word")
    add.add_argument("text")
    add.add_argument("meaning")
    add.add_argument("--folder", help="folder name (created if missing)")

    commands.add_parser("folders", help="list folders with word counts")
    commands.add_parser("stats", help="show learning statistics")

    study = commands.add_parser("study", help="run a study session")
    study.add_argument("--quiz-type", choices=QUIZ_TYPES, default=None)
    study.add_argument("--folder", action="append", default=[], help="limit to folder (repeatable)")
    study.add_argument("--limit", type=int, default=None, help="maximum words in the session")
    return parser


def cmd_add(word_service: WordService, args: argparse.Namespace, out: TextIO) -> int:
    folder_id = None
    if args.folder:
        folder_id = word_service.get_or_create_folder(args.folder).id
    word = word_service.create_word(args.text, args.meaning, folder_id=folder_id)
    print(f"Added {word.text!r} ({word.id})", file=out)
    return 0


def cmd_folders(word_service: WordService, out: TextIO) -> int:
    counts = word_service.folder_word_counts()
    for folder in word_service.list_folders():
        print(f"{folder.name}: {counts.get(folder.id, 0)}", file=out)
    print(f"(unfiled): {counts.get(None, 0)}", file=out)
    return 0


def cmd_stats(word_service: WordService, out: TextIO) -> int:
    stats = word_service.get_statistics()
    print(f"Words: {stats['total_words']}", file=out)
    for status in LearningStatus:
        print(f"  {STATUS_CONFIG[status].label}: {stats[status.value]}", file=out)
    print(f"Reviews: {stats['total_reviews']}", file=out)
    print(f"Average accuracy: {stats['average_accuracy']}%", file=out)
    return 0


def ask_question(
    session: StudySession,
    all_words: list,
    ask: Callable[[str], str],
    out: TextIO,
) -> bool:
    """Ask the current word and return whether the answer was correct."""
    word = session.current_word
    if session.quiz_type == QuizType.MULTIPLE:
        options = multiple_choice_options(word, all_words)
        print(f"\n{word.text}", file=out)
        for number, option in enumerate(options, start=1):
            print(f"  {number}. {option}", file=out)
        reply = ask("Your choice: ").strip()
        try:
            number = int(reply)
        except ValueError:
            number = 0
        # Out-of-range numbers are taken as typed text, never as an index
        chosen = options[number - 1] if 1 <= number <= len(options) else reply
        is_correct = chosen == word.meaning
    else:
        prompt = word.meaning if session.quiz_type == QuizType.TOEFL_COMPLETE else word.text
        print(f"\n{prompt}", file=out)
        expected = word.text if session.quiz_type == QuizType.TOEFL_COMPLETE else word.meaning
        result = grade_short_answer(ask("Your answer: "), expected)
        if not result.is_correct:
            print(f"Similarity: {round(result.similarity * 100)}%", file=out)
        is_correct = result.is_correct

    if is_correct:
        print("Correct!", file=out)
    else:
        print(f"Wrong. {word.text} - {word.meaning}", file=out)
    return is_correct


def cmd_study(
    db,
    args: argparse.Namespace,
    out: TextIO,
    ask: Callable[[str], str] = input,
) -> int:
    study_service = StudyService(db)
    folder_ids = []
    for name in args.folder:
        folder = study_service.word_service.get_folder_by_name(name)
        if not folder:
            print(f"Unknown folder: {name}", file=out)
            return 1
        folder_ids.append(folder.id)

    session = study_service.start_session(quiz_type=args.quiz_type, folder_ids=folder_ids, limit=args.limit)
    if session.is_complete:
        print("No words to study. Add some with 'vocaloop add'.", file=out)
        return 1

    all_words = study_service.word_service.get_words()
    while not session.is_complete:
        is_correct = ask_question(session, all_words, ask, out)
        outcome = session.answer(is_correct)
        print(f"Learning rate: {outcome.rate_before} -> {outcome.rate_after} "
              f"({STATUS_CONFIG[outcome.status].label}), progress {session.progress_percent}%", file=out)
        if outcome.needs_break:
            print(f"{session.state.consecutive_wrong} misses in a row. Consider taking a short break.", file=out)

    summary = session.summary()
    print(f"\nDone: {summary['correct']} correct, {summary['wrong']} wrong "
          f"over {summary['total']} answers.", file=out)
    return 0


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    """Run a console command."""
    out = out or sys.stdout
    args = build_parser().parse_args(argv)
    setup_logging(f"Starting VocaLoop v{__version__} ...", args.log_level)

    if settings.monitoring.metrics_port:
        start_monitoring(settings.monitoring.metrics_port)
        logger.info(f"Metrics exported on port {settings.monitoring.metrics_port}")

    init_db()
    db = SessionLocal()
    try:
        word_service = WordService(db)
        if args.command == "add":
            return cmd_add(word_service, args, out)
        if args.command == "folders":
            return cmd_folders(word_service, out)
        if args.command == "stats":
            return cmd_stats(word_service, out)
        return cmd_study(db, args, out)
    except ValueError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=out)
        return 1
    except (KeyboardInterrupt, EOFError):
        logger.info("Input closed, shutting down...")
        return 130
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
