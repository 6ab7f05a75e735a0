"""Command line entry point."""
import argparse
import logging
import sys
from typing import List, Optional

from hanzi_srs.config import settings
from hanzi_srs.exceptions import HanziSrsError
from hanzi_srs.logging_config import setup_logging
from hanzi_srs.models.base import SessionLocal, init_db
from hanzi_srs.models.models import Word
from hanzi_srs.monitoring import start_monitoring
from hanzi_srs.services.review_service import ReviewService
from hanzi_srs.services.seed_service import SeedService
from hanzi_srs.services.selector import SelectorService
from hanzi_srs.services.settings_service import SettingsService
from hanzi_srs.services.storage import StorageService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hanzi_srs", description="Chinese vocabulary flashcards")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="create database tables")

    seed = commands.add_parser("seed", help="import the vocabulary CSV")
    seed.add_argument("csv_path")

    audio = commands.add_parser("audio-urls", help="assign audio URLs to all words")
    audio.add_argument("--base-url", default=None)

    next_word = commands.add_parser("next", help="show the next word to study")
    next_word.add_argument("--user", default=None, help="user id; omit for a random word")

    review = commands.add_parser("review", help="rate recall of a word")
    review.add_argument("--user", required=True)
    review.add_argument("--word", type=int, required=True)
    review.add_argument("--quality", type=int, required=True, help="0=Again 1=Hard 2=Good 3=Easy")

    study_range = commands.add_parser("set-range", help="set the study range of a user")
    study_range.add_argument("--user", required=True)
    study_range.add_argument("--start", type=int, default=None)
    study_range.add_argument("--end", type=int, default=None)

    return parser


def format_word(word: Word) -> str:
    lines = [f"#{word.id} {word.hanzi} [{word.pinyin}] {word.translation_en}"]
    for example in word.example_sentences:
        line = f"  - {example.sentence_hanzi}"
        if example.sentence_translation_en:
            line += f" ({example.sentence_translation_en})"
        lines.append(line)
    return "\n".join(lines)


def run(args: argparse.Namespace) -> int:
    """Run a parsed command and return the exit code."""
    init_db()
    if args.command == "init-db":
        logger.info("Database initialized")
        return 0

    db = SessionLocal()
    try:
        storage = StorageService(db)
        if args.command == "seed":
            summary = SeedService(db).import_csv(args.csv_path)
            return 1 if summary.errors else 0

        if args.command == "audio-urls":
            SeedService(db).assign_audio_urls(args.base_url)
            return 0

        if args.command == "next":
            word = SelectorService(storage).next_word_for_user(args.user)
            print(format_word(word) if word else "All caught up! Check back later for new reviews.")
            return 0

        if args.command == "review":
            progress = ReviewService(storage).submit_review(
                args.user, {"wordId": args.word, "quality": args.quality}
            )
            print(f"Level {progress.level}, next review {progress.next_review_date.isoformat()}")
            return 0

        if args.command == "set-range":
            payload = {"studyRangeStart": args.start, "studyRangeEnd": args.end}
            study_range = SettingsService(storage).update_study_range(args.user, payload)
            print(f"Study range: {study_range.start}-{study_range.end}")
            return 0
    finally:
        db.close()

    return 2


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("Starting hanzi_srs ...")

    if settings.monitoring.enabled:
        start_monitoring(settings.monitoring.port)
        logger.info(f"Metrics exposed on port {settings.monitoring.port}")

    try:
        return run(args)
    except (HanziSrsError, FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
