"""Service for loading the vocabulary corpus."""
import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hanzi_srs.config import settings
from hanzi_srs.exceptions import StorageError
from hanzi_srs.models.models import ExampleSentence, Word
from hanzi_srs.monitoring import db_errors, words_imported

logger = logging.getLogger(__name__)

EXAMPLE_COLUMNS = ("example_sentence_1", "example_sentence_2")


@dataclass
class SeedSummary:
    """Counts reported after an import."""
    processed: int = 0
    skipped: int = 0
    errors: int = 0


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _examples_from_row(row: Dict[str, str]) -> List[ExampleSentence]:
    """Build the example sentences of a row; each needs hanzi and English."""
    examples = []
    for prefix in EXAMPLE_COLUMNS:
        hanzi = _clean(row.get(f"{prefix}_hanzi"))
        english = _clean(row.get(f"{prefix}_eng"))
        if hanzi and english:
            examples.append(ExampleSentence(
                sentence_hanzi=hanzi,
                sentence_pinyin=_clean(row.get(f"{prefix}_pinyin")) or None,
                sentence_translation_en=english,
            ))
    return examples


class SeedService:
    """Service for importing words and example sentences."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def upsert_word(self, row: Dict[str, str]) -> Word:
        """Create or update a word keyed on (hanzi, pinyin), replacing its examples."""
        hanzi = _clean(row.get("hanzi"))
        pinyin = _clean(row.get("pinyin"))
        word = (
            self.db.query(Word)
            .filter(Word.hanzi == hanzi, Word.pinyin == pinyin)
            .first()
        )
        if word is None:
            word = Word(hanzi=hanzi, pinyin=pinyin)
            self.db.add(word)
        word.translation_en = _clean(row.get("translation_eng"))
        word.example_sentences = _examples_from_row(row)
        self.db.commit()
        return word

    def import_csv(self, csv_path: Union[str, Path]) -> SeedSummary:
        """Import the vocabulary CSV, one word per row.

        Rows missing hanzi, pinyin or translation are skipped. A database
        error on one row is logged and counted, and the import continues.
        """
        csv_path = Path(csv_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found at {csv_path}")

        with csv_path.open(encoding="utf-8-sig", newline="") as f:
            rows = list(csv.DictReader(f))
        logger.info(f"Parsed {len(rows)} records from {csv_path}")

        summary = SeedSummary()
        for row in rows:
            if not (_clean(row.get("hanzi")) and _clean(row.get("pinyin"))
                    and _clean(row.get("translation_eng"))):
                logger.warning(f"Skipping row due to missing core data: {row}")
                summary.skipped += 1
                continue

            try:
                self.upsert_word(row)
            except SQLAlchemyError as e:
                self.db.rollback()
                db_errors.labels(operation_type="import_word").inc()
                logger.error(f"Error processing row {row}: {e}")
                summary.errors += 1
                continue

            summary.processed += 1
            words_imported.inc()
            if summary.processed % 100 == 0:
                logger.info(f"Processed {summary.processed} records...")

        logger.info(
            f"Seeding finished: {summary.processed} upserted, "
            f"{summary.skipped} skipped, {summary.errors} errors"
        )
        return summary

    def assign_audio_urls(self, base_url: Optional[str] = None) -> int:
        """Point every word at its audio file, named after the word id."""
        base_url = base_url if base_url is not None else settings.content.audio_base_url
        if not base_url:
            raise ValueError("AUDIO_BASE_URL is required to assign audio URLs")
        extension = settings.content.audio_file_extension

        try:
            words = self.db.query(Word).order_by(Word.id).all()
            for word in words:
                word.audio_url = f"{base_url}{word.id}{extension}"
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            db_errors.labels(operation_type="assign_audio_urls").inc()
            logger.error(f"Failed to assign audio URLs: {e}")
            raise StorageError("assign_audio_urls", str(e)) from e

        logger.info(f"Assigned audio URLs to {len(words)} words")
        return len(words)
