"""Tests for corpus import."""
import csv
from pathlib import Path

import pytest

from hanzi_srs.models.models import ExampleSentence, Word
from hanzi_srs.services.seed_service import SeedService, SeedSummary

HEADER = [
    "hanzi", "pinyin", "translation_eng",
    "example_sentence_1_hanzi", "example_sentence_1_pinyin", "example_sentence_1_eng",
    "example_sentence_2_hanzi", "example_sentence_2_pinyin", "example_sentence_2_eng",
]


def write_csv(path: Path, rows) -> Path:
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        writer.writerows(rows)
    return path


@pytest.fixture
def seed_service(db) -> SeedService:
    return SeedService(db)


def test_import_csv(seed_service, db, tmp_path):
    path = write_csv(tmp_path / "data.csv", [
        ["我", "wǒ", "I; me", "我是学生。", "wǒ shì xuéshēng.", "I am a student.", "", "", ""],
        ["你", "nǐ", "you", "你好！", "nǐ hǎo!", "Hello!", "你是谁？", "nǐ shì shéi?", "Who are you?"],
    ])

    summary = seed_service.import_csv(path)

    assert summary == SeedSummary(processed=2, skipped=0, errors=0)
    words = db.query(Word).order_by(Word.id).all()
    assert [w.hanzi for w in words] == ["我", "你"]
    assert [w.id for w in words] == [1, 2]
    assert len(words[0].example_sentences) == 1
    assert words[1].example_sentences[1].sentence_translation_en == "Who are you?"


def test_rows_missing_core_data_are_skipped(seed_service, db, tmp_path):
    path = write_csv(tmp_path / "data.csv", [
        ["", "wǒ", "I; me", "", "", "", "", "", ""],
        ["你", "nǐ", "", "", "", "", "", "", ""],
        ["他", "tā", "he", "", "", "", "", "", ""],
    ])

    summary = seed_service.import_csv(path)

    assert summary.processed == 1
    assert summary.skipped == 2
    assert db.query(Word).count() == 1


def test_example_needs_hanzi_and_translation(seed_service, db, tmp_path):
    path = write_csv(tmp_path / "data.csv", [
        ["好", "hǎo", "good", "很好。", "hěn hǎo.", "", "", "", "Good."],
    ])
    seed_service.import_csv(path)
    assert db.query(ExampleSentence).count() == 0


def test_reimport_updates_word_and_replaces_examples(seed_service, db, tmp_path):
    first = write_csv(tmp_path / "first.csv", [
        ["我", "wǒ", "I", "我是学生。", "", "I am a student.", "我很好。", "", "I am fine."],
    ])
    second = write_csv(tmp_path / "second.csv", [
        ["我", "wǒ", "I; me", "我爱你。", "", "I love you.", "", "", ""],
    ])

    seed_service.import_csv(first)
    seed_service.import_csv(second)

    word = db.query(Word).one()
    assert word.translation_en == "I; me"
    assert [e.sentence_hanzi for e in word.example_sentences] == ["我爱你。"]
    assert db.query(ExampleSentence).count() == 1


def test_missing_file_raises(seed_service, tmp_path):
    with pytest.raises(FileNotFoundError):
        seed_service.import_csv(tmp_path / "missing.csv")


def test_assign_audio_urls(seed_service, db, make_word):
    make_word(1)
    make_word(2)

    count = seed_service.assign_audio_urls("https://cdn.example.com/audio/")

    assert count == 2
    assert db.get(Word, 2).audio_url == "https://cdn.example.com/audio/2.mp3"


def test_assign_audio_urls_requires_base_url(seed_service):
    with pytest.raises(ValueError):
        seed_service.assign_audio_urls("")
