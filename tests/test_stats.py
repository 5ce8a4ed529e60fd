import json

import pytest

from derdiedas.errors import StatisticsSaveError
from derdiedas.models import SessionResult, StatisticsRecord, WordEntry
from derdiedas.stats import StatisticsStore, compute_accuracy, top_missed


def test_missing_file_gives_defaults(stats_path):
    store = StatisticsStore(stats_path)

    record = store.load()

    assert record == StatisticsRecord()
    assert store.last_load_error is None


def test_round_trip(stats_path):
    store = StatisticsStore(stats_path)
    record = StatisticsRecord(
        total_quizzes=3,
        total_questions=25,
        correct_answers=19,
        mistake_counts={"Haus": 2, "Tür": 4},
    )

    store.save(record)
    loaded = store.load()

    assert loaded.total_quizzes == 3
    assert loaded.total_questions == 25
    assert loaded.correct_answers == 19
    assert loaded.mistake_counts == {"Haus": 2, "Tür": 4}


def test_saved_file_is_indented_json(stats_path):
    StatisticsStore(stats_path).save(StatisticsRecord(mistake_counts={"Haus": 1}))

    text = stats_path.read_text(encoding="utf-8")

    assert "\n  " in text
    assert json.loads(text)["mistake_counts"] == {"Haus": 1}


@pytest.mark.parametrize(
    "content",
    [
        "{ not json",
        "[1, 2, 3]",
        '{"total_questions": -1}',
        '{"total_questions": 1, "correct_answers": 5}',
        '{"mistake_counts": {"Haus": "many"}}',
    ],
)
def test_corrupt_file_gives_defaults(stats_path, content):
    stats_path.parent.mkdir(parents=True)
    stats_path.write_text(content, encoding="utf-8")
    store = StatisticsStore(stats_path)

    record = store.load()

    assert record == StatisticsRecord()
    assert store.last_load_error is not None


def test_reads_legacy_word_stats_key(stats_path):
    stats_path.parent.mkdir(parents=True)
    stats_path.write_text(
        json.dumps(
            {
                "total_quizzes": 1,
                "total_questions": 10,
                "correct_answers": 8,
                "word_stats": {"Haus": 2},
            }
        ),
        encoding="utf-8",
    )

    record = StatisticsStore(stats_path).load()

    assert record.mistake_counts == {"Haus": 2}


def test_save_failure_raises_save_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    store = StatisticsStore(blocker / "stats.json")

    with pytest.raises(StatisticsSaveError):
        store.save(StatisticsRecord())


def test_accuracy_without_data_is_none():
    assert compute_accuracy(StatisticsRecord()) is None


def test_accuracy_percentage():
    record = StatisticsRecord(total_questions=4, correct_answers=3)

    assert compute_accuracy(record) == pytest.approx(75.0)


def test_fold_session_keeps_correct_within_total():
    record = StatisticsRecord()
    record.fold_session(SessionResult(planned=10, correct_count=1, total_answered=2))
    record.fold_session(SessionResult(planned=10, correct_count=0, total_answered=0))
    record.fold_session(SessionResult(planned=5, correct_count=5, total_answered=5))

    assert record.total_quizzes == 2
    assert record.total_questions == 7
    assert record.correct_answers == 6
    assert record.correct_answers <= record.total_questions


def test_top_missed_sorts_and_skips_unknown_terms():
    catalog = [
        WordEntry(term="A", article="der"),
        WordEntry(term="B", article="die"),
        WordEntry(term="C", article="das"),
        WordEntry(term="D", article="der"),
    ]
    record = StatisticsRecord(mistake_counts={"A": 1, "B": 5, "Ghost": 10, "C": 3, "D": 0})

    missed = top_missed(record, catalog, n=5)

    assert [(w.term, count) for w, count in missed] == [("B", 5), ("C", 3), ("A", 1)]


def test_top_missed_limits_to_n():
    catalog = [WordEntry(term=t, article="das") for t in "ABCDEFG"]
    record = StatisticsRecord(mistake_counts={t: i + 1 for i, t in enumerate("ABCDEFG")})

    missed = top_missed(record, catalog, n=5)

    assert [w.term for w, _ in missed] == ["G", "F", "E", "D", "C"]
