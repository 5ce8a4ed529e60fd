import pytest

from derdiedas.errors import CatalogError
from derdiedas.models import Article
from derdiedas.vocabulary import load_catalog


def test_loads_json_catalog_in_order(catalog_path):
    words = load_catalog(catalog_path)

    assert [w.term for w in words] == ["Haus", "Tisch"]
    assert words[0].article == Article.DAS
    assert words[0].translation == "house"
    assert words[0].plural == "Häuser"
    assert words[1].translation is None


def test_accepts_term_and_translation_keys(write_catalog):
    path = write_catalog([{"term": "Lampe", "article": "DIE", "translation": "lamp"}])

    (word,) = load_catalog(path)

    assert word.term == "Lampe"
    assert word.article == Article.DIE
    assert word.translation == "lamp"


def test_falls_back_to_data_dir(tmp_path, write_catalog):
    data_dir = tmp_path / "fallback"
    data_dir.mkdir()
    source = write_catalog([{"word": "Baum", "article": "der"}])
    (data_dir / "words.json").write_text(source.read_text(encoding="utf-8"), encoding="utf-8")

    words = load_catalog(tmp_path / "elsewhere" / "words.json", fallback_dir=data_dir)

    assert [w.term for w in words] == ["Baum"]


def test_missing_file_raises(tmp_path):
    with pytest.raises(CatalogError, match="could not open"):
        load_catalog(tmp_path / "nope.json", fallback_dir=tmp_path / "also-nope")


def test_malformed_json_raises(tmp_path):
    path = tmp_path / "words.json"
    path.write_text("{ this is not json", encoding="utf-8")

    with pytest.raises(CatalogError, match="could not decode JSON"):
        load_catalog(path)


def test_empty_word_list_raises(write_catalog):
    with pytest.raises(CatalogError, match="no words found"):
        load_catalog(write_catalog([]))


def test_unknown_article_raises(write_catalog):
    with pytest.raises(CatalogError, match="invalid word list"):
        load_catalog(write_catalog([{"word": "Haus", "article": "dem"}]))


def test_loads_csv_catalog(tmp_path):
    path = tmp_path / "words.csv"
    path.write_text(
        "word,article,english,category,difficulty,plural\n"
        "Hund,der,dog,animals,easy,Hunde\n"
        "Milch,die,milk,food,,\n",
        encoding="utf-8",
    )

    words = load_catalog(path)

    assert [(w.term, w.article) for w in words] == [("Hund", Article.DER), ("Milch", Article.DIE)]
    assert words[0].difficulty == "easy"
    assert words[1].difficulty is None
    assert words[1].plural is None


def test_csv_without_article_column_raises(tmp_path):
    path = tmp_path / "words.csv"
    path.write_text("word,translation\nHund,dog\n", encoding="utf-8")

    with pytest.raises(CatalogError, match="missing the word/article columns"):
        load_catalog(path)


def test_empty_csv_raises(tmp_path):
    path = tmp_path / "words.csv"
    path.write_text("", encoding="utf-8")

    with pytest.raises(CatalogError, match="no words found"):
        load_catalog(path)
