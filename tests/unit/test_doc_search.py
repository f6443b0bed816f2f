import pytest

from docs_assistant.docs.search import (
    DocumentationSearch,
    FileCorpusSource,
    InMemoryCorpusSource,
)
from docs_assistant.errors import CorpusUnavailable


def test_results_sorted_capped_and_stable_on_ties(run) -> None:
    corpus = "## Alpha\nwidget\n## Beta\nwidget\n## Gamma\nwidget widget\n## Delta\nnothing\n"
    search = DocumentationSearch(InMemoryCorpusSource(corpus))

    results = run(search.search("widget", 5))

    assert [r.section for r in results] == ["Gamma", "Alpha", "Beta"]
    assert [r.relevance for r in results] == [52.0, 51.0, 51.0]
    assert [r.section for r in run(search.search("widget", 2))] == ["Gamma", "Alpha"]


def test_onboarding_section_ranked_first(run, guide_search) -> None:
    results = run(guide_search.search("how do I start a project"))

    assert results
    assert results[0].section == "Getting Started"
    assert all(r.relevance > 0 for r in results)


def test_corpus_without_sections_returns_empty(run) -> None:
    search = DocumentationSearch(InMemoryCorpusSource("no headings at all"))

    assert run(search.search("headings")) == []


def test_stop_word_query_does_not_crash(run, guide_search) -> None:
    first = run(guide_search.search("the a is"))
    second = run(guide_search.search("the a is"))

    assert first == second


def test_blank_query_returns_empty(run, guide_search) -> None:
    assert run(guide_search.search("   ")) == []


def test_zero_limit_returns_empty(run, guide_search) -> None:
    assert run(guide_search.search("traces", 0)) == []


def test_negative_limit_rejected(run, guide_search) -> None:
    with pytest.raises(ValueError):
        run(guide_search.search("traces", -1))


def test_changed_corpus_is_reparsed(run) -> None:
    source = InMemoryCorpusSource("## Old\nlegacy content\n")
    search = DocumentationSearch(source)
    assert [r.section for r in run(search.search("legacy"))] == ["Old"]

    source.text = "## New\nfresh content\n"

    assert run(search.search("legacy")) == []
    assert [r.section for r in run(search.search("fresh"))] == ["New"]


def test_file_corpus_reads_from_disk(run, tmp_path) -> None:
    path = tmp_path / "guide.md"
    path.write_text("## Datasets\nDatasets hold examples.\n", encoding="utf-8")

    results = run(DocumentationSearch(FileCorpusSource(path)).search("datasets"))

    assert results[0].section == "Datasets"


def test_missing_corpus_raises_corpus_unavailable(run, tmp_path) -> None:
    search = DocumentationSearch(FileCorpusSource(tmp_path / "missing.md"))

    with pytest.raises(CorpusUnavailable):
        run(search.search("anything"))


def test_bundled_guide_is_searchable(run) -> None:
    from docs_assistant.config import DEFAULT_DOCS_PATH

    results = run(DocumentationSearch(FileCorpusSource(DEFAULT_DOCS_PATH)).search("create a prompt"))

    assert results
    assert len(results) <= 5


def test_blank_query_skips_corpus_read(run, tmp_path) -> None:
    search = DocumentationSearch(FileCorpusSource(tmp_path / "missing.md"))

    assert run(search.search("")) == []
