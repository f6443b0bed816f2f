import pytest

from docs_assistant.docs.scoring import extract_terms, normalize_query, score_section


def test_onboarding_question_scenario() -> None:
    query = "how do I start a project"

    assert extract_terms(query) == ["start", "project"]
    # title "start" x15 + body "project" x1, then the getting-started boost.
    assert score_section(
        query, "Getting Started", "Navigate to Settings to create a project\n"
    ) == pytest.approx(24.0)


def test_exact_title_beats_loose_body_mention() -> None:
    query = "prompt management"

    exact_title = score_section(query, "Prompt Management", "Store prompts.\n")
    body_only = score_section(query, "Datasets", "Datasets can reference a prompt.\n")

    assert exact_title > body_only


def test_terms_match_inside_longer_words() -> None:
    assert score_section("test", "Misc", "testing the tester\n") == pytest.approx(52.0)


def test_stop_word_only_query_falls_back_to_whole_query() -> None:
    assert extract_terms("The a is") == ["the a is"]
    assert score_section("the a is", "Grammar", "what the a is about\n") == pytest.approx(51.0)
    assert score_section("the a is", "Grammar", "nothing relevant\n") == 0.0


def test_spelling_variants_are_normalized() -> None:
    assert normalize_query("Visualise my Organisation") == "visualize my organization"
    assert score_section("organisation", "Members", "Each organization has members.\n") > 0


def test_beginner_boost_applies_after_bonuses() -> None:
    # (15 title hit + 100 title phrase) * 1.5
    assert score_section("start", "Getting Started", "") == pytest.approx(172.5)
    assert score_section("start", "Restart policy", "") == pytest.approx(115.0)


def test_terms_are_literal_not_regex() -> None:
    # c++ x1 + sdk x1 + phrase bonus
    assert score_section("c++ sdk", "Clients", "Use the C++ SDK.\n") == pytest.approx(52.0)


def test_unrelated_section_scores_zero() -> None:
    assert score_section("billing invoices", "Tracing", "Traces and spans.\n") == 0.0
