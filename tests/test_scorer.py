from __future__ import annotations

import pytest

from conftest import NOW, days_ago, make_posting, only_weight
from pathfinder.models import Preferences
from pathfinder.scorer import (
    UNKNOWN_AGE_DAYS,
    apply_hard_filters,
    days_since,
    rank_postings,
    score_and_rank,
    score_breakdown,
    score_posting,
)


def _score(posting, prefs):
    return score_posting(posting, prefs, now=NOW)


# ── Scoring factors ──────────────────────────────────────────────────────


def test_keyword_hits_count_each_keyword_once():
    prefs = only_weight("keywordMatch", 1.5, keywords=["Leadership", "culture", "statistics"])
    posting = make_posting(title="Leadership role", description="Culture focus; culture first")
    assert _score(posting, prefs) == pytest.approx(3.0)


def test_blocked_keywords_use_negative_weight():
    prefs = only_weight("negativeKeyword", -2.2, blocked_keywords=["corruption prevention"])
    posting = make_posting(description="Lead our Corruption Prevention unit")
    assert _score(posting, prefs) == pytest.approx(-2.2)


def test_missing_description_does_not_fail():
    prefs = only_weight("keywordMatch", keywords=["analyst"])
    assert _score(make_posting(description=None), prefs) == pytest.approx(1.0)


def test_location_match_is_binary_substring():
    prefs = only_weight("locationMatch", 0.9, preferred_locations=["sydney", "NSW"])
    assert _score(make_posting(location="Sydney NSW (Hybrid)"), prefs) == pytest.approx(0.9)
    assert _score(make_posting(location="Perth"), prefs) == 0


@pytest.mark.parametrize(
    "salary_min, salary_max, expected",
    [
        (None, 150000, 1.2),
        (150000, None, 1.2),
        (150000, 120000, 0.0),
        (None, None, 0.0),
    ],
)
def test_salary_uses_upper_then_lower_bound(salary_min, salary_max, expected):
    prefs = only_weight("salary", 1.2, min_salary=140000)
    posting = make_posting(salary_min=salary_min, salary_max=salary_max)
    assert _score(posting, prefs) == pytest.approx(expected)


def test_salary_without_minimum_always_fires():
    prefs = only_weight("salary", 1.2, min_salary=None)
    assert _score(make_posting(), prefs) == pytest.approx(1.2)


def test_work_type_and_seniority_are_membership_checks():
    prefs = Preferences(
        work_types=["Full-time"],
        seniority=["Senior"],
        weights={**only_weight("workType", 0.6).weights, "seniority": 0.8},
    )
    assert _score(make_posting(work_type="Full-time", seniority="Senior"), prefs) == pytest.approx(1.4)
    assert _score(make_posting(work_type="Casual", seniority="Entry"), prefs) == 0
    assert _score(make_posting(), prefs) == 0


def test_industry_matches_tags_by_substring():
    prefs = only_weight("industry", 0.7, industries=["Public Sector"])
    assert _score(make_posting(tags=["nsw public sector"]), prefs) == pytest.approx(0.7)
    assert _score(make_posting(tags=["private"]), prefs) == 0


def test_remote_or_hybrid():
    prefs = only_weight("remote", 0.5)
    assert _score(make_posting(remote=True), prefs) == pytest.approx(0.5)
    assert _score(make_posting(hybrid=True), prefs) == pytest.approx(0.5)
    assert _score(make_posting(), prefs) == 0


# ── Recency ──────────────────────────────────────────────────────────────


def test_recency_full_weight_today():
    prefs = only_weight("recency", 0.6)
    posting = make_posting(posted_at=NOW.isoformat())
    assert score_breakdown(posting, prefs, now=NOW)["recency"] == pytest.approx(0.6)


def test_recency_decays_linearly():
    prefs = only_weight("recency", 0.6)
    posting = make_posting(posted_at=days_ago(7))
    assert _score(posting, prefs) == pytest.approx(0.6 * 14 / 21)


@pytest.mark.parametrize("posted_at", [days_ago(21), days_ago(40), None, "not a date"])
def test_recency_zero_when_old_or_unknown(posted_at):
    prefs = only_weight("recency", 0.6)
    posting = make_posting(posted_at=posted_at)
    assert "recency" not in score_breakdown(posting, prefs, now=NOW)
    assert _score(posting, prefs) == 0


def test_days_since_handles_zulu_and_naive_dates():
    assert days_since("2026-10-16T12:00:00Z", now=NOW) == 3
    assert days_since("2026-10-12", now=NOW) == 7
    assert days_since(None, now=NOW) == UNKNOWN_AGE_DAYS


def test_future_dates_count_as_today():
    assert days_since("2026-10-25T00:00:00+00:00", now=NOW) == 0


def test_scoring_is_deterministic(default_prefs):
    posting = make_posting(
        title="Senior People Analytics Consultant",
        description="Leadership and culture programs, statistics",
        location="Sydney (Hybrid)",
        posted_at=days_ago(3),
        salary_max=210000,
        work_type="Full-time",
        seniority="Senior",
        hybrid=True,
        tags=["consulting"],
    )
    first = _score(posting, default_prefs)
    assert all(_score(posting, default_prefs) == first for _ in range(5))


def test_breakdown_sums_to_score(default_prefs):
    posting = make_posting(title="OD culture lead", location="Sydney", posted_at=days_ago(2), remote=True)
    parts = score_breakdown(posting, default_prefs, now=NOW)
    assert sum(parts.values()) == pytest.approx(_score(posting, default_prefs))
    assert all(value != 0 for value in parts.values())


# ── Ranking ──────────────────────────────────────────────────────────────


def test_rank_orders_by_descending_score():
    prefs = only_weight("keywordMatch", keywords=["data", "research", "policy"])
    postings = [
        make_posting("a", title="Data"),
        make_posting("b", title="Data research policy"),
        make_posting("c", title="Nothing relevant"),
        make_posting("d", title="Research policy"),
    ]
    ranked = score_and_rank(postings, prefs, now=NOW)
    assert [s.posting.id for s in ranked] == ["b", "d", "a", "c"]
    scores = [s.score for s in ranked]
    assert all(a >= b for a, b in zip(scores, scores[1:]))


def test_rank_is_stable_for_equal_scores():
    prefs = only_weight("remote", 0.5)
    postings = [
        make_posting("x"),
        make_posting("y", remote=True),
        make_posting("z"),
        make_posting("w", hybrid=True),
    ]
    assert [p.id for p in rank_postings(postings, prefs, now=NOW)] == ["y", "w", "x", "z"]


def test_rank_fills_missing_tags_without_touching_input():
    posting = make_posting(title="University research fellow")
    ranked = rank_postings([posting], Preferences(), now=NOW)
    assert ranked[0].tags == ["research", "university"]
    assert posting.tags == []


def test_rank_uses_extracted_tags_for_industry():
    prefs = only_weight("industry", 0.7, industries=["health"])
    ranked = score_and_rank([make_posting(title="Clinical health researcher")], prefs, now=NOW)
    assert ranked[0].score == pytest.approx(0.7)
    assert ranked[0].match_reasons == ["industry +0.70"]


# ── Hard filters ─────────────────────────────────────────────────────────


def test_excluded_locations_are_dropped():
    prefs = Preferences(excluded_locations=["melbourne"])
    postings = [make_posting("1", location="Melbourne VIC"), make_posting("2", location="Sydney")]
    assert [p.id for p in apply_hard_filters(postings, prefs)] == ["2"]


def test_remote_only_keeps_remote_postings():
    prefs = Preferences(remote_only=True)
    postings = [
        make_posting("1", remote=True),
        make_posting("2", location="Remote - AU"),
        make_posting("3", hybrid=True),
        make_posting("4"),
    ]
    assert [p.id for p in apply_hard_filters(postings, prefs)] == ["1", "2"]


def test_default_filters_keep_everything(default_prefs):
    postings = [make_posting(str(i)) for i in range(3)]
    assert apply_hard_filters(postings, default_prefs) == postings
