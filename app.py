"""Streamlit UI for the Pathfinder job dashboard."""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from pathfinder.config import (
    DATA_DIR,
    DEFAULT_LOCATION,
    DEFAULT_QUERY,
    LOG_DIR,
    LOG_LEVEL,
    ensure_dirs,
)
from pathfinder.cards import VERDICTS, card_html, verdict_liked
from pathfinder.dashboard import Dashboard
from pathfinder.digest import build_digest, write_digest
from pathfinder.log import get_logger, setup_logging
from pathfinder.models import WEIGHT_KEYS, Posting, ScoredPosting
from pathfinder.store import JsonStore

log = get_logger("pathfinder.app")

# ── Constants ────────────────────────────────────────────────────────────

WORK_TYPES: list[str] = ["Full-time", "Part-time", "Contract", "Casual", "Fixed-term"]
SENIORITY: list[str] = ["Entry", "Mid", "Senior", "Lead", "Manager", "Director"]

_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #eef2f7 0%, #f6f1fa 45%, #eaf6f3 100%);
}
.block-container {
    padding-top: 2rem;
}
.job-card {
    padding: 0.9rem 1.1rem;
    background: rgba(255,255,255,0.7);
    border: 1px solid rgba(74,144,217,0.25);
    border-radius: 12px;
    box-shadow: 0 4px 16px rgba(0,0,0,0.05);
    margin-bottom: 0.4rem;
}
.pill {
    display: inline-block;
    padding: 0.1rem 0.55rem;
    margin: 0 0.25rem 0.25rem 0;
    border-radius: 999px;
    background: rgba(74,144,217,0.12);
    font-size: 0.8rem;
}
</style>
"""

# ── Helpers ──────────────────────────────────────────────────────────────


def _dashboard() -> Dashboard:
    if "dashboard" not in st.session_state:
        setup_logging(LOG_LEVEL, LOG_DIR)
        ensure_dirs()
        st.session_state["dashboard"] = Dashboard(JsonStore(DATA_DIR))
        log.info("Dashboard session started (data in %s)", DATA_DIR)
    return st.session_state["dashboard"]


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def _feedback_form(dash: Dashboard, posting: Posting) -> None:
    with st.form(f"feedback-{posting.source}-{posting.id}", clear_on_submit=True):
        verdict = st.radio("Verdict", VERDICTS, index=None, horizontal=True)
        notes = st.text_area(
            "Notes",
            placeholder="e.g. great leadership focus, salary too low, prefer hybrid…",
        )
        tags = st.multiselect("Tags to learn from", posting.tags[:12])
        if st.form_submit_button("Submit feedback", type="primary"):
            liked = verdict_liked(verdict)
            if liked is None:
                st.warning("Pick 👍 or 👎 before submitting.")
                return
            dash.submit_feedback(posting, liked, notes, tags)
            st.toast("Preferences updated from your feedback")
            st.rerun()


def _job_card(dash: Dashboard, scored: ScoredPosting) -> None:
    p = scored.posting
    st.markdown(card_html(scored), unsafe_allow_html=True)
    c1, c2, c3 = st.columns([1, 1, 3])
    if p.url:
        c1.link_button("Open", p.url, use_container_width=True)
    if c2.button("Save", key=f"save-{p.source}-{p.id}", use_container_width=True):
        st.toast("Saved" if dash.save_posting(p) else "Already saved")
    with c3.expander("Feedback"):
        if scored.match_reasons:
            st.caption("Why: " + ", ".join(scored.match_reasons))
        _feedback_form(dash, p)


# ── Page: Search ─────────────────────────────────────────────────────────


def page_search() -> None:
    dash = _dashboard()
    st.header("Discover")

    with st.form("search"):
        c1, c2 = st.columns([3, 2])
        query = c1.text_input("Query", value=st.session_state.get("query", DEFAULT_QUERY))
        location = c2.text_input("Location", value=st.session_state.get("location", DEFAULT_LOCATION))
        submitted = st.form_submit_button("Search", type="primary", use_container_width=True)

    if submitted:
        st.session_state["query"], st.session_state["location"] = query, location
        with st.spinner("Searching…"):
            asyncio.run(dash.search(query, location))

    ranked = dash.ranked()
    if not ranked:
        st.info("No results yet. Try a search.")
        return

    st.caption(f"{len(ranked)} posting(s), best match first")
    for scored in ranked:
        _job_card(dash, scored)


# ── Page: Preferences ────────────────────────────────────────────────────


def page_preferences() -> None:
    dash = _dashboard()
    prefs = dash.preferences
    st.header("Preferences")

    with st.form("preferences"):
        c1, c2 = st.columns(2)
        with c1:
            keywords = st.text_area("Keywords (one per line)", "\n".join(prefs.keywords), height=180)
            preferred = st.text_area("Preferred locations", "\n".join(prefs.preferred_locations))
            industries = st.text_area("Industries", "\n".join(prefs.industries))
        with c2:
            blocked = st.text_area("Blocked keywords", "\n".join(prefs.blocked_keywords), height=180)
            excluded = st.text_area("Excluded locations", "\n".join(prefs.excluded_locations))
            min_salary = st.number_input("Minimum salary", 0, 1_000_000, int(prefs.min_salary or 0), step=5000)

        work_types = st.multiselect("Work types", sorted(set(WORK_TYPES) | set(prefs.work_types)), prefs.work_types)
        seniority = st.multiselect("Seniority", sorted(set(SENIORITY) | set(prefs.seniority)), prefs.seniority)

        f1, f2, f3, f4, f5 = st.columns(5)
        remote_only = f1.checkbox("Remote only", prefs.remote_only)
        academia = f2.checkbox("Academia", prefs.academia)
        consulting = f3.checkbox("Consulting", prefs.consulting)
        public_sector = f4.checkbox("Public sector", prefs.public_sector)
        private_sector = f5.checkbox("Private sector", prefs.private_sector)

        st.subheader("Weights")
        weights: dict[str, float] = {}
        cols = st.columns(3)
        for i, key in enumerate(WEIGHT_KEYS):
            weights[key] = cols[i % 3].slider(key, -3.0, 3.0, float(prefs.weight(key)), 0.05)

        if st.form_submit_button("Save Preferences", type="primary", use_container_width=True):
            dash.update_preferences(
                keywords=_lines(keywords),
                blocked_keywords=_lines(blocked),
                preferred_locations=_lines(preferred),
                excluded_locations=_lines(excluded),
                industries=_lines(industries),
                min_salary=min_salary or None,
                work_types=work_types,
                seniority=seniority,
                remote_only=remote_only,
                academia=academia,
                consulting=consulting,
                public_sector=public_sector,
                private_sector=private_sector,
                weights=weights,
            )
            st.success("Preferences saved!")

    if st.button("Reset to defaults"):
        dash.reset_preferences()
        st.rerun()


# ── Page: Saved & History ────────────────────────────────────────────────


def page_saved() -> None:
    dash = _dashboard()
    st.header("Saved & History")

    tab_saved, tab_history = st.tabs(["Saved postings", "Feedback history"])

    with tab_saved:
        saved = dash.saved_postings()
        if not saved:
            st.info("Nothing saved yet.")
        for p in saved:
            c1, c2 = st.columns([5, 1])
            c1.markdown(f"**[{p.title}]({p.url})** — {p.company} · {p.location}")
            if c2.button("Remove", key=f"rm-{p.source}-{p.id}"):
                dash.remove_saved(p)
                st.rerun()

    with tab_history:
        events = dash.feedback_log()
        if not events:
            st.info("No feedback given yet.")
            return

        c1, c2 = st.columns(2)
        c1.metric("Liked", sum(1 for e in events if e.liked))
        c2.metric("Disliked", sum(1 for e in events if not e.liked))

        import pandas as pd

        df = pd.DataFrame([e.to_dict() for e in events])
        df["when"] = pd.to_datetime(df["when"], errors="coerce")
        df["tags"] = df["tags"].apply(", ".join)
        st.dataframe(
            df[["when", "title", "liked", "notes", "tags"]].sort_values("when", ascending=False),
            use_container_width=True,
            hide_index=True,
        )


# ── Page: Sources ────────────────────────────────────────────────────────


def page_sources() -> None:
    dash = _dashboard()
    st.header("Sources & Digest")

    st.subheader("Job sources")
    st.caption("Adzuna appears once ADZUNA_APP_ID and ADZUNA_APP_KEY are set in `.env`.")
    for config in dash.sources:
        enabled = st.toggle(config.name, value=config.enabled, key=f"src-{config.name}")
        if enabled != config.enabled:
            dash.set_source_enabled(config.name, enabled)
            st.rerun()

    st.divider()
    st.subheader("Weekly digest")
    weekly = st.toggle("Let run_pathfinder.py write a digest once a week", value=dash.weekly_digest)
    if weekly != dash.weekly_digest:
        dash.weekly_digest = weekly
    last = dash.last_digest
    st.caption(f"Last digest: {last:%Y-%m-%d}" if last else "No digest written yet.")

    if st.button("Build digest now", use_container_width=True):
        ranked = dash.ranked()
        if not ranked:
            st.warning("Run a search first.")
        else:
            content = build_digest(ranked, feedback=dash.feedback_log())
            path = write_digest(content)
            dash.record_digest()
            st.success(f"Digest written → `{path.name}`")
            with st.expander("Preview", expanded=True):
                st.markdown(content)


# ── Main ─────────────────────────────────────────────────────────────────


def _wrap(page):
    def run() -> None:
        st.markdown(_CSS, unsafe_allow_html=True)
        page()

    run.__name__ = page.__name__
    return run


pages = [
    st.Page(_wrap(page_search), title="Discover", icon="🔎", url_path="discover", default=True),
    st.Page(_wrap(page_preferences), title="Preferences", icon="🎛️", url_path="preferences"),
    st.Page(_wrap(page_saved), title="Saved", icon="🔖", url_path="saved"),
    st.Page(_wrap(page_sources), title="Sources", icon="⚙️", url_path="sources"),
]

nav = st.navigation(pages)
nav.run()
