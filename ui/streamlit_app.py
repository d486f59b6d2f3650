"""ui.streamlit_app

Streamlit match explorer:
- Pick a sample question or paste analyzed tokens as JSON
- Shows the derived question properties and the ranked, bound queries
- Debug mode lists every template decision (rejection reason / score)
"""

from __future__ import annotations

import json

import pandas as pd
import streamlit as st

from kbqa.env_loader import load_env
from kbqa.config import Settings
from kbqa.evaluation import load_questions, question_tokens
from kbqa.main import build_aggregator, match_question
from kbqa.tracing import TraceCollector
from ui.ui_theme import css


@st.cache_resource(show_spinner=False)
def _aggregator(catalog_path: str):
    return build_aggregator(Settings.load(), catalog_path=catalog_path)


@st.cache_data(show_spinner=False)
def _questions(path: str):
    return load_questions(path)


def _init_state(settings: Settings):
    if "debug" not in st.session_state:
        st.session_state.debug = settings.default_debug
    if "tokens_json" not in st.session_state:
        st.session_state.tokens_json = "[]"


def _decisions_table(tracer: TraceCollector) -> pd.DataFrame:
    rows = []
    for t in tracer.traces:
        if t["step"] == "template_rejected":
            rows.append({"template": t["payload"]["template"], "decision": t["payload"]["reason"],
                         "score": t["payload"].get("score")})
        elif t["step"] == "template_accepted":
            rows.append({"template": t["payload"]["template"], "decision": "accepted",
                         "score": t["payload"]["score"]})
    return pd.DataFrame(rows, columns=["template", "decision", "score"])


def main():
    load_env()
    settings = Settings.load()
    _init_state(settings)

    st.set_page_config(page_title="KBQA template matcher", layout="wide")
    st.markdown(css(), unsafe_allow_html=True)
    st.markdown(
        "<div class='kbqa-header'><span class='kbqa-badge'>KBQA</span>"
        "<b>Template matcher</b>"
        "<span class='kbqa-muted'>question tokens to ranked SPARQL</span></div>",
        unsafe_allow_html=True,
    )

    aggregator = _aggregator(settings.catalog_path)
    questions = _questions(settings.questions_path)

    with st.sidebar:
        st.markdown("### Settings")
        st.session_state.debug = st.toggle("Debug mode", value=st.session_state.debug)
        st.caption(f"Catalog: {len(aggregator.snapshot())} templates")
        if st.button("Reload catalog", width="stretch"):
            result = aggregator.catalog.reload()
            if result.ok:
                st.success(f"Loaded {len(result.catalog)} templates")
            else:
                st.error(result.error)

        st.markdown("### Sample questions")
        for q in questions:
            if st.button(str(q.get("text", q.get("id"))), width="stretch", key=f"q_{q.get('id')}"):
                st.session_state.tokens_json = json.dumps(question_tokens(q), indent=2)

    st.session_state.tokens_json = st.text_area("Analyzed tokens (JSON)", value=st.session_state.tokens_json, height=240)
    if not st.button("Match"):
        return

    try:
        tokens = json.loads(st.session_state.tokens_json)
    except json.JSONDecodeError as e:
        st.error(f"Invalid JSON: {e}")
        return

    tracer = TraceCollector()
    ranked = match_question(tokens, aggregator=aggregator, tracer=tracer)

    if ranked.properties:
        st.json(ranked.properties.__dict__)

    if not ranked:
        st.info("No template matched this question.")
    for entry in ranked.entries:
        with st.expander(f"{entry.key:.4f} · {entry.template.id}", expanded=entry is ranked.entries[0]):
            st.caption(f"score {entry.score:.4f} · catalog position {entry.position}")
            for c in entry.candidates:
                st.code(c.query, language="sparql")

    if st.session_state.debug:
        st.markdown("### Template decisions")
        st.dataframe(_decisions_table(tracer), width="stretch")
        with st.expander("Raw traces", expanded=False):
            st.code(json.dumps(tracer.traces, indent=2, default=str), language="json")


if __name__ == "__main__":
    main()
