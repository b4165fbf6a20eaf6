import json
from typing import Any, Dict, List

import pandas as pd
import streamlit as st
import structlog

import config
from logging_config import configure_logging
from parsing.cv_parser import parse_resume_text
from parsing.models import SKILL_CATEGORIES, ResumeRecord
from services.exceptions import ResumeExtractionError
from services.text_extraction import extract_text, looks_scanned

configure_logging()
logger = structlog.get_logger()

# --- Page Config & Theme ---
st.set_page_config(
    page_title="Résumé Extractor",
    page_icon="📄",
    layout="wide",
)

CUSTOM_CSS = """
<style>
:root { --radius: 16px; --ring: 1px solid rgba(255,255,255,0.06); }
.block-container { padding-top: 1.25rem; max-width: 1200px; }
header { visibility: hidden; }

.stepper { display:flex; gap:.5rem; margin-bottom: .75rem; position: sticky; top: 0; z-index: 10; }
.step {
  padding: .45rem .85rem; border-radius: 999px;
  font-weight: 700; letter-spacing:.2px; opacity:.7; border: var(--ring);
  background: #12141A;
}
.step.active { opacity:1; background: linear-gradient(90deg, rgba(30,121,255,.25), rgba(139,92,246,.25)); }

[data-testid="stFileUploader"] {
  border-radius: var(--radius);
  border: var(--ring);
  background: #10141c;
}
.small { opacity: 0.75; font-size: 0.9rem; }
</style>
"""
st.markdown(CUSTOM_CSS, unsafe_allow_html=True)


# --- Session State ---
def _init_state():
    ss = st.session_state
    ss.setdefault("step", 1)
    ss.setdefault("raw_text", "")
    ss.setdefault("record", None)


_init_state()

STEPS = [(1, "Upload"), (2, "Review"), (3, "Export")]


def stepper():
    cols = st.columns(len(STEPS))
    for i, (num, label) in enumerate(STEPS):
        with cols[i]:
            cls = "step active" if st.session_state.step == num else "step"
            st.markdown(f"<div class='{cls}'> {num}. {label} </div>", unsafe_allow_html=True)


# --- Step 1: Upload ---
def step_upload():
    st.subheader("1) Upload your résumé")
    st.info("Parsing is rule-based and runs locally; nothing leaves this session.")
    file = st.file_uploader(
        "Drop your résumé (PDF/DOCX/TXT)",
        type=[ext.lstrip(".") for ext in config.ALLOWED_EXTENSIONS],
        accept_multiple_files=False,
    )
    if file is None:
        return

    data = file.getvalue()
    try:
        text = extract_text(data, file.name)
    except ResumeExtractionError as e:
        logger.warning("upload_rejected", filename=file.name, error=e.message, details=e.details)
        st.error(e.message)
        return

    if file.name.lower().endswith(".pdf") and looks_scanned(text, len(data)):
        st.warning("This PDF looks scanned; please upload .txt or a PDF with selectable text.")

    st.session_state.raw_text = text
    with st.expander("Preview extracted text", expanded=False):
        st.text_area("Raw text", text, height=240)

    if st.button("Extract structured data", type="primary"):
        with st.spinner("Parsing your résumé…"):
            st.session_state.record = parse_resume_text(text)
        st.session_state.step = 2
        st.toast("Parsed! Review next.", icon="📝")
        st.rerun()


# --- Step 2: Review ---
def _table(rows: List[Dict[str, Any]], empty_msg: str):
    if not rows:
        st.caption(empty_msg)
        return
    df = pd.DataFrame(rows)
    for col in df.columns:
        if df[col].map(lambda v: isinstance(v, list)).any():
            df[col] = df[col].map(lambda v: "; ".join(v) if isinstance(v, list) else v)
    st.dataframe(df, use_container_width=True, hide_index=True)


def step_review():
    st.subheader("2) Review")
    record: ResumeRecord = st.session_state.record
    if record is None:
        st.info("Upload a résumé first.")
        return

    tab_struct, tab_raw = st.tabs(["Structured", "Raw text"])
    with tab_struct:
        st.markdown("### Identity & contact")
        c1, c2 = st.columns(2)
        with c1:
            st.text_input("Name", record.name, disabled=True)
            st.text_input("Email", record.contact.email or "", disabled=True)
            st.text_input("Phone", record.contact.phone or "", disabled=True)
        with c2:
            st.text_input("LinkedIn", record.contact.linkedin or "", disabled=True)
            st.text_input("Portfolio", record.contact.portfolio or "", disabled=True)

        st.markdown("### Education")
        _table([e.model_dump(by_alias=True) for e in record.education], "No education entries found.")

        st.markdown("### Skills")
        cols = st.columns(len(SKILL_CATEGORIES))
        for col, category in zip(cols, SKILL_CATEGORIES):
            with col:
                st.markdown(f"**{category.title()}**")
                st.write(", ".join(getattr(record.skills, category)) or "—")

        st.markdown("### Experience")
        _table([e.model_dump(by_alias=True) for e in record.experience], "No experience entries found.")

        st.markdown("### Projects")
        _table([p.model_dump(by_alias=True) for p in record.projects], "No projects found.")

        st.markdown("### Certifications")
        _table([c.model_dump(by_alias=True) for c in record.certifications], "No certifications found.")

    with tab_raw:
        rt = st.text_area("Raw text", st.session_state.raw_text, height=300)
        if st.button("Re-parse edited text"):
            st.session_state.raw_text = rt
            st.session_state.record = parse_resume_text(rt)
            st.rerun()

    if st.button("Continue to export →", type="primary"):
        st.session_state.step = 3
        st.rerun()


# --- Step 3: Export ---
def step_export():
    st.subheader("3) Export")
    record: ResumeRecord = st.session_state.record
    if record is None:
        st.info("Upload a résumé first.")
        return
    payload = json.dumps(record.model_dump(by_alias=True), indent=2, ensure_ascii=False)
    st.code(payload, language="json")
    st.download_button("Download JSON", payload, file_name="resume.json", mime="application/json")
    if st.button("← Back to review"):
        st.session_state.step = 2
        st.rerun()


# --- Router ---
stepper()

if st.session_state.step == 1:
    step_upload()
elif st.session_state.step == 2:
    step_review()
else:
    step_export()

st.caption("Best-effort heuristic extraction; conventional résumé layouts work best.")
