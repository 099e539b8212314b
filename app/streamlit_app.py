# app/streamlit_app.py
import io
import logging

import pandas as pd
import streamlit as st

import config
from agreement_matcher import MatchOutcome, MatchState
from agreements import AgreementTable, load_agreements, load_agreements_from_upload
from ai_summarizer import SummarizationError, generate_greeting, get_client, summarize_transcript
from pdf_utils import PdfExtractionError, extract_text_from_pdf_bytes
from session import TranscriptSession

config.configure_logging()
logger = logging.getLogger(__name__)

CONNECT_FAILED = "Oops! I couldn't connect. Please check your setup."


st.set_page_config(
    page_title="Transcript → Transfer Agreements",
    layout="wide",
)


# ===============================
# Cached resources
# ===============================

@st.cache_resource
def load_client():
    return get_client()


@st.cache_data
def load_greeting() -> tuple[str, str | None]:
    client = load_client()
    if client is None:
        return CONNECT_FAILED, "Failed to initialize AI. API key might be missing or invalid."
    try:
        return generate_greeting(client), None
    except SummarizationError as e:
        logger.error("Failed to generate greeting: %s", e)
        return CONNECT_FAILED, "Failed to load initial greeting. API key or network issue?"


@st.cache_data
def load_default_agreements() -> AgreementTable:
    return load_agreements(config.AGREEMENTS_PATH)


@st.cache_data
def to_excel_bytes(df: pd.DataFrame) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False)
    return output.getvalue()


def get_session() -> TranscriptSession:
    if "transcript_session" not in st.session_state:
        st.session_state.transcript_session = TranscriptSession()
        st.session_state.upload_id = None
    return st.session_state.transcript_session


session = get_session()
greeting, greeting_error = load_greeting()

st.title(greeting)
if greeting_error and not session.error:
    st.error(greeting_error)


# ===============================
# Sidebar: agreement table
# ===============================

with st.sidebar:
    st.header("Transfer agreements")

    agreements = load_default_agreements()
    if agreements.is_loaded:
        st.success(f"Loaded default agreements from `{agreements.source}` ({len(agreements)} rows).")
    else:
        st.info(f"Default agreement table unavailable: {agreements.error}")

    override = st.file_uploader(
        "Override agreement table (JSON/CSV/Excel)",
        type=["json", "csv", "xlsx"],
        key="agreements_uploader",
    )
    if override is not None:
        agreements = load_agreements_from_upload(override)
        if agreements.is_loaded:
            st.success(f"Using uploaded agreements `{override.name}` ({len(agreements)} rows).")
        else:
            st.error(f"Error reading uploaded agreements: {agreements.error}")

    if not agreements.is_loaded:
        st.warning("⚠ Agreement data not available. Transfer matching is disabled.")


# ===============================
# Transcript upload
# ===============================

st.subheader("Upload your transcript (PDF only)")
uploaded = st.file_uploader(
    "Upload transcript PDF",
    type=["pdf"],
    key="transcript_uploader",
)

if uploaded is None:
    if st.session_state.upload_id is not None:
        # File cleared: back to the initial state.
        session.begin_cycle()
        st.session_state.upload_id = None
else:
    upload_id = getattr(uploaded, "file_id", None) or f"{uploaded.name}:{uploaded.size}"
    if upload_id != st.session_state.upload_id:
        st.session_state.upload_id = upload_id
        if not uploaded.name.lower().endswith(".pdf"):
            session.reject_file()
        else:
            cycle = session.begin_cycle(uploaded.name)
            with st.spinner("Extracting text from PDF..."):
                try:
                    session.record_extraction(cycle, extract_text_from_pdf_bytes(uploaded.getvalue()))
                except PdfExtractionError as e:
                    session.record_extraction_error(cycle, str(e))

if session.error:
    st.error(session.error)
if session.file_status:
    st.caption(session.file_status)
if session.pdf_status:
    st.info(session.pdf_status)

if session.extracted_text:
    with st.expander("Extracted Text", expanded=False):
        st.text(session.extracted_text)
    if session.validity_message:
        st.warning(session.validity_message)


# ===============================
# Auto-summarize
# ===============================

if session.should_summarize():
    client = load_client()
    if client is None:
        session.error = "AI client not initialized. Cannot summarize."
        st.error(session.error)
    else:
        cycle = session.cycle
        session.start_summary(cycle)
        with st.spinner(session.summary_status):
            try:
                session.record_summary(cycle, summarize_transcript(session.extracted_text, client))
            except SummarizationError as e:
                session.record_summary_error(cycle, str(e))
                st.error(session.error)

if session.summary_status:
    if session.summary_text:
        st.success(session.summary_status)
    else:
        st.info(session.summary_status)

if session.summary_text:
    st.subheader("Transcript Summary")
    st.markdown(session.summary_text)


# ===============================
# Transfer matches
# ===============================

def render_matches(outcome: MatchOutcome) -> None:
    if outcome.state is MatchState.UNCOMPUTED:
        return

    st.subheader("Courses that likely transfer")

    if outcome.state is MatchState.BLOCKED:
        st.error(
            "Transfer agreement data could not be loaded, so courses were not matched. "
            "This does not mean no agreements exist."
        )
        return
    if outcome.state is MatchState.NO_COURSES:
        st.info("No passing courses were found in the summary.")
        return

    st.caption(f"Passed courses checked: {', '.join(c.code for c in outcome.courses)}")
    if outcome.state is MatchState.EMPTY:
        st.info("No transfer agreements were found for these courses.")
        return

    st.dataframe(outcome.matches, width="stretch", hide_index=True)
    st.download_button(
        "⬇️ Download Excel",
        data=to_excel_bytes(outcome.matches),
        file_name="Transfer_Matches.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


render_matches(session.match(agreements))
