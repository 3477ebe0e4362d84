"""Weburle - Streamlit website generator.

Thin client for the Weburle relay. This file handles:
  - Prompt input with a busy flag (one generation in flight per session)
  - POST /api/generate and assembly of the returned fragments
  - Isolated iframe preview, code view and HTML download
  - Bounded local history (5 entries) persisted to a JSON file
  - Assistant chat tab backed by POST /api/chat
"""

import streamlit as st
import streamlit.components.v1 as components
import structlog

from frontend.api_client import RelayClient, RelayRequestError
from frontend.document import assemble_document
from frontend.history import HistoryStore, JsonFileHistoryStore, push_entry

GENERATION_FAILED = "Generation failed. Please try again."
EMPTY_PROMPT = "Please enter a description for your website"

logger = structlog.get_logger(__name__)

client = RelayClient()
store: HistoryStore = JsonFileHistoryStore()

st.set_page_config(
    page_title="Weburle - Website Generator",
    layout="wide",
)


def init_session():
    """Initialize session state on first load."""
    if "prompt" not in st.session_state:
        st.session_state.prompt = ""
    if "document" not in st.session_state:
        st.session_state.document = ""
    if "busy" not in st.session_state:
        st.session_state.busy = False
    if "error" not in st.session_state:
        st.session_state.error = ""
    if "history" not in st.session_state:
        st.session_state.history = store.load()
    if "chat" not in st.session_state:
        st.session_state.chat = []


def start_generation():
    """Button callback: validate the prompt and mark the session busy."""
    if not st.session_state.prompt.strip():
        st.session_state.error = EMPTY_PROMPT
        return
    st.session_state.error = ""
    st.session_state.busy = True


def run_generation():
    """Call the relay for the current prompt and update document + history."""
    prompt = st.session_state.prompt
    st.session_state.document = ""
    try:
        with st.spinner("Generating your website..."):
            bundle = client.generate(prompt)
        document = assemble_document(bundle)
        st.session_state.document = document
        st.session_state.history = push_entry(st.session_state.history, prompt, document)
        store.save(st.session_state.history)
    except RelayRequestError as e:
        st.session_state.error = GENERATION_FAILED
        logger.error("ui.generate_failed", error=str(e), status=e.status_code, payload=e.payload)
    finally:
        st.session_state.busy = False


def load_from_history(entry):
    st.session_state.document = entry.document
    st.session_state.prompt = entry.prompt
    st.session_state.error = ""


def render_sidebar():
    with st.sidebar:
        health = client.health()
        if health.get("status") == "ok":
            st.success("API ready")
        else:
            st.error(f"API {health.get('status', 'offline')}: {health.get('message', '')}")

        st.markdown("### Recent")
        if not st.session_state.history:
            st.caption("No websites generated yet.")
        for entry in st.session_state.history:
            st.button(
                entry.prompt,
                key=f"history-{entry.id}",
                help=entry.created_at,
                on_click=load_from_history,
                args=(entry,),
                use_container_width=True,
            )


def render_generator():
    st.text_area(
        "Describe your website",
        key="prompt",
        height=120,
        placeholder="A dark portfolio with a contact form...",
        disabled=st.session_state.busy,
    )

    col_generate, col_regenerate = st.columns(2)
    col_generate.button("Generate", key="generate", on_click=start_generation,
                        disabled=st.session_state.busy, type="primary", use_container_width=True)
    col_regenerate.button("Regenerate", key="regenerate", on_click=start_generation,
                          disabled=st.session_state.busy or not st.session_state.document,
                          use_container_width=True)

    if st.session_state.busy:
        run_generation()
        st.rerun()

    if st.session_state.error:
        st.error(st.session_state.error)

    if st.session_state.document:
        preview, code = st.tabs(["Preview", "Code"])
        with preview:
            components.html(st.session_state.document, height=640, scrolling=True)
        with code:
            st.code(st.session_state.document, language="html")
        st.download_button(
            "Download HTML",
            data=st.session_state.document,
            file_name="generated-website.html",
            mime="text/html",
        )


def render_assistant():
    for msg in st.session_state.chat:
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])

    if user_input := st.chat_input("Ask a frontend question..."):
        st.session_state.chat.append({"role": "user", "content": user_input})
        with st.chat_message("user"):
            st.markdown(user_input)
        with st.chat_message("assistant"):
            try:
                reply = client.chat(user_input)
            except RelayRequestError:
                reply = "[ERROR] Assistant unavailable. Please try again."
            st.markdown(reply)
        st.session_state.chat.append({"role": "assistant", "content": reply})


def main():
    """Run the Streamlit generator application."""
    init_session()

    st.title("Weburle")
    st.caption("Describe a website, preview it, take the HTML.")

    render_sidebar()

    generator_tab, assistant_tab = st.tabs(["Generator", "Assistant"])
    with generator_tab:
        render_generator()
    with assistant_tab:
        render_assistant()


if __name__ == "__main__":
    main()
