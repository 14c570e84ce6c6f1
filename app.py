"""
previewkit - Streamlit Preview Harness

Pick a framework, edit the source files and see the rendered preview.
Complex sources go to the compile service when one is configured; everything
else is built in-process.
"""

from datetime import datetime

import streamlit as st
import streamlit.components.v1 as components

from previewkit.compiler import build_compiler
from previewkit.config import ConfigError, get_config
from previewkit.logging import configure_logging, get_logger
from previewkit.orchestrator import compile_project
from previewkit.schemas import FileRecord, Framework
from previewkit.templates import list_frameworks, starter_files
from previewkit.utils import (
    guess_language_from_filename,
    make_zip_bytes,
    safe_project_name,
    validate_files,
)

logger = get_logger("app")

PREVIEW_HEIGHT = 600
MAX_CONSOLE_LINES = 200


# Page configuration
st.set_page_config(
    page_title="previewkit",
    page_icon="🖥️",
    layout="wide",
)

# Custom CSS for better styling
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: 700;
        color: #1E88E5;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }
    .console-line {
        font-family: 'Fira Code', 'Consolas', monospace;
        font-size: 0.85rem;
    }
</style>
""", unsafe_allow_html=True)


def init_session_state():
    """Initialize session state variables."""
    # Project
    if "framework" not in st.session_state:
        st.session_state.framework = Framework.VANILLA.value
    if "files" not in st.session_state:
        st.session_state.files = starter_files(Framework.VANILLA)
    if "selected_file" not in st.session_state:
        st.session_state.selected_file = "index.html"
    if "project_name" not in st.session_state:
        st.session_state.project_name = "My preview"

    # Last build
    if "outcome" not in st.session_state:
        st.session_state.outcome = None
    if "auto_compile" not in st.session_state:
        st.session_state.auto_compile = True

    # Console
    if "console" not in st.session_state:
        st.session_state.console = []


def log_console(level: str, message: str):
    """Append a line to the preview console."""
    stamp = datetime.now().strftime("%H:%M:%S")
    st.session_state.console.append({"time": stamp, "level": level, "message": message})
    del st.session_state.console[:-MAX_CONSOLE_LINES]


def load_config():
    """Load configuration and show an error if it is invalid."""
    try:
        return get_config()
    except ConfigError as e:
        st.error(f"⚠️ Configuration Error\n\n{str(e)}")
        return None


def load_starter(framework: str):
    """Replace the project with the framework's starter files."""
    st.session_state.framework = framework
    st.session_state.files = starter_files(framework)
    st.session_state.selected_file = "index.html"
    st.session_state.outcome = None
    log_console("info", f"Loaded {framework} starter")


def run_compile(config):
    """Compile the current project and keep the outcome."""
    logger.debug("Compiling %s project with %d files", st.session_state.framework, len(st.session_state.files))
    compiler = build_compiler(config)
    outcome = compile_project(st.session_state.framework, st.session_state.files, compiler)
    st.session_state.outcome = outcome

    if outcome.success:
        log_console("info", f"Compiled {st.session_state.framework} project ({len(outcome.document)} bytes)")
    else:
        log_console("error", f"{outcome.offending_file}: {outcome.message}")


# =============================================================================
# EDITOR
# =============================================================================

def display_file_editor():
    """File selector, text editor and add/remove controls."""
    files = st.session_state.files
    names = list(files)

    if st.session_state.selected_file not in files:
        st.session_state.selected_file = names[0] if names else None

    if names:
        selected = st.selectbox(
            "File",
            options=names,
            index=names.index(st.session_state.selected_file),
        )
        st.session_state.selected_file = selected

        record = files[selected]
        content = st.text_area(
            f"{selected} ({guess_language_from_filename(selected)})",
            value=record.content,
            height=420,
            key=f"editor_{st.session_state.framework}_{selected}",
        )
        if content != record.content:
            # Records are immutable; the edit produces a new one.
            st.session_state.files = {**files, selected: record.with_content(content)}
    else:
        st.info("📭 No files yet. Add one below.")

    col1, col2 = st.columns([3, 1])
    with col1:
        new_name = st.text_input("New file name", placeholder="App.jsx", label_visibility="collapsed")
    with col2:
        if st.button("➕ Add", use_container_width=True):
            new_name = new_name.strip()
            if not new_name:
                st.warning("Enter a file name first.")
            elif new_name in files:
                st.warning(f"{new_name} already exists.")
            else:
                st.session_state.files = {**st.session_state.files, new_name: FileRecord(name=new_name)}
                st.session_state.selected_file = new_name
                log_console("info", f"Added {new_name}")
                st.rerun()

    if names and st.button(f"🗑️ Remove {st.session_state.selected_file}", use_container_width=True):
        removed = st.session_state.selected_file
        st.session_state.files = {name: rec for name, rec in st.session_state.files.items() if name != removed}
        log_console("info", f"Removed {removed}")
        st.rerun()


# =============================================================================
# PREVIEW
# =============================================================================

def display_preview():
    """Render the last compile outcome."""
    outcome = st.session_state.outcome

    if outcome is None:
        st.info("👆 Compile the project to see the preview.")
        return

    if not outcome.success:
        st.error(f"**{outcome.offending_file}**: {outcome.message}")
        return

    components.html(outcome.document, height=PREVIEW_HEIGHT, scrolling=True)


def display_console():
    """Display compile messages, newest last."""
    if not st.session_state.console:
        st.caption("Console is empty.")
        return

    icons = {"info": "ℹ️", "warning": "⚠️", "error": "❌"}
    for line in st.session_state.console[-50:]:
        icon = icons.get(line["level"], "")
        st.markdown(
            f'<div class="console-line">{line["time"]} {icon} {line["message"]}</div>',
            unsafe_allow_html=True,
        )


def display_downloads():
    """Download buttons for the project and the compiled document."""
    project_name = safe_project_name(st.session_state.project_name)

    col1, col2 = st.columns(2)
    with col1:
        st.download_button(
            label="📥 Download project ZIP",
            data=make_zip_bytes(st.session_state.files),
            file_name=f"{project_name}.zip",
            mime="application/zip",
            use_container_width=True,
        )
    with col2:
        outcome = st.session_state.outcome
        st.download_button(
            label="📄 Download compiled HTML",
            data=outcome.document if outcome is not None and outcome.success else "",
            file_name=f"{project_name}.html",
            mime="text/html",
            disabled=outcome is None or not outcome.success,
            use_container_width=True,
        )


# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    """Main application entry point."""
    init_session_state()

    # Header
    st.markdown('<p class="main-header">🖥️ previewkit</p>', unsafe_allow_html=True)
    st.markdown(
        '<p class="sub-header">Live previews for vanilla, React, Vue and Svelte projects</p>',
        unsafe_allow_html=True
    )

    config = load_config()
    if config is None:
        return
    configure_logging(config.log_level)

    frameworks = list_frameworks()
    ids = [info["id"] for info in frameworks]

    with st.sidebar:
        st.header("Framework")
        choice = st.selectbox(
            "Framework",
            options=ids,
            index=ids.index(st.session_state.framework),
            format_func=lambda fid: next(info["name"] for info in frameworks if info["id"] == fid),
            label_visibility="collapsed",
        )
        st.caption(next(info["description"] for info in frameworks if info["id"] == choice))
        if choice != st.session_state.framework:
            st.session_state.framework = choice
            st.session_state.outcome = None

        if st.button("📦 Load starter", use_container_width=True):
            load_starter(choice)
            st.rerun()

        st.divider()

        st.header("Build")
        st.session_state.auto_compile = st.toggle("Compile on every edit", value=st.session_state.auto_compile)
        if config.compiler_url:
            st.write(f"🛰️ Compile service: `{config.compiler_url}`")
        else:
            st.write("🧩 In-process builds only")
        st.write(f"📁 Files: {len(st.session_state.files)}")

        st.divider()

        st.session_state.project_name = st.text_input("Project name", value=st.session_state.project_name)

        if st.button("🗑️ Clear Console", use_container_width=True):
            st.session_state.console = []
            st.rerun()

    editor_col, preview_col = st.columns(2)

    with editor_col:
        st.subheader("📝 Files")
        display_file_editor()

        for problem in validate_files(st.session_state.framework, st.session_state.files):
            st.warning(problem)

    with preview_col:
        st.subheader("👁️ Preview")
        compile_clicked = st.button("▶️ Compile", type="primary", use_container_width=True)
        if compile_clicked or st.session_state.auto_compile:
            with st.spinner("Compiling..."):
                run_compile(config)
        display_preview()

    st.divider()

    console_tab, download_tab = st.tabs(["🧾 Console", "📥 Export"])
    with console_tab:
        display_console()
    with download_tab:
        display_downloads()


if __name__ == "__main__":
    main()
