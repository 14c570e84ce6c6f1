"""
LangGraph implementation of the preview pipeline.

Implements a small state graph with nodes:
- resolve_node: validates the framework and picks the files to build
- classify_node: decides whether the entry needs the full compiler
- out_of_process_node: asks the injected compiler for a finished document
- in_process_node: builds script and style without leaving the process
- assemble_node: produces the final document

The only retry edge is out_of_process_node -> in_process_node, taken when
the out-of-process compiler fails for any reason.
"""

from typing import Literal

from langgraph.graph import StateGraph, END

from previewkit.errors import PreviewError
from previewkit.logging import get_logger
from previewkit.pipeline.assembler import assemble
from previewkit.pipeline.classifier import needs_full_compile
from previewkit.pipeline.resolver import resolve
from previewkit.pipeline.transformer import transform
from previewkit.schemas import CompileFailure, CompileSuccess, Framework
from previewkit.state import (
    ASSEMBLING,
    CLASSIFYING,
    DONE,
    FAILED,
    IN_PROCESS,
    OUT_OF_PROCESS,
    RESOLVING,
    PipelineState,
)

logger = get_logger(__name__)


def _fail(state: PipelineState, message: str, file: str) -> PipelineState:
    """Move the run to the Failed terminal with one failure outcome."""
    state["outcome"] = CompileFailure.of(message, file)
    state["stage"] = FAILED
    state["errors"] = state.get("errors", []) + [f"{file}: {message}"]
    logger.info("Build failed at %s: %s", file, message)
    return state


# =============================================================================
# GRAPH NODES
# =============================================================================

def resolve_node(state: PipelineState) -> PipelineState:
    """
    Validate the framework identifier and select the files to build.

    Routes to: classify_node, or ends on a missing file / unknown framework
    """
    state["stage"] = RESOLVING

    try:
        framework = Framework.parse(state["framework_id"])
        selection = resolve(framework, state["files"])
    except PreviewError as e:
        return _fail(state, e.message, e.file)

    state["framework"] = framework
    state["selection"] = selection
    logger.debug(
        "Resolved %s build: entry=%s style=%s",
        framework.value,
        selection.entry.name if selection.entry else None,
        selection.style.name if selection.style else None,
    )
    return state


def classify_node(state: PipelineState) -> PipelineState:
    """
    Run the complexity heuristic over the entry source.
    """
    state["stage"] = CLASSIFYING

    entry = state["selection"].entry
    verdict = needs_full_compile(entry.content, state["framework"]) if entry is not None else False
    state["needs_full_compile"] = verdict

    logger.debug("Entry %s needs full compile: %s", entry.name if entry else None, verdict)
    return state


def out_of_process_node(state: PipelineState) -> PipelineState:
    """
    Ask the injected compiler for a finished document.

    A failure here is never surfaced; it only sends the run down the
    in-process path.
    """
    state["stage"] = OUT_OF_PROCESS
    compiler = state["compiler"]

    try:
        outcome = compiler.compile(state["framework"], state["files"])
    except Exception as e:
        # Compilers are supposed to return failures, but one that raises must not end the run.
        logger.exception("Out-of-process compiler raised")
        outcome = CompileFailure.of(f"Out-of-process compiler raised: {e}")

    state["remote_outcome"] = outcome

    if isinstance(outcome, CompileFailure):
        state["fallback_used"] = True
        state["errors"] = state.get("errors", []) + [f"{outcome.offending_file}: {outcome.message}"]
        logger.warning(
            "Out-of-process compile failed (%s); falling back to in-process build",
            outcome.message,
        )

    return state


def in_process_node(state: PipelineState) -> PipelineState:
    """
    Build script and style in this process.
    """
    state["stage"] = IN_PROCESS

    try:
        result = transform(state["framework"], state["selection"])
    except PreviewError as e:
        return _fail(state, e.message, e.file)

    state["transform_result"] = result
    if result.degraded:
        logger.warning("In-process build degraded to runtime transform")
    return state


def assemble_node(state: PipelineState) -> PipelineState:
    """
    Produce the final document.

    A successful out-of-process outcome is already a finished document and
    is passed through as-is.
    """
    state["stage"] = ASSEMBLING

    remote = state.get("remote_outcome")
    if isinstance(remote, CompileSuccess):
        state["outcome"] = remote
    else:
        selection = state["selection"]
        result = state["transform_result"]
        html = assemble(
            selection.markup.content,
            result.script,
            result.style,
            selection.markers,
            script_type=result.script_type,
        )
        state["outcome"] = CompileSuccess(html=html)

    state["stage"] = DONE
    return state


# =============================================================================
# ROUTING LOGIC
# =============================================================================

def after_resolve_route(state: PipelineState) -> Literal["classify_node", "end"]:
    """After resolving, classify or end on failure."""
    if state.get("stage") == FAILED:
        return "end"
    return "classify_node"


def after_classify_route(state: PipelineState) -> Literal["out_of_process_node", "in_process_node"]:
    """Use the out-of-process compiler only for complex sources and only when one is injected."""
    if state.get("needs_full_compile") and state.get("compiler") is not None:
        return "out_of_process_node"
    return "in_process_node"


def after_out_of_process_route(state: PipelineState) -> Literal["assemble_node", "in_process_node"]:
    """Successful outcomes go straight to assembly; anything else falls back."""
    if isinstance(state.get("remote_outcome"), CompileSuccess):
        return "assemble_node"
    return "in_process_node"


def after_in_process_route(state: PipelineState) -> Literal["assemble_node", "end"]:
    """After the in-process build, assemble or end on failure."""
    if state.get("stage") == FAILED:
        return "end"
    return "assemble_node"


# =============================================================================
# BUILD THE GRAPH
# =============================================================================

def build_graph() -> StateGraph:
    """Build and return the pipeline state graph."""

    # Create the graph
    graph = StateGraph(PipelineState)

    # Add nodes
    graph.add_node("resolve_node", resolve_node)
    graph.add_node("classify_node", classify_node)
    graph.add_node("out_of_process_node", out_of_process_node)
    graph.add_node("in_process_node", in_process_node)
    graph.add_node("assemble_node", assemble_node)

    # Set entry point
    graph.set_entry_point("resolve_node")

    graph.add_conditional_edges(
        "resolve_node",
        after_resolve_route,
        {
            "classify_node": "classify_node",
            "end": END,
        }
    )

    graph.add_conditional_edges(
        "classify_node",
        after_classify_route,
        {
            "out_of_process_node": "out_of_process_node",
            "in_process_node": "in_process_node",
        }
    )

    # The single fallback edge: out-of-process -> in-process
    graph.add_conditional_edges(
        "out_of_process_node",
        after_out_of_process_route,
        {
            "assemble_node": "assemble_node",
            "in_process_node": "in_process_node",
        }
    )

    graph.add_conditional_edges(
        "in_process_node",
        after_in_process_route,
        {
            "assemble_node": "assemble_node",
            "end": END,
        }
    )

    # Terminal edge
    graph.add_edge("assemble_node", END)

    return graph


def get_compiled_graph():
    """Get the compiled graph ready for execution."""
    graph = build_graph()
    return graph.compile()


# Global compiled graph instance (immutable, safe to share between runs)
_compiled_graph = None


def get_graph():
    """Get or create the global compiled graph instance."""
    global _compiled_graph
    if _compiled_graph is None:
        _compiled_graph = get_compiled_graph()
    return _compiled_graph
