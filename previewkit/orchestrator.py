"""
Orchestrator for the preview pipeline.

Provides wrapper functions for the LangGraph-based workflow.
"""

from typing import Mapping, Optional, Union

from previewkit.compiler import OutOfProcessCompiler
from previewkit.graph import get_graph
from previewkit.logging import get_logger
from previewkit.schemas import CompileFailure, CompileOutcome, CompileRequest, FileRecord, Framework
from previewkit.state import PipelineState, create_initial_state

logger = get_logger(__name__)


# =============================================================================
# GRAPH-BASED ORCHESTRATION
# =============================================================================

def run_pipeline(
    framework: Union[Framework, str],
    files: Mapping[str, FileRecord],
    compiler: Optional[OutOfProcessCompiler] = None,
) -> PipelineState:
    """
    Run the LangGraph workflow for one source set.

    Args:
        framework: Framework identifier
        files: Source set to build
        compiler: Out-of-process compiler to try for complex sources

    Returns:
        The final PipelineState
    """
    # Create initial state
    initial_state = create_initial_state(framework, files, compiler)

    # Get the compiled graph
    graph = get_graph()

    # Run the graph
    final_state = graph.invoke(initial_state)

    return final_state


def compile_project(
    framework: Union[Framework, str],
    files: Mapping[str, FileRecord],
    compiler: Optional[OutOfProcessCompiler] = None,
) -> CompileOutcome:
    """
    Turn a source set into a previewable document.

    Args:
        framework: Framework identifier
        files: Source set to build
        compiler: Out-of-process compiler; without one everything is built in-process

    Returns:
        CompileSuccess with the document, or CompileFailure naming the offending file
    """
    final_state = run_pipeline(framework, files, compiler)

    outcome = final_state.get("outcome")
    if outcome is None:
        logger.error("Pipeline ended in stage %s without an outcome", final_state.get("stage"))
        return CompileFailure.of("Compilation produced no output")

    return outcome


def compile_request(
    request: CompileRequest,
    compiler: Optional[OutOfProcessCompiler] = None,
) -> CompileOutcome:
    """Run compile_project for a validated request body."""
    return compile_project(request.framework, request.files, compiler)
