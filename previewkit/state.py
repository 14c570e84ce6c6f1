"""
State definitions for the preview pipeline graph.
"""

from types import MappingProxyType
from typing import List, Mapping, Optional, TypedDict, Union

from previewkit.compiler import OutOfProcessCompiler
from previewkit.pipeline.resolver import EntrySelection
from previewkit.pipeline.transformer import TransformResult
from previewkit.schemas import CompileOutcome, FileRecord, Framework, SourceSet


# Pipeline stages, in the order a successful build passes through them
IDLE = "idle"
RESOLVING = "resolving"
CLASSIFYING = "classifying"
IN_PROCESS = "in_process"
OUT_OF_PROCESS = "out_of_process"
ASSEMBLING = "assembling"
DONE = "done"
FAILED = "failed"


class PipelineState(TypedDict, total=False):
    """
    Typed state dictionary for one pipeline run.

    Every key is local to a single invocation; nothing here is shared
    between runs.
    """
    # Input
    framework_id: str
    files: SourceSet
    compiler: Optional[OutOfProcessCompiler]

    # Progress
    stage: str
    framework: Optional[Framework]
    selection: Optional[EntrySelection]
    needs_full_compile: bool

    # Build artifacts
    remote_outcome: Optional[CompileOutcome]
    fallback_used: bool
    transform_result: Optional[TransformResult]

    # Output
    outcome: Optional[CompileOutcome]

    # Error tracking
    errors: List[str]


def create_initial_state(
    framework: Union[Framework, str],
    files: Mapping[str, FileRecord],
    compiler: Optional[OutOfProcessCompiler] = None,
) -> PipelineState:
    """
    Create the initial state for a pipeline run.

    Args:
        framework: Framework identifier (validated by the resolve step)
        files: Source set; copied into a read-only view
        compiler: Optional out-of-process compiler for complex sources

    Returns:
        Initialized PipelineState
    """
    framework_id = framework.value if isinstance(framework, Framework) else str(framework)
    return PipelineState(
        framework_id=framework_id,
        files=MappingProxyType(dict(files)),
        compiler=compiler,
        stage=IDLE,
        framework=None,
        selection=None,
        needs_full_compile=False,
        remote_outcome=None,
        fallback_used=False,
        transform_result=None,
        outcome=None,
        errors=[],
    )
