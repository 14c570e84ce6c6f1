"""
Out-of-process compiler contract and constructors.

Compilers are built explicitly and handed to the orchestrator per call;
nothing here is a process-wide singleton.
"""

from typing import Optional, Protocol

from previewkit.config import Config
from previewkit.schemas import CompileOutcome, Framework, SourceSet


class OutOfProcessCompiler(Protocol):
    """Anything that can build a finished document outside this process."""

    def compile(self, framework: Framework, files: SourceSet) -> CompileOutcome:
        """
        Build a document for the given files.

        Implementations never raise for build or transport problems; they
        return a CompileFailure, which makes the orchestrator fall back to
        the in-process path.
        """
        ...


def build_compiler(config: Config) -> Optional[OutOfProcessCompiler]:
    """
    Build the compiler the live preview uses.

    Returns:
        A RemoteCompiler when a compile service URL is configured, else None
    """
    if not config.compiler_url:
        return None

    from previewkit.service.client import RemoteCompiler

    return RemoteCompiler(config.compiler_url, timeout=config.compiler_timeout)


def build_service_compiler(config: Config) -> OutOfProcessCompiler:
    """Build the Docker toolchain compiler the compile service runs."""
    from previewkit.sandbox.toolchain import ToolchainCompiler

    return ToolchainCompiler(
        image=config.toolchain_image,
        build_timeout=config.toolchain_timeout,
        install_timeout=config.install_timeout,
    )
