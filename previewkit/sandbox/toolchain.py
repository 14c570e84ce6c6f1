"""
Toolchain Compiler - build previews with the real framework compilers in Docker.

This is the authoritative compiler behind the compile service. Each build
runs in fresh containers:
- Phase 1 installs esbuild, React, Vue and Svelte (network enabled)
- Phase 2 bundles the project (network disabled, read-only mount)
- Memory and CPU are capped, containers and temp files are always removed

The bundled script and collected CSS are spliced into index.html by the
Document Assembler, exactly like the in-process path.
"""

import os
import shlex
import shutil
import tempfile
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

from pydantic import ValidationError

try:
    import docker  # type: ignore[import-not-found]
    from docker.errors import ImageNotFound  # type: ignore[import-not-found]
    DOCKER_AVAILABLE = True
except ImportError:
    DOCKER_AVAILABLE = False

from previewkit.config import (
    DEFAULT_INSTALL_TIMEOUT,
    DEFAULT_TOOLCHAIN_IMAGE,
    DEFAULT_TOOLCHAIN_TIMEOUT,
)
from previewkit.errors import MissingEntryError, RemoteUnavailableError
from previewkit.logging import get_logger
from previewkit.pipeline.assembler import assemble
from previewkit.pipeline.resolver import EntrySelection, resolve
from previewkit.schemas import (
    CompileFailure,
    CompileOutcome,
    CompileSuccess,
    Framework,
    SourceSet,
    ToolchainOutput,
)

logger = get_logger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

WORKDIR = "/app"
TOOLCHAIN_DIR = ".previewkit"
BUILD_SCRIPT = Path(__file__).parent / "scripts" / "build.mjs"

# Pinned so the build script's compiler APIs stay put.
TOOLCHAIN_PACKAGES = (
    "esbuild@0.19",
    "react@18",
    "react-dom@18",
    "vue@3.3",
    "svelte@4",
)

# Resource limits
MAX_MEMORY = "1g"  # esbuild + compilers need more than the default
MAX_CPU = 0.5


# =============================================================================
# HELPERS
# =============================================================================

def _is_safe_name(name: str) -> bool:
    path = PurePosixPath(name.replace("\\", "/"))
    parts = path.parts
    return bool(parts) and not path.is_absolute() and ".." not in parts and parts[0] != TOOLCHAIN_DIR


def write_project(files: SourceSet, target_dir: str) -> None:
    """
    Write the source set and the build script into target_dir.

    Raises:
        RemoteUnavailableError: If a file name would escape the directory
    """
    for name, record in files.items():
        if not _is_safe_name(name):
            raise RemoteUnavailableError(f"Refusing to write unsafe file name: {name}", file=name)
        full_path = os.path.join(target_dir, name)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, "w", encoding="utf-8") as f:
            f.write(record.content)

    toolchain_dir = os.path.join(target_dir, TOOLCHAIN_DIR)
    os.makedirs(toolchain_dir, exist_ok=True)
    shutil.copyfile(BUILD_SCRIPT, os.path.join(toolchain_dir, BUILD_SCRIPT.name))


def build_install_command() -> str:
    """Command that installs the compilers next to the build script."""
    packages = " ".join(TOOLCHAIN_PACKAGES)
    return f"cd {TOOLCHAIN_DIR} && npm install --silent --no-audit --no-fund {packages}"


def build_run_command(framework: Framework, entry_name: str) -> str:
    """Command that bundles the project and prints the JSON result."""
    node_path = f"{WORKDIR}/{TOOLCHAIN_DIR}/node_modules"
    return f"node {TOOLCHAIN_DIR}/{BUILD_SCRIPT.name} {framework.value} {shlex.quote(entry_name)} {node_path}"


def parse_build_output(stdout: str) -> ToolchainOutput:
    """
    Read the build script's result line.

    Raises:
        RemoteUnavailableError: If stdout carries no valid result
    """
    lines = [line for line in stdout.splitlines() if line.strip()]
    if not lines:
        raise RemoteUnavailableError("Toolchain produced no output")
    try:
        return ToolchainOutput.model_validate_json(lines[-1])
    except ValidationError:
        raise RemoteUnavailableError(f"Toolchain output is not a build result: {lines[-1][:200]}") from None


def _merge_styles(style_file: Optional[str], compiled: str) -> Optional[str]:
    if not compiled:
        return style_file
    if style_file:
        return f"{style_file}\n{compiled}"
    return compiled


# =============================================================================
# TOOLCHAIN COMPILER
# =============================================================================

class ToolchainCompiler:
    """Out-of-process compiler that runs the framework compilers in Docker."""

    def __init__(
        self,
        image: str = DEFAULT_TOOLCHAIN_IMAGE,
        build_timeout: float = DEFAULT_TOOLCHAIN_TIMEOUT,
        install_timeout: float = DEFAULT_INSTALL_TIMEOUT,
        client_factory: Optional[Callable[[], object]] = None,
    ):
        self.image = image
        self.build_timeout = build_timeout
        self.install_timeout = install_timeout
        self._client_factory = client_factory

    def compile(self, framework: Framework, files: SourceSet) -> CompileOutcome:
        """
        Build the files with the real compilers and assemble the document.

        Args:
            framework: Target framework
            files: Source set to build

        Returns:
            CompileSuccess with the finished document, or CompileFailure
        """
        if framework == Framework.VANILLA:
            return CompileFailure.of("Nothing to compile for vanilla projects", file="index.html")

        try:
            selection = resolve(framework, files)
        except MissingEntryError as e:
            return CompileFailure.of(e.message, e.file)

        try:
            output = self._run_build(framework, selection, files)
        except RemoteUnavailableError as e:
            logger.warning("Toolchain build unavailable: %s", e.message)
            return CompileFailure.of(e.message, e.file)

        if output.error is not None:
            return CompileFailure(error=output.error)

        style_file = selection.style.content if selection.style is not None else None
        document = assemble(
            selection.markup.content,
            output.script,
            _merge_styles(style_file, output.style),
            selection.markers,
        )
        return CompileSuccess(html=document)

    def _client(self):
        if self._client_factory is not None:
            return self._client_factory()
        if not DOCKER_AVAILABLE:
            raise RemoteUnavailableError("Docker Python SDK not installed. Run: pip install docker")
        return docker.from_env()

    def _run_build(self, framework: Framework, selection: EntrySelection, files: SourceSet) -> ToolchainOutput:
        """
        Run the install and build containers.

        Raises:
            RemoteUnavailableError: If Docker is missing, the install fails,
                the build times out or its output cannot be read
        """
        temp_dir = None
        install_container = None
        run_container = None

        try:
            client = self._client()
            client.ping()

            temp_dir = tempfile.mkdtemp(prefix="previewkit_")
            write_project(files, temp_dir)

            try:
                client.images.get(self.image)
            except ImageNotFound:
                client.images.pull(self.image)

            # =========================================================
            # PHASE 1: Install compilers (network ENABLED)
            # =========================================================
            install_container = client.containers.run(
                image=self.image,
                command=["sh", "-c", build_install_command()],
                working_dir=WORKDIR,
                volumes={temp_dir: {"bind": WORKDIR, "mode": "rw"}},
                mem_limit=MAX_MEMORY,
                cpu_period=100000,
                cpu_quota=int(100000 * MAX_CPU),
                network_disabled=False,
                detach=True,
                remove=False,
            )
            install_result = install_container.wait(timeout=self.install_timeout)
            if install_result.get("StatusCode", -1) != 0:
                stderr = install_container.logs(stdout=False, stderr=True).decode("utf-8", errors="replace")
                raise RemoteUnavailableError(f"Toolchain install failed: {stderr[-500:]}")

            # =========================================================
            # PHASE 2: Bundle (network DISABLED)
            # =========================================================
            run_container = client.containers.run(
                image=self.image,
                command=["sh", "-c", build_run_command(framework, selection.entry.name)],
                working_dir=WORKDIR,
                volumes={temp_dir: {"bind": WORKDIR, "mode": "ro"}},
                mem_limit=MAX_MEMORY,
                cpu_period=100000,
                cpu_quota=int(100000 * MAX_CPU),
                network_disabled=True,
                detach=True,
                remove=False,
            )
            result = run_container.wait(timeout=self.build_timeout)
            exit_code = result.get("StatusCode", -1)
            stdout = run_container.logs(stdout=True, stderr=False).decode("utf-8", errors="replace")

            try:
                output = parse_build_output(stdout)
            except RemoteUnavailableError:
                if exit_code != 0:
                    stderr = run_container.logs(stdout=False, stderr=True).decode("utf-8", errors="replace")
                    raise RemoteUnavailableError(f"Toolchain build crashed (exit {exit_code}): {stderr[-500:]}")
                raise
            return output

        except RemoteUnavailableError:
            raise

        except Exception as e:
            error_message = str(e)
            logger.exception("Toolchain build failed")

            if "timed out" in error_message.lower() or "timeout" in error_message.lower():
                raise RemoteUnavailableError("Toolchain build timed out") from e

            if "connection refused" in error_message.lower() or "docker daemon" in error_message.lower():
                raise RemoteUnavailableError("Docker is not running") from e

            raise RemoteUnavailableError(f"Toolchain build failed: {error_message[:200]}") from e

        finally:
            # Always clean up containers
            for container in [install_container, run_container]:
                if container:
                    try:
                        container.stop(timeout=1)
                    except Exception:
                        logger.debug("Container already stopped")
                    try:
                        container.remove(force=True)
                    except Exception:
                        logger.debug("Container already removed")

            if temp_dir and os.path.exists(temp_dir):
                shutil.rmtree(temp_dir, ignore_errors=True)
