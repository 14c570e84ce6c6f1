"""
Sandbox module for building previews with the real framework compilers in
isolated Docker containers.

Components:
- toolchain: install compilers, bundle the project, assemble the document
- scripts/build.mjs: the Node build script run inside the container
"""

from previewkit.sandbox.toolchain import (
    DOCKER_AVAILABLE,
    ToolchainCompiler,
    build_install_command,
    build_run_command,
    parse_build_output,
    write_project,
)

__all__ = [
    # Compiler
    "DOCKER_AVAILABLE",
    "ToolchainCompiler",
    # Helpers
    "build_install_command",
    "build_run_command",
    "parse_build_output",
    "write_project",
]
