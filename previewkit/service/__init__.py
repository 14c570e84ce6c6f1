"""
Compile service: HTTP endpoint in front of the toolchain compiler, and the
client the live preview uses to reach it.
"""

from previewkit.service.app import create_app
from previewkit.service.client import COMPILE_PATH, RemoteCompiler, request_payload

__all__ = [
    # Server
    "create_app",
    # Client
    "COMPILE_PATH",
    "RemoteCompiler",
    "request_payload",
]
