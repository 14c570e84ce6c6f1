"""
HTTP client for the compile service.

Used by the live preview as its out-of-process compiler. Every problem on the
way (connection refused, timeout, error status, body that is not a compile
outcome) comes back as a CompileFailure so the caller can fall back.
"""

from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from previewkit.config import DEFAULT_COMPILER_TIMEOUT
from previewkit.errors import RemoteUnavailableError
from previewkit.logging import get_logger
from previewkit.schemas import (
    CompileFailure,
    CompileOutcome,
    Framework,
    SourceSet,
    compile_outcome_adapter,
)

logger = get_logger(__name__)

COMPILE_PATH = "/api/compile"


def request_payload(framework: Framework, files: SourceSet) -> Dict[str, Any]:
    """Serialize a build request into the compile endpoint's JSON body."""
    return {
        "framework": framework.value,
        "files": {name: record.model_dump(mode="json") for name, record in files.items()},
    }


class RemoteCompiler:
    """Out-of-process compiler reached over HTTP."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_COMPILER_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def compile(self, framework: Framework, files: SourceSet) -> CompileOutcome:
        """
        Ask the compile service to build the files.

        Args:
            framework: Target framework
            files: Source set to build

        Returns:
            The service's outcome, or a CompileFailure describing why there is none
        """
        try:
            body = self._post(request_payload(framework, files))
        except RemoteUnavailableError as e:
            logger.warning("Compile service unavailable: %s", e.message)
            return CompileFailure.of(e.message, e.file)

        try:
            return compile_outcome_adapter.validate_python(body)
        except ValidationError:
            logger.warning("Compile service returned a malformed payload")
            return CompileFailure.of("Compile service returned a malformed payload")

    def _post(self, payload: Dict[str, Any]) -> Any:
        url = f"{self.base_url}{COMPILE_PATH}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(url, json=payload)
        except httpx.TimeoutException:
            raise RemoteUnavailableError(f"Compile service timed out after {self.timeout:g}s") from None
        except httpx.HTTPError as e:
            raise RemoteUnavailableError(f"Compile service unreachable: {e}") from e

        if response.is_error:
            raise RemoteUnavailableError(
                f"Server compilation failed: {response.status_code} {response.reason_phrase}"
            )

        try:
            return response.json()
        except ValueError:
            raise RemoteUnavailableError("Compile service returned a non-JSON body") from None
