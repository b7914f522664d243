"""Client for the local Ollama inference API.

Only the parts needed for tag generation are covered: text generation
through /api/generate and model listing through /api/tags.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any

import httpx

from projets_indexer.config import (
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OLLAMA_TIMEOUT,
    DEFAULT_OLLAMA_URL,
)
from projets_indexer.errors import EnrichmentError

logger = logging.getLogger(__name__)


class OllamaError(EnrichmentError):
    """Base class for Ollama client errors."""


class OllamaConnectionError(OllamaError):
    """The Ollama service could not be reached."""


class OllamaTimeoutError(OllamaError):
    """The Ollama service did not answer in time."""


class OllamaResponseError(OllamaError):
    """The Ollama service answered with an error or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None):
        if status_code is not None:
            message = f"{message} (status code: {status_code})"
        super().__init__(message)
        self.status_code = status_code


@dataclass
class GenerateOptions:
    """Sampling parameters passed through to the model."""

    temperature: float = 0.7
    num_predict: int = 100


@dataclass
class GenerateRequest:
    """Request body for /api/generate."""

    model: str
    prompt: str
    system: str | None = None
    options: GenerateOptions = field(default_factory=GenerateOptions)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "prompt": self.prompt,
            "stream": False,
            "options": asdict(self.options),
        }
        if self.system:
            payload["system"] = self.system
        return payload


@dataclass
class GenerateResponse:
    """The parts of a /api/generate answer we use."""

    model: str
    response: str
    done: bool = True


class OllamaClient:
    """Synchronous Ollama API client.

    The underlying httpx.Client is shared, so one instance can serve every
    worker thread of an indexing run.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_URL,
        model: str = DEFAULT_OLLAMA_MODEL,
        timeout: float = DEFAULT_OLLAMA_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Ollama endpoint, e.g. http://localhost:11434
            model: Model used by complete()
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "OllamaClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP connection pool."""
        self._client.close()

    def _request(self, method: str, url: str, **kwargs) -> Any:
        """Send a request and return the decoded JSON body."""
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise OllamaTimeoutError(
                f"Ollama request to {url} timed out after {self.timeout}s"
            ) from e
        except httpx.RequestError as e:
            raise OllamaConnectionError(
                f"Failed to connect to Ollama at {self.base_url}: {e}"
            ) from e

        if not response.is_success:
            raise OllamaResponseError(
                f"Ollama returned an error: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise OllamaResponseError(f"Ollama returned invalid JSON: {e}") from e

    def generate(self, request: GenerateRequest) -> GenerateResponse:
        """Run a non-streaming generation.

        Raises:
            OllamaError: On connection failure, timeout, error status or an
                unusable body.
        """
        data = self._request("POST", "/api/generate", json=request.to_payload())
        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise OllamaResponseError("Ollama response has no 'response' text")

        return GenerateResponse(
            model=str(data.get("model", request.model)),
            response=data["response"],
            done=bool(data.get("done", True)),
        )

    def complete(self, prompt: str, system: str | None = None) -> str:
        """Return the completion text for a prompt using the configured model."""
        request = GenerateRequest(model=self.model, prompt=prompt, system=system)
        return self.generate(request).response

    def list_models(self) -> list[str]:
        """List the names of the models pulled into the local Ollama."""
        data = self._request("GET", "/api/tags")
        if not isinstance(data, dict) or not isinstance(data.get("models"), list):
            raise OllamaResponseError("Ollama model list is malformed")
        return [
            str(m["name"])
            for m in data["models"]
            if isinstance(m, dict) and "name" in m
        ]

    def has_model(self, name: str | None = None) -> bool:
        """Check whether a model (default: the configured one) is available."""
        name = name or self.model
        wanted = {name, name.removesuffix(":latest")}
        if ":" not in name:
            wanted.add(f"{name}:latest")
        return any(model in wanted for model in self.list_models())

    def check_availability(self) -> bool:
        """Return True when the Ollama service answers. Never raises."""
        try:
            self._request("GET", "/api/tags")
        except OllamaError as e:
            logger.debug("Ollama availability check failed: %s", e)
            return False
        return True
