"""Generation service - ordered fallback across generation backends."""

import logging
from typing import Optional

from ..errors import AllBackendsFailed, InvalidParameter, ProviderError, ProviderUnavailable
from ..models.generation import (
    FALLBACK_STRATEGY,
    BackendName,
    GenerationOptions,
    GenerationResult,
)
from ..protocols.llm import GenerationBackendProtocol

logger = logging.getLogger(__name__)


class GenerationRouter:
    """Try generation backends in priority order, first success wins."""

    def __init__(self, backends: list[GenerationBackendProtocol]):
        """Initialize router.

        Args:
            backends: Backends in fallback priority order.
        """
        self._backends = list(backends)

    @property
    def backends(self) -> list[GenerationBackendProtocol]:
        return list(self._backends)

    def available_backends(self) -> list[BackendName]:
        """Names of configured backends, in priority order."""
        return [b.name for b in self._backends if b.is_configured()]

    def _backend(self, name: BackendName) -> GenerationBackendProtocol:
        for backend in self._backends:
            if backend.name == name:
                return backend
        raise ProviderUnavailable(f"Backend {name.value} is not registered")

    async def _generate_with(
        self,
        backend: GenerationBackendProtocol,
        prompt: str,
        options: GenerationOptions,
    ) -> GenerationResult:
        if not backend.is_configured():
            raise ProviderUnavailable(f"Backend {backend.name.value} is not configured")

        text = await backend.generate(
            prompt,
            temperature=options.temperature,
            max_tokens=options.max_tokens,
        )
        if not text or not text.strip():
            raise ProviderError(f"Empty response from {backend.name.value}")

        return GenerationResult(text=text, backend=backend.name)

    async def generate(
        self, prompt: str, options: Optional[GenerationOptions] = None
    ) -> GenerationResult:
        """Generate a response.

        With a preferred model (or a strategy naming one backend) only that
        backend is tried and its error propagates. With the "fallback"
        strategy configured backends are tried in order.

        Args:
            prompt: Full prompt text.
            options: Backend selection and sampling options.

        Returns:
            Result of the first successful backend.

        Raises:
            AllBackendsFailed: If every attempted backend failed.
            InvalidParameter: If the preferred model or strategy names no
                known backend.
        """
        options = options or GenerationOptions()

        if options.preferred_model is not None:
            try:
                name = BackendName(options.preferred_model)
            except ValueError:
                raise InvalidParameter(
                    f"Unknown preferred model: {options.preferred_model}"
                ) from None
            backend = self._backend(name)
            return await self._generate_with(backend, prompt, options)

        if options.strategy != FALLBACK_STRATEGY:
            try:
                name = BackendName(options.strategy)
            except ValueError:
                raise InvalidParameter(
                    f"Unknown generation strategy: {options.strategy}"
                ) from None
            return await self._generate_with(self._backend(name), prompt, options)

        attempts: list[GenerationResult] = []
        for backend in self._backends:
            if not backend.is_configured():
                continue

            try:
                result = await self._generate_with(backend, prompt, options)
            except Exception as e:
                logger.warning(f"Backend {backend.name.value} failed, trying next: {e}")
                attempts.append(GenerationResult(text="", backend=backend.name, error=e))
                continue

            logger.info(f"Generated response with {backend.name.value}")
            return result

        raise AllBackendsFailed(attempts)
