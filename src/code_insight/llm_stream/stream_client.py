#!/usr/bin/env python3
"""
Chat-Completion Stream Client

Issues one streaming chat-completion request over httpx and yields the
incremental text fragments as they arrive.

Architectural Decision: raw httpx instead of a vendor SDK
- Any OpenAI-compatible endpoint works, configured by URL alone
- The response body is decoded incrementally by SSELineDecoder
- Cancellation tears down the connection through the asyncio task

Error mapping:
- Non-success status → HttpStatusError (status code + body text)
- Transport failure → NetworkError
- Token cancelled → AbortError

Author: System Architect
Date: 2026-03-04
"""

from collections.abc import AsyncGenerator

import httpx

from code_insight.core.config.constants import CHAT_ROLE_USER, HEADER_AUTHORIZATION, Stage
from code_insight.core.exceptions import HttpStatusError, NetworkError
from code_insight.core.logging import get_logger, log_stage
from code_insight.llm_stream.cancellation import CancellationToken
from code_insight.llm_stream.sse_decoder import SSELineDecoder

logger = get_logger(__name__)


def build_request_body(model: str, prompt: str) -> dict:
    """Chat-completion body: one user message, streaming on."""
    return {
        "model": model,
        "messages": [{"role": CHAT_ROLE_USER, "content": prompt}],
        "stream": True,
    }


class StreamClient:
    """
    Streaming chat-completion client.

    STAGE-4: LLM streaming

    Owns an httpx.AsyncClient unless one is injected (tests pass a client
    backed by httpx.MockTransport).

    Usage:
        client = StreamClient(connect_timeout=10.0)
        async for fragment in client.stream_completion(endpoint, key, model, prompt, token):
            ...
        await client.aclose()
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        connect_timeout: float = 10.0,
    ):
        # Read timeout is unbounded: generation pauses can be long
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(None, connect=connect_timeout)
        )
        self._owns_client = http_client is None

    async def aclose(self) -> None:
        """Close the underlying client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def stream_completion(
        self,
        endpoint: str,
        api_key: str,
        model: str,
        prompt: str,
        token: CancellationToken,
    ) -> AsyncGenerator[str, None]:
        """
        Stream one completion.

        STAGE-4.1: Request issue and incremental decode

        Args:
            endpoint: Chat-completion URL
            api_key: Bearer credential
            model: Model name
            prompt: Fully rendered prompt
            token: Cancellation token; cancelling it aborts the request

        Yields:
            Non-empty text fragments in arrival order

        Raises:
            AbortError: Token cancelled before or during the stream
            HttpStatusError: Endpoint answered with a non-success status
            NetworkError: Transport-level failure
        """
        headers = {HEADER_AUTHORIZATION: f"Bearer {api_key}"}
        body = build_request_body(model, prompt)

        log_stage(
            logger,
            Stage.LLM_STREAMING,
            "Starting stream",
            level="debug",
            model=model,
            prompt_length=len(prompt),
        )

        fragment_count = 0
        with token.bind():
            try:
                async with self._client.stream("POST", endpoint, json=body, headers=headers) as response:
                    if not response.is_success:
                        raise await self._status_error(response)

                    decoder = SSELineDecoder()
                    async for text in response.aiter_text():
                        for fragment in decoder.feed(text):
                            token.raise_if_cancelled()
                            fragment_count += 1
                            yield fragment

                    for fragment in decoder.flush():
                        token.raise_if_cancelled()
                        fragment_count += 1
                        yield fragment

            except httpx.TransportError as e:
                raise NetworkError.from_exception(
                    e,
                    message=f"Network error: {e}",
                    endpoint=endpoint,
                ) from e

        log_stage(
            logger,
            Stage.LLM_STREAMING,
            "Stream completed",
            level="debug",
            fragment_count=fragment_count,
            skipped_records=decoder.skipped_records,
        )

    @staticmethod
    async def _status_error(response: httpx.Response) -> HttpStatusError:
        """Build an HttpStatusError carrying whatever body text is readable."""
        try:
            await response.aread()
            body = response.text
        except httpx.HTTPError:
            body = None

        message = f"HTTP {response.status_code}: {response.reason_phrase}"
        if body:
            message = f"{message} - {body}"
        return HttpStatusError(message, status_code=response.status_code, body=body)
