"""
Stream Test Factory

Scripted stand-ins for the chat-completion stream client and helpers for
building fake endpoint responses.
"""

import asyncio

import httpx
import orjson

from code_insight.llm_stream.cancellation import CancellationToken


class ScriptedStream:
    """
    One stream the test drives by hand.

    push() delivers fragments, finish() ends the stream normally and
    fail() raises the given error from inside the stream.
    """

    def __init__(self, endpoint: str, api_key: str, model: str, prompt: str, token: CancellationToken):
        self.endpoint = endpoint
        self.api_key = api_key
        self.model = model
        self.prompt = prompt
        self.token = token
        self._events: asyncio.Queue = asyncio.Queue()

    def push(self, *fragments: str) -> None:
        for fragment in fragments:
            self._events.put_nowait(("data", fragment))

    def finish(self) -> None:
        self._events.put_nowait(("end", None))

    def fail(self, error: Exception) -> None:
        self._events.put_nowait(("error", error))

    async def next_event(self):
        return await self._events.get()


class ScriptedStreamClient:
    """
    Drop-in for StreamClient.

    Honors the cancellation token exactly like the real client: the token
    is bound to the running task, so cancelling it aborts the pending wait.
    """

    def __init__(self):
        self.streams: list[ScriptedStream] = []

    async def stream_completion(self, endpoint, api_key, model, prompt, token):
        stream = ScriptedStream(endpoint, api_key, model, prompt, token)
        self.streams.append(stream)
        with token.bind():
            while True:
                kind, value = await stream.next_event()
                if kind == "data":
                    token.raise_if_cancelled()
                    yield value
                elif kind == "end":
                    return
                else:
                    raise value

    def latest(self, prompt_prefix: str) -> ScriptedStream:
        """Most recent stream whose prompt starts with the prefix."""
        for stream in reversed(self.streams):
            if stream.prompt.startswith(prompt_prefix):
                return stream
        raise AssertionError(f"No stream started for prompt prefix {prompt_prefix!r}")

    def count(self, prompt_prefix: str = "") -> int:
        return sum(1 for stream in self.streams if stream.prompt.startswith(prompt_prefix))

    async def aclose(self) -> None:
        pass


def sse_body(*fragments: str, done: bool = True) -> bytes:
    """Encode fragments as a chat-completion SSE body."""
    lines = [
        "data: " + orjson.dumps({"choices": [{"delta": {"content": fragment}}]}).decode()
        for fragment in fragments
    ]
    if done:
        lines.append("data: [DONE]")
    return ("\n\n".join(lines) + "\n\n").encode()


def mock_http_client(handler) -> httpx.AsyncClient:
    """httpx client whose requests are answered by ``handler(request)``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
