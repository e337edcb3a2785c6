"""
LLM Stream Layer

Streaming chat-completion transport: cancellation tokens, incremental SSE
decoding, prompt rendering and the httpx stream client.
"""

from code_insight.llm_stream.cancellation import CancellationToken
from code_insight.llm_stream.prompt_renderer import render_prompt
from code_insight.llm_stream.sse_decoder import SSELineDecoder, extract_delta, parse_record
from code_insight.llm_stream.stream_client import StreamClient, build_request_body

__all__ = [
    "CancellationToken",
    "render_prompt",
    "SSELineDecoder",
    "extract_delta",
    "parse_record",
    "StreamClient",
    "build_request_body",
]
