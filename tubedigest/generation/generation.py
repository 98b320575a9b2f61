"""Claude-powered generation of summaries, key points and outlines.

Short transcripts are sent in one call. Long ones are chunked, every chunk
is generated concurrently, and the per-chunk outputs are merged by a final
call whose prompt comes from :func:`create_merge_prompt`.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace
from typing import Any

from anthropic import Anthropic, APIError
from anthropic.types import TextBlock

from tubedigest.config import settings
from tubedigest.errors import GenerationError
from tubedigest.generation.chunking import (
    TranscriptChunk,
    chunk_context_prefix,
    chunk_transcript,
    needs_chunking,
)
from tubedigest.generation.merge import create_merge_prompt
from tubedigest.generation.prompts import get_prompt
from tubedigest.pipeline_config import OutputKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    """One text-in/text-out model call."""

    system: str
    prompt: str
    max_tokens: int
    temperature: float | None = None


def get_anthropic_client() -> Anthropic:
    return Anthropic(api_key=settings.anthropic_api_key)


def _message_kwargs(request: GenerationRequest) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "model": settings.llm_model,
        "max_tokens": request.max_tokens,
        "system": request.system,
        "messages": [{"role": "user", "content": request.prompt}],
    }
    if request.temperature is not None:
        kwargs["temperature"] = request.temperature
    return kwargs


def generate_text(request: GenerationRequest, client: Anthropic | None = None) -> str:
    """Run *request* and return the full response text (blocking mode)."""
    client = client or get_anthropic_client()
    try:
        response = client.messages.create(**_message_kwargs(request))
    except APIError as exc:
        raise GenerationError(f"LLM unavailable: {exc.message}") from exc

    text = "".join(block.text for block in response.content if isinstance(block, TextBlock))
    if not text:
        raise GenerationError("Model returned no text")
    return text


def stream_text(request: GenerationRequest, client: Anthropic | None = None) -> Iterator[str]:
    """Run *request* and yield text deltas as they arrive (streaming mode)."""
    client = client or get_anthropic_client()
    try:
        with client.messages.stream(**_message_kwargs(request)) as stream:
            yield from stream.text_stream
    except APIError as exc:
        raise GenerationError(f"LLM unavailable: {exc.message}") from exc


def open_stream(request: GenerationRequest, client: Anthropic | None = None) -> Iterator[str]:
    """Start streaming *request* and return an iterator over its text deltas.

    The first delta is read before returning, so a failing model call raises
    ``GenerationError`` here instead of part-way through a response body.
    """
    deltas = stream_text(request, client)
    try:
        first = next(deltas)
    except StopIteration:
        raise GenerationError("Model returned no text") from None
    return itertools.chain([first], deltas)


def build_request(transcript: str, title: str, kind: OutputKind | str) -> GenerationRequest:
    """The single-call request for a transcript that needs no chunking."""
    template = get_prompt(kind)
    return GenerationRequest(
        system=template.system,
        prompt=template.render(title, transcript),
        max_tokens=template.max_tokens,
        temperature=template.temperature,
    )


async def generate_chunk_outputs(
    chunks: list[TranscriptChunk],
    title: str,
    kind: OutputKind | str,
    client: Anthropic | None = None,
) -> list[str]:
    """Generate every chunk concurrently and return outputs ordered by chunk index.

    The calls run under one ``asyncio.TaskGroup``: if any chunk fails the
    remaining ones are cancelled and a ``GenerationError`` is raised, since a
    partial merge is not useful.
    """
    client = client or get_anthropic_client()
    requests: dict[int, GenerationRequest] = {}
    for chunk in chunks:
        request = build_request(chunk.text, title, kind)
        requests[chunk.index] = replace(request, prompt=chunk_context_prefix(chunk) + request.prompt)

    try:
        async with asyncio.TaskGroup() as tg:
            tasks = {
                index: tg.create_task(asyncio.to_thread(generate_text, request, client))
                for index, request in requests.items()
            }
    except ExceptionGroup as group:
        first = group.exceptions[0]
        raise GenerationError(f"Chunk generation failed: {first}") from group

    return [tasks[index].result() for index in sorted(tasks)]


async def prepare_generation(
    transcript: str,
    title: str,
    kind: OutputKind | str,
    client: Anthropic | None = None,
) -> GenerationRequest:
    """Return the request for the final, user-facing call.

    For long transcripts this first runs the per-chunk pass and returns the
    merge request; otherwise it is the plain single-call request.
    """
    if not needs_chunking(transcript):
        return build_request(transcript, title, kind)

    chunks = chunk_transcript(transcript)
    logger.info("Transcript for %r split into %d chunks", title, len(chunks))
    outputs = await generate_chunk_outputs(chunks, title, kind, client)

    template = get_prompt(kind)
    return GenerationRequest(
        system=template.system,
        prompt=create_merge_prompt(outputs, title, kind),
        max_tokens=template.max_tokens,
        temperature=template.temperature,
    )
