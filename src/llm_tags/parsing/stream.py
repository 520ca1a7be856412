from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator

from .models import Segment, StreamingParseResult
from .parser import TagParser


def iter_results(
    parser: TagParser, chunks: Iterable[str]
) -> Iterator[StreamingParseResult]:
    """Yield one StreamingParseResult per chunk.

    The finalizer is not called; use the state of the last result with
    parser.finalize once the source is exhausted.
    """
    state = parser.create_state()
    for chunk in chunks:
        result = parser.parse_chunk(chunk, state)
        state = result.state
        yield result


def stream_segments(parser: TagParser, chunks: Iterable[str]) -> Iterator[Segment]:
    """Yield segments as soon as they are complete, then the flushed remainder."""
    state = parser.create_state()
    for chunk in chunks:
        result = parser.parse_chunk(chunk, state)
        state = result.state
        yield from result.segments
    yield from parser.finalize(state)


async def astream_segments(
    parser: TagParser, chunks: AsyncIterable[str]
) -> AsyncIterator[Segment]:
    """Async counterpart of stream_segments, e.g. for LLM token streams."""
    state = parser.create_state()
    async for chunk in chunks:
        result = parser.parse_chunk(chunk, state)
        state = result.state
        for segment in result.segments:
            yield segment
    for segment in parser.finalize(state):
        yield segment
