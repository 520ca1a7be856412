import logging
from collections.abc import Callable, Iterable
from time import monotonic

from llm_tags.observability import names
from llm_tags.observability.base import MetricsHook, NoOpMetricsHook
from llm_tags.parsing.models import PartialSegment, Segment, TextSegment

from .catalog import Catalog
from .config import RenderConfig

logger = logging.getLogger(__name__)

Fallback = Callable[[Segment | PartialSegment, int], str]
ErrorFallback = Callable[[Exception, str], str]


class SegmentRenderer:
    """Renders segments to strings through a Catalog.

    A renderer that raises only affects its own segment: the failure is
    logged and replaced by error_fallback output, a visible marker in debug
    mode, or nothing.
    """

    def __init__(
        self,
        catalog: Catalog,
        config: RenderConfig = RenderConfig(),
        fallback: Fallback | None = None,
        error_fallback: ErrorFallback | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.catalog = catalog
        self.config = config
        self.fallback = fallback
        self.error_fallback = error_fallback
        self.metrics_hook = metrics_hook

    def render(self, segments: Iterable[Segment], streaming: bool = False) -> str:
        start = monotonic()
        output = "".join(
            self.render_segment(segment, index, streaming)
            for index, segment in enumerate(segments)
        )
        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.RENDER_DURATION, elapsed_ms)
        return output

    def render_partial(self, partial: PartialSegment, index: int = 0) -> str:
        return self.render_segment(partial, index, streaming=True)

    def render_segment(
        self,
        segment: Segment | PartialSegment,
        index: int,
        streaming: bool = False,
    ) -> str:
        try:
            return self._render_content(segment, index, streaming)
        except Exception as exc:
            logger.error(
                'Failed to render segment type "%s"', segment.type, exc_info=True
            )
            self.metrics_hook.increment(
                names.RENDER_ERRORS_TOTAL, labels={"type": segment.type}
            )
            if self.error_fallback is not None:
                return self.error_fallback(exc, segment.type)
            if self.config.debug:
                return f"[render error in <{segment.type}>: {exc}]"
            return ""

    def _render_content(
        self, segment: Segment | PartialSegment, index: int, streaming: bool
    ) -> str:
        if isinstance(segment, TextSegment):
            text_renderer = self.catalog.get_text_renderer()
            if text_renderer is not None:
                return text_renderer(segment, index=index, streaming=streaming)
            return segment.content

        renderer = self.catalog.get_renderer(segment.type)
        if renderer is not None:
            return renderer(segment, index=index, streaming=streaming)

        if self.fallback is not None:
            return self.fallback(segment, index)

        if self.config.debug:
            logger.warning('No renderer found for segment type "%s"', segment.type)
        return segment.content
