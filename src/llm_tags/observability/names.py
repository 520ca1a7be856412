# src/llm_tags/observability/names.py

"""Standard metric names for llm-tags observability.

Use these constants instead of hardcoded strings for consistency
across the codebase.

Note: All duration metrics are in milliseconds by convention.
"""

# ============================================================================
# Parsing Metrics
# ============================================================================

# Duration
PARSE_DURATION = "parse_duration"
PARSE_CHUNK_DURATION = "parse_chunk_duration"

# Counters
PARSE_SEGMENTS_TOTAL = "parse_segments_total"
STREAM_CHUNKS_TOTAL = "stream_chunks_total"

# Gauges
STREAM_BUFFERED_CHARS = "stream_buffered_chars"


# ============================================================================
# Attribute Validation Metrics
# ============================================================================

# Counters (schema rejected the attributes, raw strings were kept)
ATTRIBUTE_FALLBACKS_TOTAL = "attribute_fallbacks_total"


# ============================================================================
# Rendering Metrics
# ============================================================================

# Duration
RENDER_DURATION = "render_duration"

# Counters
RENDER_ERRORS_TOTAL = "render_errors_total"
