"""Decoding of the four named entities the tag syntax supports.

Only ``&lt;``, ``&gt;``, ``&amp;`` and ``&quot;`` are recognized. Numeric
references and every other named entity pass through unchanged.
"""

import re

ENTITIES: dict[str, str] = {
    "&lt;": "<",
    "&gt;": ">",
    "&amp;": "&",
    "&quot;": '"',
}

_ENTITY_PATTERN = re.compile("|".join(re.escape(entity) for entity in ENTITIES))
_MAX_PREFIX_LEN = max(len(entity) for entity in ENTITIES) - 1


def decode_entities(text: str) -> str:
    """Decode entities in a single left-to-right pass.

    Decoded output is never rescanned, so ``&amp;lt;`` becomes ``&lt;``.
    """
    if "&" not in text:
        return text
    return _ENTITY_PATTERN.sub(lambda match: ENTITIES[match.group(0)], text)


def partial_entity_start(text: str) -> int:
    """Return the index of a trailing incomplete entity in ``text``, or -1.

    ``"AT&am"`` returns 2 because ``&am`` may still become ``&amp;`` once
    more input arrives.
    """
    index = text.rfind("&", max(0, len(text) - _MAX_PREFIX_LEN))
    if index == -1:
        return -1

    tail = text[index:]
    for entity in ENTITIES:
        if len(tail) < len(entity) and entity.startswith(tail):
            return index
    return -1
