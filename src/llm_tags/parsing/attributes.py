import re

from .entities import decode_entities

# key="value" or key='value'; each quote style only ends at its own quote
_ATTRIBUTE_PATTERN = re.compile(
    r"""(?<![\w-])([A-Za-z_][\w-]*)=(?:"([^"]*)"|'([^']*)')"""
)


def parse_attributes(attr_string: str) -> dict[str, str]:
    """Extract quoted attribute pairs from the raw text of an opening tag.

    Fragments that are not ``key="value"`` or ``key='value'`` are skipped.
    Keys are lower-cased like tag names. When a key repeats, the last
    occurrence wins.
    """
    attributes: dict[str, str] = {}
    if not attr_string:
        return attributes

    for match in _ATTRIBUTE_PATTERN.finditer(attr_string):
        key, double_quoted, single_quoted = match.groups()
        value = double_quoted if double_quoted is not None else single_quoted
        attributes[key.lower()] = decode_entities(value)
    return attributes
