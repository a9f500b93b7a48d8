"""Custom selector grammar.

A custom selector describes a target element as ``tag;key=value;key=value``.
The leading tag is optional and every other segment is an attribute. Only the
keys in AttributeKey are consulted when resolving a locator; any other key is
kept in ``unrecognized`` and otherwise ignored.

Example:
    >>> parsed = parse_selector("button;data-testid=submit;text=Save")
    >>> parsed.tag_hint
    'button'
    >>> parsed.get(AttributeKey.DATA_TESTID)
    'submit'
"""

from dataclasses import dataclass, field
from enum import Enum

SEGMENT_SEPARATOR = ";"
KEY_VALUE_SEPARATOR = "="


class AttributeKey(Enum):
    """Attribute keys understood by the resolution engine."""

    CLOSEST_ID = "closestId"
    ID = "id"
    DATA_TESTID = "data-testid"
    DATA_CY = "data-cy"
    DATA_QA = "data-qa"
    ROLE = "role"
    TEXT = "text"
    ARIA_LABEL = "aria-label"
    NAME = "name"
    CLASSES = "classes"

    @classmethod
    def lookup(cls, key: str) -> "AttributeKey | None":
        """Return the member whose value is exactly ``key``, if any."""
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass
class ParsedSelector:
    """Result of parsing a custom selector string.

    Attributes:
        tag_hint: Element tag name taken from a leading segment without ``=``.
        attributes: Every ``key=value`` segment, last write wins.
        recognized: Recognized keys with non-empty values.
        unrecognized: Keys the resolution engine never consults.
    """

    tag_hint: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    recognized: dict[AttributeKey, str] = field(init=False, default_factory=dict)
    unrecognized: dict[str, str] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        for key, value in self.attributes.items():
            member = AttributeKey.lookup(key)
            if member is None:
                self.unrecognized[key] = value
            elif value:
                self.recognized[member] = value

    def get(self, key: AttributeKey) -> str | None:
        """Return the value for a recognized key, or None if absent or empty."""
        return self.recognized.get(key)

    def has(self, key: AttributeKey) -> bool:
        return key in self.recognized

    @property
    def is_empty(self) -> bool:
        """True when neither a tag nor any attribute was parsed."""
        return self.tag_hint is None and not self.attributes


def parse_selector(raw: str | None) -> ParsedSelector:
    """Parse a custom selector string.

    Never raises: empty or malformed input yields an empty ParsedSelector.

    Args:
        raw: Selector in ``tag;key=value;...`` form.

    Returns:
        The parsed selector.
    """
    if not raw:
        return ParsedSelector()

    segments = [s.strip() for s in str(raw).split(SEGMENT_SEPARATOR)]
    segments = [s for s in segments if s]

    tag_hint = None
    if segments and KEY_VALUE_SEPARATOR not in segments[0]:
        tag_hint = segments.pop(0)

    attributes: dict[str, str] = {}
    for segment in segments:
        key, sep, value = segment.partition(KEY_VALUE_SEPARATOR)
        key = key.strip()
        # A leading '=' means an empty key; the segment is dropped.
        if not sep or not key:
            continue
        attributes[key] = value.strip()

    return ParsedSelector(tag_hint=tag_hint, attributes=attributes)
