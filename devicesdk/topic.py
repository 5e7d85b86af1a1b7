"""Split an MQTT topic into realm, device, interface and path."""

from __future__ import annotations

import logging
from typing import NamedTuple

_log = logging.getLogger(__name__)


class TopicError(Exception):
    """A topic could not be parsed."""

    def __init__(self, message: str, topic: str = "") -> None:
        super().__init__(message)
        self.topic = topic


class EmptyTopicError(TopicError):
    """The topic is empty."""

    def __init__(self) -> None:
        super().__init__("topic is empty", "")


class MalformedTopicError(TopicError):
    """The topic is not of the form ``<realm>/<device_id>/<interface>/<path>``."""

    def __init__(self, topic: str) -> None:
        super().__init__(
            "the topic should be in the form <realm>/<device_id>/<interface>/<path>, "
            f"received: {topic}",
            topic,
        )


class ParsedTopic(NamedTuple):
    """The components of a topic; ``path`` keeps its leading slash."""

    realm: str
    device: str
    interface: str
    path: str


def parse_topic(topic: str) -> ParsedTopic:
    """Parse ``<realm>/<device_id>/<interface>/<path>`` into its parts."""
    if not topic:
        raise EmptyTopicError()

    parts = topic.split("/", 2)
    if len(parts) < 3:
        raise MalformedTopicError(topic)
    realm, device, rest = parts
    _log.debug("realm: %s, device: %s, rest: %s", realm, device, rest)

    interface, slash, tail = rest.partition("/")
    if not slash:
        raise MalformedTopicError(topic)
    path = slash + tail
    _log.debug("interface: %s, path: %s", interface, path)

    if not interface:
        raise MalformedTopicError(topic)

    return ParsedTopic(realm, device, interface, path)