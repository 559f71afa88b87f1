"""Build and publish hearing event messages.

:class:`MessagePublisher` turns a :class:`~hearing_relay.models.HearingEvent`
into one pub/sub message: the whole event encoded as JSON plus a
``messageType`` routing attribute chosen by the event kind. Delivery is
delegated to a :class:`~hearing_relay.publishing.protocol.PublishTransport`;
there are no retries at this layer.

Usage
-----
>>> publisher = MessagePublisher(transport, topic=topic_arn)
>>> receipt = await publisher.publish(EventKind.UPDATE, event)
>>> receipt.message_type
'COMMON_PLATFORM_HEARING'

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec

from hearing_relay.errors import PublishError, UnsupportedEventKindError
from hearing_relay.logging import get_logger, log_info
from hearing_relay.models import EventKind
from hearing_relay.publishing.protocol import MESSAGE_TYPE_ATTRIBUTE, MessageAttribute

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from hearing_relay.models import HearingEvent
    from hearing_relay.publishing.protocol import PublishReceipt, PublishTransport

logger = get_logger(__name__)

# Deletions have no publish contract yet, so DELETE has no token.
MESSAGE_TYPES: typ.Final[cabc.Mapping[EventKind, str]] = {
    EventKind.UPDATE: "COMMON_PLATFORM_HEARING",
    EventKind.RESULT: "COMMON_PLATFORM_HEARING_RESULT",
}


def message_type_for(kind: EventKind) -> str:
    """Return the ``messageType`` token for ``kind``.

    Raises
    ------
    UnsupportedEventKindError
        If ``kind`` has no publish contract.

    """
    try:
        return MESSAGE_TYPES[kind]
    except KeyError as exc:
        raise UnsupportedEventKindError(kind) from exc


def encode_event(event: HearingEvent) -> str:
    """Encode the full event as JSON text using its wire field names."""
    return msgspec.json.encode(event).decode("utf-8")


@dc.dataclass(frozen=True, slots=True)
class OutboundMessage:
    """Encoded body and routing attributes for one publish call."""

    body: str
    attributes: cabc.Mapping[str, MessageAttribute]

    @property
    def message_type(self) -> str:
        """Return the ``messageType`` attribute value."""
        return self.attributes[MESSAGE_TYPE_ATTRIBUTE].value


class MessagePublisher:
    """Publish hearing events to a single configured topic.

    Parameters
    ----------
    transport
        Adapter that delivers the encoded message.
    topic
        Topic identifier every message is published to.

    """

    def __init__(self, transport: PublishTransport, *, topic: str) -> None:
        """Store the transport and destination topic."""
        self._transport = transport
        self._topic = topic

    @property
    def topic(self) -> str:
        """Return the destination topic."""
        return self._topic

    def build_message(self, kind: EventKind, event: HearingEvent) -> OutboundMessage:
        """Encode ``event`` and attach the routing attribute for ``kind``."""
        attributes = {MESSAGE_TYPE_ATTRIBUTE: MessageAttribute(message_type_for(kind))}
        return OutboundMessage(body=encode_event(event), attributes=attributes)

    async def publish(self, kind: EventKind, event: HearingEvent) -> PublishReceipt:
        """Publish ``event`` once to the configured topic.

        Parameters
        ----------
        kind
            Lifecycle kind; selects the ``messageType`` attribute.
        event
            Event to publish in full.

        Returns
        -------
        PublishReceipt
            Receipt reported by the transport.

        Raises
        ------
        PublishError
            If the transport fails for any reason.
        UnsupportedEventKindError
            If ``kind`` has no publish contract.

        """
        message = self.build_message(kind, event)
        try:
            receipt = await self._transport.publish(
                self._topic, message.body, message.attributes
            )
        except PublishError:
            raise
        except Exception as exc:
            msg = f"transport failed to publish to {self._topic}: {exc}"
            raise PublishError(msg, topic=self._topic) from exc

        log_info(
            logger,
            "Published hearing %s to %s as %s (message_id=%s)",
            event.hearing.id,
            self._topic,
            message.message_type,
            receipt.message_id,
        )
        return receipt


__all__ = [
    "MESSAGE_TYPES",
    "MESSAGE_TYPE_ATTRIBUTE",
    "MessagePublisher",
    "OutboundMessage",
    "encode_event",
    "message_type_for",
]
