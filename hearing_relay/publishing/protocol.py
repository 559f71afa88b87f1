"""PublishTransport protocol for delivering encoded messages to a topic.

This module defines the port between the message publisher, which decides
what a message looks like, and the adapter that moves bytes to a pub/sub
service. Adapters report every delivery failure as
:class:`~hearing_relay.errors.PublishError`.

Usage
-----
Type-check a concrete adapter:

>>> from hearing_relay.publishing.sns import SnsPublishTransport
>>> isinstance(SnsPublishTransport(client), PublishTransport)
True

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from hearing_relay.models import EventKind, HearingEvent

STRING_DATA_TYPE = "String"
MESSAGE_TYPE_ATTRIBUTE = "messageType"


@dc.dataclass(frozen=True, slots=True)
class MessageAttribute:
    """Typed routing attribute attached to a published message.

    Attributes
    ----------
    value
        Attribute value.
    data_type
        Declared attribute type; routing attributes are always strings.

    """

    value: str
    data_type: str = STRING_DATA_TYPE


@dc.dataclass(frozen=True, slots=True)
class PublishReceipt:
    """Acknowledgement returned once the transport accepted a message.

    Attributes
    ----------
    message_id
        Identifier assigned by the pub/sub service.
    topic
        Topic the message was published to.
    message_type
        Value of the ``messageType`` attribute, when one was attached.

    """

    message_id: str
    topic: str
    message_type: str | None = None


@typ.runtime_checkable
class PublishTransport(typ.Protocol):
    """Protocol for publishing one encoded message to a topic."""

    async def publish(
        self,
        topic: str,
        body: str,
        attributes: cabc.Mapping[str, MessageAttribute],
    ) -> PublishReceipt:
        """Publish ``body`` with ``attributes`` to ``topic``.

        Parameters
        ----------
        topic
            Topic identifier (an SNS topic ARN for the SNS adapter).
        body
            Encoded message body.
        attributes
            Routing attributes keyed by name.

        Returns
        -------
        PublishReceipt
            Receipt for the accepted message.

        Raises
        ------
        PublishError
            If the service rejects the message or cannot be reached.

        """
        ...


@typ.runtime_checkable
class HearingEventPublisher(typ.Protocol):
    """Protocol for the component that relays whole hearing events.

    :class:`~hearing_relay.publishing.publisher.MessagePublisher` is the
    production implementation; the relay service depends only on this
    method.
    """

    async def publish(self, kind: EventKind, event: HearingEvent) -> PublishReceipt:
        """Publish ``event`` as a ``kind`` message and return its receipt."""
        ...
