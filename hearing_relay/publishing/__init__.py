"""Message publishing for relayed hearing events.

Public API
----------
MessageAttribute
    Typed routing attribute attached to a message.
MessagePublisher
    Encodes hearing events and publishes them through a transport.
PublishReceipt
    Acknowledgement returned by a transport.
PublishTransport
    Protocol (port) for delivering encoded messages to a topic.
SnsPublishTransport
    boto3 adapter publishing to AWS SNS.
"""

from hearing_relay.publishing.protocol import (
    MESSAGE_TYPE_ATTRIBUTE,
    HearingEventPublisher,
    MessageAttribute,
    PublishReceipt,
    PublishTransport,
)
from hearing_relay.publishing.publisher import (
    MESSAGE_TYPES,
    MessagePublisher,
    OutboundMessage,
    encode_event,
    message_type_for,
)
from hearing_relay.publishing.sns import SnsPublishTransport

__all__ = [
    "MESSAGE_TYPES",
    "MESSAGE_TYPE_ATTRIBUTE",
    "HearingEventPublisher",
    "MessageAttribute",
    "MessagePublisher",
    "OutboundMessage",
    "PublishReceipt",
    "PublishTransport",
    "SnsPublishTransport",
    "encode_event",
    "message_type_for",
]
