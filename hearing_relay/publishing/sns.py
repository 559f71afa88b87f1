"""AWS SNS adapter for the PublishTransport protocol.

boto3 clients are synchronous, so each publish runs in a worker thread to
keep the ASGI event loop free while SNS responds. Client errors (topic not
found, throttling, authorisation) and connection-level botocore errors are
both reported as :class:`~hearing_relay.errors.PublishError`.

Usage
-----
>>> transport = SnsPublishTransport.from_settings(region_name="eu-west-2")
>>> receipt = await transport.publish(topic_arn, body, attributes)

"""

from __future__ import annotations

import asyncio
import typing as typ

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from hearing_relay.errors import PublishError
from hearing_relay.publishing.protocol import MESSAGE_TYPE_ATTRIBUTE, PublishReceipt

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from hearing_relay.publishing.protocol import MessageAttribute

_CONNECT_TIMEOUT_S = 5
_READ_TIMEOUT_S = 10
_MAX_ATTEMPTS = 3


class _SupportsSnsPublish(typ.Protocol):
    """The slice of the boto3 SNS client used by the adapter."""

    def publish(self, **kwargs: typ.Any) -> dict[str, typ.Any]: ...  # noqa: ANN401


def _encode_attributes(
    attributes: cabc.Mapping[str, MessageAttribute],
) -> dict[str, dict[str, str]]:
    """Convert attributes to the SNS ``MessageAttributes`` request shape."""
    return {
        name: {"DataType": attribute.data_type, "StringValue": attribute.value}
        for name, attribute in attributes.items()
    }


class SnsPublishTransport:
    """Publish messages to SNS topics with a boto3 client.

    Parameters
    ----------
    client
        A boto3 SNS client, or any object exposing a compatible ``publish``.

    """

    def __init__(self, client: _SupportsSnsPublish) -> None:
        """Wrap an existing SNS client."""
        self._client = client

    @classmethod
    def from_settings(
        cls,
        *,
        region_name: str,
        endpoint_url: str | None = None,
    ) -> SnsPublishTransport:
        """Create a transport with its own boto3 SNS client.

        ``endpoint_url`` points the client at an SNS-compatible emulator such
        as LocalStack. Timeouts and retry attempts are owned by botocore.
        """
        config = Config(
            connect_timeout=_CONNECT_TIMEOUT_S,
            read_timeout=_READ_TIMEOUT_S,
            retries={"max_attempts": _MAX_ATTEMPTS, "mode": "standard"},
        )
        client = boto3.client(
            "sns",
            region_name=region_name,
            endpoint_url=endpoint_url,
            config=config,
        )
        return cls(client)

    async def publish(
        self,
        topic: str,
        body: str,
        attributes: cabc.Mapping[str, MessageAttribute],
    ) -> PublishReceipt:
        """Publish one message to the SNS topic ``topic``.

        Raises
        ------
        PublishError
            If SNS returns an error or cannot be reached.

        """
        try:
            response = await asyncio.to_thread(
                self._client.publish,
                TopicArn=topic,
                Message=body,
                MessageAttributes=_encode_attributes(attributes),
            )
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            msg = f"SNS rejected message for {topic}: {code}"
            raise PublishError(msg, topic=topic, error_code=code) from exc
        except BotoCoreError as exc:
            msg = f"SNS request for {topic} failed: {exc}"
            raise PublishError(msg, topic=topic) from exc

        message_type = attributes.get(MESSAGE_TYPE_ATTRIBUTE)
        return PublishReceipt(
            message_id=response["MessageId"],
            topic=topic,
            message_type=None if message_type is None else message_type.value,
        )


__all__ = ["SnsPublishTransport"]
