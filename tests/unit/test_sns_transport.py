"""Unit tests for the boto3 SNS transport."""

from __future__ import annotations

import typing as typ

import boto3
import pytest
from botocore.exceptions import EndpointConnectionError
from botocore.stub import Stubber

from hearing_relay.errors import PublishError
from hearing_relay.publishing import MessageAttribute, SnsPublishTransport

TOPIC = "arn:aws:sns:eu-west-2:000000000000:hearing-events"
ATTRIBUTES = {"messageType": MessageAttribute("COMMON_PLATFORM_HEARING")}


@pytest.fixture
def sns_client() -> typ.Any:  # noqa: ANN401
    """Build an SNS client that never reaches AWS."""
    return boto3.client(
        "sns",
        region_name="eu-west-2",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",  # noqa: S106 - dummy credentials
    )


class _UnreachableClient:
    """Client whose publish fails below the HTTP layer."""

    def publish(self, **kwargs: typ.Any) -> dict[str, typ.Any]:  # noqa: ANN401
        raise EndpointConnectionError(endpoint_url="http://localhost:4566")


class TestSnsPublishTransport:
    """Tests for ``SnsPublishTransport.publish``."""

    @pytest.mark.asyncio
    async def test_publishes_body_and_string_attribute(self, sns_client: typ.Any) -> None:  # noqa: ANN401
        """The request carries the topic, body and typed message attribute."""
        with Stubber(sns_client) as stubber:
            stubber.add_response(
                "publish",
                {"MessageId": "message-1"},
                expected_params={
                    "TopicArn": TOPIC,
                    "Message": '{"hearing":{}}',
                    "MessageAttributes": {
                        "messageType": {
                            "DataType": "String",
                            "StringValue": "COMMON_PLATFORM_HEARING",
                        }
                    },
                },
            )

            receipt = await SnsPublishTransport(sns_client).publish(
                TOPIC, '{"hearing":{}}', ATTRIBUTES
            )
            stubber.assert_no_pending_responses()

        assert receipt.message_id == "message-1"
        assert receipt.topic == TOPIC
        assert receipt.message_type == "COMMON_PLATFORM_HEARING"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("code", "status"), [("NotFound", 404), ("Throttling", 400)]
    )
    async def test_client_errors_become_publish_errors(
        self,
        sns_client: typ.Any,  # noqa: ANN401
        code: str,
        status: int,
    ) -> None:
        """Service errors are reported with their error code."""
        with Stubber(sns_client) as stubber:
            stubber.add_client_error(
                "publish", service_error_code=code, http_status_code=status
            )

            with pytest.raises(PublishError) as excinfo:
                await SnsPublishTransport(sns_client).publish(TOPIC, "{}", ATTRIBUTES)

        assert excinfo.value.error_code == code
        assert excinfo.value.topic == TOPIC

    @pytest.mark.asyncio
    async def test_connection_errors_become_publish_errors(self) -> None:
        """botocore connection failures are reported as PublishError."""
        transport = SnsPublishTransport(_UnreachableClient())

        with pytest.raises(PublishError, match="localhost:4566") as excinfo:
            await transport.publish(TOPIC, "{}", ATTRIBUTES)

        assert excinfo.value.error_code is None


def test_from_settings_uses_region_and_endpoint() -> None:
    """``from_settings`` builds a client for the given region and endpoint."""
    transport = SnsPublishTransport.from_settings(
        region_name="eu-west-2", endpoint_url="http://localhost:4566"
    )

    client = transport._client  # noqa: SLF001 - inspect the built client
    assert client.meta.region_name == "eu-west-2"  # type: ignore[attr-defined]
    assert client.meta.endpoint_url == "http://localhost:4566"  # type: ignore[attr-defined]
