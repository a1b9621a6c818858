"""Integration tests for the client with real signing and transport."""

import json
from collections.abc import Generator
from pathlib import Path

import httpx
import pytest

from aws_actor import AwsClient, ClientConfig
from aws_actor.credentials import (
    CredentialChain,
    CredentialFailure,
    CredentialFailureReason,
    EnvironmentProvider,
    InstanceMetadataProvider,
    SharedCredentialsFileProvider,
)
from aws_actor.errors import TransportErrorClass
from aws_actor.models import (
    CredentialsErrorOutcome,
    DecodeErrorOutcome,
    RemoteErrorOutcome,
    SuccessOutcome,
    TransportErrorOutcome,
)
from aws_actor.settings import AwsEnvironment
from aws_actor.transport import HttpxTransport


QUEUE_NOT_FOUND = b"""<?xml version="1.0"?>
<ErrorResponse xmlns="http://queue.amazonaws.com/doc/2012-11-05/">
  <Error>
    <Type>Sender</Type>
    <Code>AWS.SimpleQueueService.NonExistentQueue</Code>
    <Message>The specified queue does not exist.</Message>
  </Error>
  <RequestId>42d59b56-7407-4c4a-be0f-4c88daeea257</RequestId>
</ErrorResponse>"""

DESCRIBE_REGIONS = b"""<?xml version="1.0" encoding="UTF-8"?>
<DescribeRegionsResponse xmlns="http://ec2.amazonaws.com/doc/2016-11-15/">
  <requestId>59dbff89-35bd-4eac-99ed-be587EXAMPLE</requestId>
  <regionInfo>
    <item>
      <regionName>us-east-1</regionName>
      <regionEndpoint>ec2.us-east-1.amazonaws.com</regionEndpoint>
    </item>
    <item>
      <regionName>eu-west-1</regionName>
      <regionEndpoint>ec2.eu-west-1.amazonaws.com</regionEndpoint>
    </item>
  </regionInfo>
</DescribeRegionsResponse>"""


class FakeService:
    """In-memory stand-in for a few regional service endpoints."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host

        if host.startswith("ec2."):
            return httpx.Response(
                200, headers={"Content-Type": "text/xml"}, content=DESCRIBE_REGIONS
            )
        if host.startswith("dynamodb."):
            return httpx.Response(
                200,
                headers={"Content-Type": "application/x-amz-json-1.0"},
                content=json.dumps({"TableNames": ["orders"]}).encode(),
            )
        if host.startswith("sqs."):
            return httpx.Response(
                400, headers={"Content-Type": "text/xml"}, content=QUEUE_NOT_FOUND
            )
        if host.startswith("lambda."):
            return httpx.Response(
                200, headers={"Content-Type": "application/json"}, content=b"{broken"
            )
        raise httpx.ConnectError("connection refused", request=request)


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def client(service: FakeService) -> Generator[AwsClient]:
    """Client reading credentials from a fixed environment."""
    env = AwsEnvironment.model_construct(
        access_key_id="AKIDEXAMPLE",
        secret_access_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
        session_token="session-token",
    )
    c = AwsClient(
        ClientConfig(region="us-east-1", autoload_credentials=True),
        credential_source=CredentialChain([EnvironmentProvider(env_factory=lambda: env)]),
        transport=HttpxTransport(transport=httpx.MockTransport(service)),
        env_factory=lambda: env,
    )
    yield c
    c.close()


class TestClientFlow:
    """End-to-end request flows."""

    def test_signed_xml_request(self, client: AwsClient, service: FakeService) -> None:
        """Test a query API call is signed and its XML decoded."""
        outcome = client.get("ec2", "/?Action=DescribeRegions&Version=2016-11-15")

        assert isinstance(outcome, SuccessOutcome)
        regions = outcome.body["DescribeRegionsResponse"]["regionInfo"]["item"]
        assert [r["regionName"] for r in regions] == ["us-east-1", "eu-west-1"]

        sent = service.requests[0]
        assert sent.method == "GET"
        assert sent.url.host == "ec2.us-east-1.amazonaws.com"
        assert sent.url.params["Action"] == "DescribeRegions"
        assert sent.content == b""

        authorization = sent.headers["authorization"]
        assert authorization.startswith(
            "AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/"
        )
        assert "/us-east-1/ec2/aws4_request" in authorization
        assert "host" in authorization.split("SignedHeaders=")[1]
        assert sent.headers["x-amz-security-token"] == "session-token"
        assert sent.headers["user-agent"] == "aws-request-actor/1.0"

    def test_signed_json_request(self, client: AwsClient, service: FakeService) -> None:
        """Test a JSON API call carries its body and target header."""
        outcome = client.post(
            "dynamodb",
            "/",
            "{}",
            {
                "Content-Type": "application/x-amz-json-1.0",
                "X-Amz-Target": "DynamoDB_20120810.ListTables",
            },
        )

        assert isinstance(outcome, SuccessOutcome)
        assert outcome.body == {"TableNames": ["orders"]}

        sent = service.requests[0]
        assert sent.method == "POST"
        assert sent.content == b"{}"
        assert sent.headers["content-type"] == "application/x-amz-json-1.0"
        assert sent.headers["x-amz-target"] == "DynamoDB_20120810.ListTables"

    def test_remote_error(self, client: AwsClient) -> None:
        """Test an error document is decoded on a remote error."""
        outcome = client.get("sqs", "/123456789012/missing")

        assert isinstance(outcome, RemoteErrorOutcome)
        assert outcome.status_code == 400
        assert outcome.message == "Bad Request"
        assert outcome.body["ErrorResponse"]["Error"]["Code"] == (
            "AWS.SimpleQueueService.NonExistentQueue"
        )

    def test_decode_error(self, client: AwsClient) -> None:
        """Test a malformed success body is reported with its raw bytes."""
        outcome = client.get("lambda", "/2015-03-31/functions/")

        assert isinstance(outcome, DecodeErrorOutcome)
        assert outcome.raw_body == b"{broken"

    def test_transport_error(self, client: AwsClient) -> None:
        """Test unreachable endpoints become transport errors."""
        outcome = client.get("s3", "/")

        assert isinstance(outcome, TransportErrorOutcome)
        assert outcome.error_class == TransportErrorClass.CONNECTION_ERROR

    def test_region_switch(self, client: AwsClient, service: FakeService) -> None:
        """Test later requests target and are signed for the new region."""
        client.set_region("eu-west-1")
        client.get("ec2", "/?Action=DescribeRegions&Version=2016-11-15")

        sent = service.requests[0]
        assert sent.url.host == "ec2.eu-west-1.amazonaws.com"
        assert "/eu-west-1/ec2/aws4_request" in sent.headers["authorization"]

    def test_metrics_after_flow(self, client: AwsClient) -> None:
        """Test metrics count every outcome."""
        client.get("ec2", "/")
        client.get("sqs", "/")
        client.get("s3", "/")

        metrics = client.get_metrics()
        assert metrics["outcomes_total"] == {
            "success": 1,
            "remote_error": 1,
            "transport_error": 1,
        }
        assert metrics["credential_refresh_total"] == 1
        assert metrics["transport_errors_total"] == {"CONNECTION_ERROR": 1}


class TestCredentialFailures:
    """Credential problems surface as outcomes through the client."""

    def test_non_utf8_credentials_file(self, tmp_path: Path) -> None:
        """Test an undecodable credentials file is reported, not raised."""
        path = tmp_path / "credentials"
        path.write_bytes(b"[default]\naws_access_key_id = \xff\xfe\n")
        env = AwsEnvironment.model_construct(
            shared_credentials_file=path, profile="default", region="us-east-1"
        )
        chain = CredentialChain([SharedCredentialsFileProvider(env_factory=lambda: env)])

        with AwsClient(credential_source=chain, env_factory=lambda: env) as c:
            result = c.refresh_credentials()

            assert isinstance(result, CredentialFailure)
            assert result.reason == CredentialFailureReason.INVALID_FILE
            outcome = c.get("ec2", "/")
            assert isinstance(outcome, CredentialsErrorOutcome)

    def test_invalid_environment_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an unparseable environment variable is reported, not raised."""
        monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "maybe")
        chain = CredentialChain(
            [
                EnvironmentProvider(env_factory=AwsEnvironment),
                InstanceMetadataProvider(env_factory=AwsEnvironment),
            ]
        )

        with AwsClient(ClientConfig(region="us-east-1"), credential_source=chain) as c:
            result = c.refresh_credentials()

            assert isinstance(result, CredentialFailure)
            assert result.reason == CredentialFailureReason.INVALID_ENVIRONMENT
