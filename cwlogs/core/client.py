"""Module wrapping the CloudWatch Logs API as a page source.

Each method performs exactly one API call and translates its result into
the package's data model. Walking pages is left to
:mod:`cwlogs.core.retrieval`.
"""

from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cwlogs.core.constants import DEFAULT_REGION
from cwlogs.core.errors import RetrievalError
from cwlogs.core.logging import get_logger
from cwlogs.models import GroupPage, LogEvent, PageRequest, PageResponse

logger = get_logger(__name__)


class CloudWatchLogsClient:
    """Thin page-at-a-time client for CloudWatch Logs."""

    def __init__(self, client: Any):
        """Initialize the client.

        Args:
            client: A boto3 ``logs`` client (or a compatible stub)
        """
        self._client = client

    @classmethod
    def create(cls, profile: Optional[str] = None, region: Optional[str] = None) -> "CloudWatchLogsClient":
        """Build a client from a boto3 session.

        Credentials are resolved by boto3's own provider chain.

        Args:
            profile: Optional AWS profile name
            region: AWS region (defaults to us-east-1)
        """
        session_kwargs: Dict[str, Any] = {"region_name": region or DEFAULT_REGION}
        if profile:
            session_kwargs["profile_name"] = profile
        try:
            session = boto3.Session(**session_kwargs)
            return cls(session.client("logs"))
        except (BotoCoreError, ClientError) as e:
            raise RetrievalError(
                "Failed to create CloudWatch Logs client",
                operation="CreateClient",
                details={"profile": profile, "region": session_kwargs["region_name"], "error": str(e)},
            ) from e

    def fetch_page(self, request: PageRequest) -> PageResponse:
        """Fetch one page of filtered log events.

        Raises:
            RetrievalError: If the API call fails
        """
        kwargs: Dict[str, Any] = {
            "logGroupName": request.group,
            "limit": request.page_size,
        }
        if request.start_time is not None:
            kwargs["startTime"] = request.start_time
        if request.end_time is not None:
            kwargs["endTime"] = request.end_time
        if request.pattern:
            kwargs["filterPattern"] = request.pattern
        if request.continuation:
            kwargs["nextToken"] = request.continuation

        try:
            response = self._client.filter_log_events(**kwargs)
        except (BotoCoreError, ClientError) as e:
            raise RetrievalError(
                f"Failed to get log events for group: {request.group}",
                group=request.group,
                operation="FilterLogEvents",
                details={"error": str(e)},
            ) from e

        events = [
            LogEvent(
                timestamp=item.get("timestamp"),
                stream_id=item.get("logStreamName"),
                message=item.get("message"),
            )
            for item in response.get("events", [])
        ]
        return PageResponse(events=events, next_token=response.get("nextToken"))

    def list_groups_page(self, prefix: Optional[str] = None, token: Optional[str] = None) -> GroupPage:
        """Fetch one page of log group names.

        Raises:
            RetrievalError: If the API call fails
        """
        kwargs: Dict[str, Any] = {}
        if prefix:
            kwargs["logGroupNamePrefix"] = prefix
        if token:
            kwargs["nextToken"] = token

        try:
            response = self._client.describe_log_groups(**kwargs)
        except (BotoCoreError, ClientError) as e:
            raise RetrievalError(
                "Failed to list log groups",
                operation="DescribeLogGroups",
                details={"prefix": prefix, "error": str(e)},
            ) from e

        names = [
            group["logGroupName"]
            for group in response.get("logGroups", [])
            if group.get("logGroupName")
        ]
        return GroupPage(names=names, next_token=response.get("nextToken"))
