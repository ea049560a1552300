import json
import logging
from types import MappingProxyType
from typing import Mapping, Type

from hubdispatch.core.errors import MalformedPayload
from hubdispatch.schemas import payloads
from hubdispatch.schemas.events import Event
from hubdispatch.schemas.payloads import EventPayload

logger = logging.getLogger(__name__)

# installation and integration_installation decode to the same schema
PAYLOAD_SCHEMAS: Mapping[Event, Type[EventPayload]] = MappingProxyType({
    Event.COMMIT_COMMENT: payloads.CommitCommentPayload,
    Event.CREATE: payloads.CreatePayload,
    Event.DELETE: payloads.DeletePayload,
    Event.DEPLOYMENT: payloads.DeploymentPayload,
    Event.DEPLOYMENT_STATUS: payloads.DeploymentStatusPayload,
    Event.FORK: payloads.ForkPayload,
    Event.GOLLUM: payloads.GollumPayload,
    Event.INSTALLATION: payloads.InstallationPayload,
    Event.INTEGRATION_INSTALLATION: payloads.InstallationPayload,
    Event.ISSUE_COMMENT: payloads.IssueCommentPayload,
    Event.ISSUES: payloads.IssuesPayload,
    Event.LABEL: payloads.LabelPayload,
    Event.MEMBER: payloads.MemberPayload,
    Event.MEMBERSHIP: payloads.MembershipPayload,
    Event.MILESTONE: payloads.MilestonePayload,
    Event.ORGANIZATION: payloads.OrganizationPayload,
    Event.ORG_BLOCK: payloads.OrgBlockPayload,
    Event.PAGE_BUILD: payloads.PageBuildPayload,
    Event.PING: payloads.PingPayload,
    Event.PROJECT_CARD: payloads.ProjectCardPayload,
    Event.PROJECT_COLUMN: payloads.ProjectColumnPayload,
    Event.PROJECT: payloads.ProjectPayload,
    Event.PUBLIC: payloads.PublicPayload,
    Event.PULL_REQUEST: payloads.PullRequestPayload,
    Event.PULL_REQUEST_REVIEW: payloads.PullRequestReviewPayload,
    Event.PULL_REQUEST_REVIEW_COMMENT: payloads.PullRequestReviewCommentPayload,
    Event.PUSH: payloads.PushPayload,
    Event.RELEASE: payloads.ReleasePayload,
    Event.REPOSITORY: payloads.RepositoryPayload,
    Event.STATUS: payloads.StatusPayload,
    Event.TEAM: payloads.TeamPayload,
    Event.TEAM_ADD: payloads.TeamAddPayload,
    Event.WATCH: payloads.WatchPayload,
})


def schema_for(event: Event) -> Type[EventPayload]:
    try:
        return PAYLOAD_SCHEMAS[event]
    except KeyError:
        raise MalformedPayload(f"No payload schema for event {event.value}")


def decode_payload(event: Event, body: bytes) -> EventPayload:
    """Decode a raw hook body into the payload model for ``event``.

    The body must be a JSON object. Within it, decoding is lenient: fields
    that are absent or do not match the schema keep their defaults.
    """
    schema = schema_for(event)
    if not body:
        raise MalformedPayload("Empty Payload")

    try:
        data = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise MalformedPayload(f"Payload is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise MalformedPayload(
            f"Payload must be a JSON object, got {type(data).__name__}"
        )

    logger.debug(f"Decoding {event.value} payload as {schema.__name__}")
    return schema.model_validate(data)
