from enum import Enum
from typing import Optional


class Event(str, Enum):
    """GitHub hook event types, as sent in the X-GitHub-Event header"""

    COMMIT_COMMENT = "commit_comment"
    CREATE = "create"
    DELETE = "delete"
    DEPLOYMENT = "deployment"
    DEPLOYMENT_STATUS = "deployment_status"
    FORK = "fork"
    GOLLUM = "gollum"
    INSTALLATION = "installation"
    INTEGRATION_INSTALLATION = "integration_installation"
    ISSUE_COMMENT = "issue_comment"
    ISSUES = "issues"
    LABEL = "label"
    MEMBER = "member"
    MEMBERSHIP = "membership"
    MILESTONE = "milestone"
    ORGANIZATION = "organization"
    ORG_BLOCK = "org_block"
    PAGE_BUILD = "page_build"
    PING = "ping"
    PROJECT_CARD = "project_card"
    PROJECT_COLUMN = "project_column"
    PROJECT = "project"
    PUBLIC = "public"
    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW = "pull_request_review"
    PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"
    PUSH = "push"
    RELEASE = "release"
    REPOSITORY = "repository"
    STATUS = "status"
    TEAM = "team"
    TEAM_ADD = "team_add"
    WATCH = "watch"


class EventSubtype(str, Enum):
    """Qualifiers refining some events, e.g. the ref_type of a create event"""

    NONE = ""
    BRANCH = "branch"
    TAG = "tag"
    PULL = "pull"
    ISSUES = "issues"


_EVENTS = {event.value: event for event in Event}
_SUBTYPES = {subtype.value: subtype for subtype in EventSubtype}


def parse_event(raw: str) -> Optional[Event]:
    """Return the Event for a header value, or None if it is not in the vocabulary.

    An unrecognized value is not an error here: whether the request is
    accepted is up to the registry.
    """
    return _EVENTS.get(raw)


def parse_subtype(raw: Optional[str]) -> Optional[EventSubtype]:
    if not raw:
        return EventSubtype.NONE
    return _SUBTYPES.get(raw)


def is_known_event(raw: str) -> bool:
    return raw in _EVENTS
