"""Pydantic models for GitHub webhook payloads.

Decoding is deliberately permissive: unknown keys are ignored, and a
missing, null or wrongly-typed value falls back to the field's default
instead of failing the whole payload.
"""

from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, List, Optional, get_args, get_origin

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from hubdispatch.schemas.events import EventSubtype, parse_subtype


@lru_cache(maxsize=None)
def _item_adapter(item_type) -> TypeAdapter:
    return TypeAdapter(item_type)


def _lenient_items(item_type, values: list) -> list:
    """Validate list items one by one, zeroing only the ones that fail"""
    adapter = _item_adapter(item_type)
    items = []
    for value in values:
        try:
            items.append(adapter.validate_python(value))
        except ValidationError:
            items.append(item_type())
    return items


class GitHubModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_on_mismatch(cls, value, handler, info):
        try:
            return handler(value)
        except ValidationError:
            field = cls.model_fields[info.field_name]
            if get_origin(field.annotation) is list and isinstance(value, list):
                return _lenient_items(get_args(field.annotation)[0], value)
            return field.get_default(call_default_factory=True)


# Shared objects


class User(GitHubModel):
    login: str = ""
    id: int = 0
    node_id: str = ""
    avatar_url: str = ""
    html_url: str = ""
    type: str = ""
    site_admin: bool = False


class CommitAuthor(GitHubModel):
    name: str = ""
    email: str = ""
    username: str = ""


class Organization(GitHubModel):
    login: str = ""
    id: int = 0
    url: str = ""
    description: str = ""


class Repository(GitHubModel):
    id: int = 0
    name: str = ""
    full_name: str = ""
    owner: User = Field(default_factory=User)
    private: bool = False
    fork: bool = False
    html_url: str = ""
    description: str = ""
    default_branch: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    pushed_at: Optional[datetime] = None


class Installation(GitHubModel):
    id: int = 0
    account: User = Field(default_factory=User)
    app_id: int = 0
    target_type: str = ""
    repository_selection: str = ""
    html_url: str = ""


class InstallationRepository(GitHubModel):
    id: int = 0
    name: str = ""
    full_name: str = ""
    private: bool = False


class Label(GitHubModel):
    id: int = 0
    name: str = ""
    color: str = ""
    default: bool = False
    url: str = ""


class Milestone(GitHubModel):
    id: int = 0
    number: int = 0
    title: str = ""
    description: str = ""
    state: str = ""
    creator: User = Field(default_factory=User)
    open_issues: int = 0
    closed_issues: int = 0
    due_on: Optional[datetime] = None


class Issue(GitHubModel):
    id: int = 0
    number: int = 0
    title: str = ""
    body: str = ""
    state: str = ""
    locked: bool = False
    user: User = Field(default_factory=User)
    labels: List[Label] = Field(default_factory=list)
    assignees: List[User] = Field(default_factory=list)
    milestone: Optional[Milestone] = None
    comments: int = 0
    html_url: str = ""
    created_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None


class Comment(GitHubModel):
    id: int = 0
    body: str = ""
    user: User = Field(default_factory=User)
    html_url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CommitComment(Comment):
    commit_id: str = ""
    path: Optional[str] = None
    position: Optional[int] = None
    line: Optional[int] = None


class ReviewComment(Comment):
    pull_request_review_id: int = 0
    commit_id: str = ""
    diff_hunk: str = ""
    path: str = ""
    position: Optional[int] = None
    in_reply_to_id: Optional[int] = None


class PullRequestRef(GitHubModel):
    label: str = ""
    ref: str = ""
    sha: str = ""
    user: User = Field(default_factory=User)
    repo: Optional[Repository] = None


class PullRequest(GitHubModel):
    id: int = 0
    number: int = 0
    title: str = ""
    body: str = ""
    state: str = ""
    draft: bool = False
    user: User = Field(default_factory=User)
    head: PullRequestRef = Field(default_factory=PullRequestRef)
    base: PullRequestRef = Field(default_factory=PullRequestRef)
    labels: List[Label] = Field(default_factory=list)
    requested_reviewers: List[User] = Field(default_factory=list)
    merged: bool = False
    mergeable: Optional[bool] = None
    merged_at: Optional[datetime] = None
    commits: int = 0
    additions: int = 0
    deletions: int = 0
    changed_files: int = 0
    html_url: str = ""
    diff_url: str = ""


class Review(GitHubModel):
    id: int = 0
    user: User = Field(default_factory=User)
    body: str = ""
    state: str = ""
    commit_id: str = ""
    html_url: str = ""
    submitted_at: Optional[datetime] = None


class Commit(GitHubModel):
    id: str = ""
    tree_id: str = ""
    distinct: bool = False
    message: str = ""
    timestamp: Optional[datetime] = None
    url: str = ""
    author: CommitAuthor = Field(default_factory=CommitAuthor)
    committer: CommitAuthor = Field(default_factory=CommitAuthor)
    added: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
    modified: List[str] = Field(default_factory=list)


class Deployment(GitHubModel):
    id: int = 0
    sha: str = ""
    ref: str = ""
    task: str = ""
    environment: str = ""
    description: str = ""
    creator: User = Field(default_factory=User)
    payload: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


class DeploymentStatus(GitHubModel):
    id: int = 0
    state: str = ""
    description: str = ""
    target_url: str = ""
    environment: str = ""
    creator: User = Field(default_factory=User)
    created_at: Optional[datetime] = None


class WikiPage(GitHubModel):
    page_name: str = ""
    title: str = ""
    summary: Optional[str] = None
    action: str = ""
    sha: str = ""
    html_url: str = ""


class Team(GitHubModel):
    id: int = 0
    name: str = ""
    slug: str = ""
    description: str = ""
    privacy: str = ""
    permission: str = ""


class Membership(GitHubModel):
    url: str = ""
    state: str = ""
    role: str = ""
    user: User = Field(default_factory=User)


class Project(GitHubModel):
    id: int = 0
    name: str = ""
    body: str = ""
    number: int = 0
    state: str = ""
    creator: User = Field(default_factory=User)


class ProjectCard(GitHubModel):
    id: int = 0
    note: Optional[str] = None
    column_id: int = 0
    content_url: str = ""
    creator: User = Field(default_factory=User)


class ProjectColumn(GitHubModel):
    id: int = 0
    name: str = ""
    project_url: str = ""


class Release(GitHubModel):
    id: int = 0
    tag_name: str = ""
    target_commitish: str = ""
    name: str = ""
    body: str = ""
    draft: bool = False
    prerelease: bool = False
    author: User = Field(default_factory=User)
    html_url: str = ""
    tarball_url: str = ""
    zipball_url: str = ""
    created_at: Optional[datetime] = None
    published_at: Optional[datetime] = None


class PageBuildError(GitHubModel):
    message: Optional[str] = None


class PageBuild(GitHubModel):
    url: str = ""
    status: str = ""
    error: PageBuildError = Field(default_factory=PageBuildError)
    pusher: User = Field(default_factory=User)
    commit: str = ""
    duration: int = 0


class Hook(GitHubModel):
    id: int = 0
    type: str = ""
    name: str = ""
    active: bool = False
    events: List[str] = Field(default_factory=list)
    config: Dict[str, Any] = Field(default_factory=dict)


class StatusBranch(GitHubModel):
    name: str = ""
    commit: Dict[str, Any] = Field(default_factory=dict)


# Event payloads


class EventPayload(GitHubModel):
    """Fields common to every hook delivery"""

    sender: User = Field(default_factory=User)
    repository: Repository = Field(default_factory=Repository)
    organization: Optional[Organization] = None
    installation: Optional[Installation] = None


class CommitCommentPayload(EventPayload):
    action: str = ""
    comment: CommitComment = Field(default_factory=CommitComment)


class CreatePayload(EventPayload):
    ref: str = ""
    ref_type: str = ""
    master_branch: str = ""
    description: str = ""
    pusher_type: str = ""

    @property
    def subtype(self) -> Optional[EventSubtype]:
        return parse_subtype(self.ref_type)


class DeletePayload(EventPayload):
    ref: str = ""
    ref_type: str = ""
    pusher_type: str = ""

    @property
    def subtype(self) -> Optional[EventSubtype]:
        return parse_subtype(self.ref_type)


class DeploymentPayload(EventPayload):
    deployment: Deployment = Field(default_factory=Deployment)


class DeploymentStatusPayload(EventPayload):
    deployment_status: DeploymentStatus = Field(default_factory=DeploymentStatus)
    deployment: Deployment = Field(default_factory=Deployment)


class ForkPayload(EventPayload):
    forkee: Repository = Field(default_factory=Repository)


class GollumPayload(EventPayload):
    pages: List[WikiPage] = Field(default_factory=list)


class InstallationPayload(EventPayload):
    action: str = ""
    installation: Installation = Field(default_factory=Installation)
    repositories: List[InstallationRepository] = Field(default_factory=list)


class IssueCommentPayload(EventPayload):
    action: str = ""
    issue: Issue = Field(default_factory=Issue)
    comment: Comment = Field(default_factory=Comment)
    changes: Dict[str, Any] = Field(default_factory=dict)


class IssuesPayload(EventPayload):
    action: str = ""
    issue: Issue = Field(default_factory=Issue)
    changes: Dict[str, Any] = Field(default_factory=dict)
    assignee: Optional[User] = None
    label: Optional[Label] = None


class LabelPayload(EventPayload):
    action: str = ""
    label: Label = Field(default_factory=Label)
    changes: Dict[str, Any] = Field(default_factory=dict)


class MemberPayload(EventPayload):
    action: str = ""
    member: User = Field(default_factory=User)
    changes: Dict[str, Any] = Field(default_factory=dict)


class MembershipPayload(EventPayload):
    action: str = ""
    scope: str = ""
    member: User = Field(default_factory=User)
    team: Team = Field(default_factory=Team)


class MilestonePayload(EventPayload):
    action: str = ""
    milestone: Milestone = Field(default_factory=Milestone)
    changes: Dict[str, Any] = Field(default_factory=dict)


class OrganizationPayload(EventPayload):
    action: str = ""
    membership: Membership = Field(default_factory=Membership)
    invitation: Dict[str, Any] = Field(default_factory=dict)


class OrgBlockPayload(EventPayload):
    action: str = ""
    blocked_user: User = Field(default_factory=User)


class PageBuildPayload(EventPayload):
    id: int = 0
    build: PageBuild = Field(default_factory=PageBuild)


class PingPayload(EventPayload):
    zen: str = ""
    hook_id: int = 0
    hook: Hook = Field(default_factory=Hook)


class ProjectCardPayload(EventPayload):
    action: str = ""
    project_card: ProjectCard = Field(default_factory=ProjectCard)
    changes: Dict[str, Any] = Field(default_factory=dict)


class ProjectColumnPayload(EventPayload):
    action: str = ""
    project_column: ProjectColumn = Field(default_factory=ProjectColumn)
    changes: Dict[str, Any] = Field(default_factory=dict)


class ProjectPayload(EventPayload):
    action: str = ""
    project: Project = Field(default_factory=Project)
    changes: Dict[str, Any] = Field(default_factory=dict)


class PublicPayload(EventPayload):
    pass


class PullRequestPayload(EventPayload):
    action: str = ""
    number: int = 0
    pull_request: PullRequest = Field(default_factory=PullRequest)
    changes: Dict[str, Any] = Field(default_factory=dict)
    label: Optional[Label] = None
    requested_reviewer: Optional[User] = None


class PullRequestReviewPayload(EventPayload):
    action: str = ""
    review: Review = Field(default_factory=Review)
    pull_request: PullRequest = Field(default_factory=PullRequest)


class PullRequestReviewCommentPayload(EventPayload):
    action: str = ""
    comment: ReviewComment = Field(default_factory=ReviewComment)
    pull_request: PullRequest = Field(default_factory=PullRequest)


class PushPayload(EventPayload):
    ref: str = ""
    before: str = ""
    after: str = ""
    created: bool = False
    deleted: bool = False
    forced: bool = False
    base_ref: Optional[str] = None
    compare: str = ""
    commits: List[Commit] = Field(default_factory=list)
    head_commit: Optional[Commit] = None
    pusher: CommitAuthor = Field(default_factory=CommitAuthor)


class ReleasePayload(EventPayload):
    action: str = ""
    release: Release = Field(default_factory=Release)


class RepositoryPayload(EventPayload):
    action: str = ""


class StatusPayload(EventPayload):
    id: int = 0
    sha: str = ""
    name: str = ""
    context: str = ""
    state: str = ""
    description: Optional[str] = None
    target_url: Optional[str] = None
    commit: Dict[str, Any] = Field(default_factory=dict)
    branches: List[StatusBranch] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TeamPayload(EventPayload):
    action: str = ""
    team: Team = Field(default_factory=Team)
    changes: Dict[str, Any] = Field(default_factory=dict)


class TeamAddPayload(EventPayload):
    team: Team = Field(default_factory=Team)


class WatchPayload(EventPayload):
    action: str = ""
