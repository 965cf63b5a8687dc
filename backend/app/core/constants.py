"""
Shared Constants

Centralized constants used across the application to ensure consistency.
"""

from typing import Dict, List

# Team roles and lifecycle
TEAM_ROLE_LEADER = "Team Leader"
TEAM_ROLE_DEFAULT = "Member"

TEAM_STATUS_FORMING = "forming"
TEAM_STATUS_CLOSED = "closed"

TEAM_MIN_MEMBERS = 2
TEAM_MAX_MEMBERS = 20

# Invitation types and states
INVITATION_TYPE_INVITE = "invite"
INVITATION_TYPE_JOIN_REQUEST = "join_request"

INVITATION_STATUS_PENDING = "pending"
INVITATION_STATUS_ACCEPTED = "accepted"
INVITATION_STATUS_REJECTED = "rejected"

# Notification types surfaced to the client
NOTIFICATION_TYPE_INVITE = "INVITE"
NOTIFICATION_TYPE_JOIN_REQUEST = "JOIN_REQUEST"
NOTIFICATION_TYPE_ACCEPTED = "ACCEPTED"
NOTIFICATION_TYPE_REJECTED = "REJECTED"
NOTIFICATION_TYPE_MESSAGE = "MESSAGE"

# Feed post types
POST_TYPE_TEAM_CREATED = "team_created"
POST_TYPE_MEMBER_JOINED = "member_joined"
POST_TYPE_USER_POST = "user_post"

# Skill verification
VERIFICATION_STATUS_VERIFIED = "verified"
VERIFICATION_STATUS_INVALIDATED = "invalidated"

VERIFICATION_SOURCE_GITHUB = "github"
VERIFICATION_SOURCE_CERTIFICATE = "certificate"

INVALIDATION_REASONS: List[str] = ["profile_edited", "manual", "expired"]

# Fallback display name when a profile has no full name
DEFAULT_USER_NAME = "User"

# Usernames: 3-15 chars of a-z, 0-9 and underscore
USERNAME_PATTERN = r"^[a-z0-9_]{3,15}$"
USERNAME_GENERATION_ATTEMPTS = 10

# Direct messages
MESSAGE_PREVIEW_LENGTH = 50
AVATAR_FALLBACK_URL = "https://api.dicebear.com/7.x/initials/svg?seed={seed}"

# GitHub
GITHUB_MAX_ANALYZED_REPOS = 20
GITHUB_REPOS_PER_PAGE = 100

# Programming language -> skill names shown on profiles
LANGUAGE_SKILL_MAP: Dict[str, List[str]] = {
    "javascript": ["JavaScript", "JS", "Node.js", "React", "Frontend"],
    "typescript": ["TypeScript", "JavaScript", "React", "Frontend"],
    "python": ["Python", "Django", "Flask", "Machine Learning", "ML"],
    "java": ["Java", "Spring", "Backend"],
    "kotlin": ["Kotlin", "Android", "Mobile"],
    "swift": ["Swift", "iOS", "Mobile"],
    "go": ["Go", "Golang", "Backend"],
    "rust": ["Rust", "Systems Programming"],
    "c++": ["C++", "Systems Programming"],
    "c#": ["C#", ".NET", "Unity"],
    "ruby": ["Ruby", "Rails", "Backend"],
    "php": ["PHP", "Laravel", "Backend"],
    "html": ["HTML", "Frontend", "Web Development"],
    "css": ["CSS", "Frontend", "Web Development", "Tailwind"],
    "scss": ["SCSS", "CSS", "Frontend"],
    "vue": ["Vue.js", "Frontend", "JavaScript"],
    "dart": ["Dart", "Flutter", "Mobile"],
    "shell": ["Shell", "Bash", "DevOps"],
    "dockerfile": ["Docker", "DevOps", "Containers"],
}
