"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", String, primary_key=True),  # UUID as string
    Column("subject", String(255), nullable=False, unique=True),  # Provider `sub` claim
    Column("email", String(320), nullable=False, unique=True),  # Stored lowercase
    Column("name", String(255), nullable=True),
    Column("picture", String, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


# ============================================================================
# PROJECTS TABLE
# ============================================================================
projects_table = Table(
    "projects",
    metadata,
    Column("id", String, primary_key=True),
    Column("slug", String(255), nullable=False, unique=True),
    Column("name", String(255), nullable=False),
    Column("owner_id", String, ForeignKey("users.id"), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

Index("ix_projects_owner_id", projects_table.c.owner_id)


# ============================================================================
# PENDING INVITATIONS TABLE
# ============================================================================
pending_invitations_table = Table(
    "pending_invitations",
    metadata,
    Column("id", String, primary_key=True),
    Column("email", String(320), nullable=False),  # Stored lowercase
    Column(
        "project_id", String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    ),
    Column("role", String(32), nullable=False),  # CollaboratorRole as string
    Column("expires_at", DateTime(timezone=True), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("email", "project_id", name="uq_invitation_email_project"),
)

Index("ix_pending_invitations_email", pending_invitations_table.c.email)


# ============================================================================
# COLLABORATORS TABLE
# ============================================================================
collaborators_table = Table(
    "collaborators",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "project_id", String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    ),
    Column("role", String(32), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("user_id", "project_id", name="uq_collaborator_user_project"),
)

Index("ix_collaborators_project_id", collaborators_table.c.project_id)
