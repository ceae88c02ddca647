"""
Relational schema for the SQL storage backend.

SQLAlchemy Core table definitions for users, portfolios, images and
events. Column names match the domain's TABLE_COLUMNS exactly.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    MetaData,
    String,
    Table,
    Text,
    true,
)

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("full_name", String(255), nullable=True),
    Column("username", String(100), nullable=True, index=True),
    Column("email", String(255), nullable=False, index=True),
    Column("profile_image_url", Text, nullable=True),
    Column("artist_type", String(100), nullable=True),
    Column("website", Text, nullable=True),
    Column("instagram", String(100), nullable=True),
    Column("twitter", String(100), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=True),
)

portfolios_table = Table(
    "portfolios",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("user_id", String(64), ForeignKey("users.id"), nullable=False, index=True),
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=True),
    Column("slug", String(255), nullable=True, unique=True),
    Column("is_public", Boolean, nullable=False, server_default=true()),
    Column("created_at", DateTime(timezone=True), nullable=True),
    Column("updated_at", DateTime(timezone=True), nullable=True),
)

images_table = Table(
    "images",
    metadata,
    Column("id", String(64), primary_key=True),
    Column(
        "portfolio_id",
        String(64),
        ForeignKey("portfolios.id"),
        nullable=True,
        index=True,
    ),
    Column("user_id", String(64), ForeignKey("users.id"), nullable=True, index=True),
    Column("image_url", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=True),
)

events_table = Table(
    "events",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("user_id", String(64), ForeignKey("users.id"), nullable=False, index=True),
    Column("title", String(255), nullable=False),
    Column("event_date", Date, nullable=False),
    Column("location", String(255), nullable=False),
    Column("description", Text, nullable=True),
    Column("event_type", String(20), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=True),
)

TABLES: dict[str, Table] = {table.name: table for table in metadata.sorted_tables}
