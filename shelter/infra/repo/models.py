"""SQLAlchemy models for persistence layer (users, groups, memberships, animals, tags)."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship

from shelter.domain.statuses import utc_now


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


animal_animal_tags = Table(
    "animal_animal_tags",
    Base.metadata,
    Column("animal_id", Integer, ForeignKey("animals.id"), primary_key=True),
    Column("animal_tag_id", Integer, ForeignKey("animal_tags.id"), primary_key=True),
)


class UserORM(Base):
    """Modèle ORM pour les utilisateurs (suppression logique via `deleted_at`)."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)
    deleted_at = Column(DateTime, nullable=True, index=True)
    username = Column(String(150), nullable=False, unique=True)
    first_name = Column(String(150), nullable=False, default="")
    last_name = Column(String(150), nullable=False, default="")
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    locked_until = Column(DateTime, nullable=True)

    memberships = relationship("UserGroupORM", back_populates="user")


class GroupORM(Base):
    """Modèle ORM pour les groupes de bénévoles (chiens, chats, ...)."""

    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)
    deleted_at = Column(DateTime, nullable=True, index=True)
    name = Column(String(150), nullable=False, unique=True)
    description = Column(Text, nullable=False, default="")


class UserGroupORM(Base):
    """Adhésion utilisateur/groupe avec le droit d'administration du groupe."""

    __tablename__ = "user_groups"

    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    group_id = Column(Integer, ForeignKey("groups.id"), primary_key=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    is_group_admin = Column(Boolean, nullable=False, default=False)

    user = relationship("UserORM", back_populates="memberships")
    group = relationship("GroupORM")

    __table_args__ = (
        Index("idx_user_groups_user_admin", "user_id", "is_group_admin"),
        Index("idx_user_groups_group_id", "group_id"),
    )


class AnimalTagORM(Base):
    """Étiquette d'animal propre à un groupe (comportement, statut de promenade)."""

    __tablename__ = "animal_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    name = Column(String(50), nullable=False)
    category = Column(String(50), nullable=False, default="")
    color = Column(String(20), nullable=False, default="")

    __table_args__ = (UniqueConstraint("group_id", "name", name="uq_animal_tags_group_name"),)


class AnimalORM(Base):
    """Modèle ORM pour les animaux (suppression logique via `deleted_at`)."""

    __tablename__ = "animals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)
    deleted_at = Column(DateTime, nullable=True, index=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    name = Column(String(255), nullable=False)
    species = Column(String(100), nullable=False, default="")
    breed = Column(String(100), nullable=False, default="")
    age = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String(1024), nullable=False, default="")
    status = Column(String(50), nullable=False, default="available")
    arrival_date = Column(DateTime, nullable=True)
    foster_start_date = Column(DateTime, nullable=True)
    quarantine_start_date = Column(DateTime, nullable=True)
    archived_date = Column(DateTime, nullable=True)
    last_status_change = Column(DateTime, nullable=True)
    return_count = Column(Integer, nullable=False, default=0)
    is_returned = Column(Boolean, nullable=False, default=False)

    tags = relationship("AnimalTagORM", secondary=animal_animal_tags, order_by="AnimalTagORM.name")

    __table_args__ = (Index("idx_animal_group_status", "group_id", "status"),)
