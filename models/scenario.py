"""Scenario catalog entries and per-user bookmarks."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base

JsonColumn = JSON().with_variant(JSONB, "postgresql")


class Scenario(Base):
    __tablename__ = "scenarios"
    __table_args__ = (
        CheckConstraint("difficulty BETWEEN 1 AND 3", name="ck_scenarios_difficulty"),
        CheckConstraint("popularity >= 0", name="ck_scenarios_popularity"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(80), index=True)
    difficulty: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

    # ScenarioDetails / ScenarioImpact, stored in their JSON (camelCase) form
    details: Mapped[dict] = mapped_column(JsonColumn, nullable=False)
    impacts: Mapped[dict] = mapped_column(JsonColumn, nullable=False)

    # Only mutated through services.scenarios.catalog_service.record_view
    popularity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    # Soft references to topics.id; may dangle after a topic is removed
    related_topic_ids: Mapped[list] = mapped_column(JsonColumn, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    bookmarks = relationship("UserScenario", back_populates="scenario", passive_deletes=True)


class UserScenario(Base):
    __tablename__ = "user_scenarios"
    __table_args__ = (
        UniqueConstraint("user_id", "scenario_id", name="uq_user_scenarios_user_scenario"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    # Owned by the external auth provider; no local users table
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    scenario_id: Mapped[int] = mapped_column(ForeignKey("scenarios.id", ondelete="CASCADE"), index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    custom_parameters: Mapped[dict | None] = mapped_column(JsonColumn, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    scenario = relationship("Scenario", back_populates="bookmarks")
