"""Habit persistence tables."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class HabitRecord(SQLModel, table=True):
    """Stored habit metadata."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(primary_key=True, max_length=32)
    name: str = Field(nullable=False, max_length=80)
    color: str = Field(default="#007AFF", max_length=9)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False, index=True
    )

    completions: list["CompletionRecord"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "CompletionRecord", back_populates="habit", cascade="all, delete-orphan"
        ),
    )


class CompletionRecord(SQLModel, table=True):
    """One completed calendar day for a habit, keyed ``yyyy-MM-dd``."""

    __tablename__: ClassVar[str] = "habit_completion"

    habit_id: str = Field(foreign_key="habit.id", primary_key=True)
    day_key: str = Field(primary_key=True, max_length=10, index=True)

    habit: "HabitRecord" = Relationship(
        back_populates="completions",
        sa_relationship=relationship("HabitRecord", back_populates="completions"),
    )
