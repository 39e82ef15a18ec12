"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import timezone
from typing import Callable, Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ...domain.habits import Habit, normalize_completions
from ...domain.periods import parse_day_key
from ...domain.repositories.habit import HabitStoreError
from ...logging_config import get_logger
from ...models.habit import CompletionRecord, HabitRecord

logger = get_logger("infra.habits")


@contextmanager
def _store_errors(action: str, **context) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as HabitStoreError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(f"Habit store failed to {action}", extra=context, exc_info=True)
        raise HabitStoreError(f"Could not {action}: {exc}") from exc


def _valid_keys(habit_id: str, keys: list[str]) -> list[str]:
    """Drop stored day keys that do not parse so one bad row cannot block a load."""
    valid = []
    for key in keys:
        try:
            parse_day_key(key)
        except ValueError:
            logger.warning("Skipping malformed day key", extra={"habit_id": habit_id, "day_key": key})
            continue
        valid.append(key)
    return valid


def _to_domain(record: HabitRecord, keys: list[str]) -> Habit:
    created = record.created_at
    if created.tzinfo is None:
        # SQLite drops tzinfo; values are always written in UTC.
        created = created.replace(tzinfo=timezone.utc)
    return Habit(
        id=record.id,
        name=record.name,
        color=record.color,
        completions=normalize_completions(_valid_keys(record.id, keys)),
        created_at=created,
    )


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _keys_for(self, session: Session, habit_id: str) -> list[str]:
        return list(
            session.exec(
                select(CompletionRecord.day_key).where(CompletionRecord.habit_id == habit_id)
            ).all()
        )

    def list_habits(self) -> list[Habit]:
        """All habits, oldest first."""
        with _store_errors("list habits"), self.session_factory() as session:
            records = session.exec(
                select(HabitRecord).order_by(HabitRecord.created_at, HabitRecord.id)  # type: ignore[arg-type]
            ).all()
            keys: dict[str, list[str]] = {record.id: [] for record in records}
            for row in session.exec(select(CompletionRecord)).all():
                keys.setdefault(row.habit_id, []).append(row.day_key)
            return [_to_domain(record, keys[record.id]) for record in records]

    def get(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by id."""
        with _store_errors("load habit", habit_id=habit_id), self.session_factory() as session:
            record = session.get(HabitRecord, habit_id)
            if record is None:
                return None
            return _to_domain(record, self._keys_for(session, habit_id))

    def create(self, habit: Habit) -> Habit:
        """Persist a new habit together with any completions it carries."""
        with _store_errors("create habit", habit_id=habit.id), self.session_factory() as session:
            session.add(
                HabitRecord(
                    id=habit.id,
                    name=habit.name,
                    color=habit.color,
                    created_at=habit.created_at.astimezone(timezone.utc),
                )
            )
            for key in sorted(habit.completions):
                session.add(CompletionRecord(habit_id=habit.id, day_key=key))
            session.commit()
        logger.info("Habit created", extra={"habit_id": habit.id})
        return habit

    def update(self, habit: Habit) -> Habit:
        """Save the name and color of an existing habit. Completions are left alone."""
        with _store_errors("update habit", habit_id=habit.id), self.session_factory() as session:
            record = session.get(HabitRecord, habit.id)
            if record is None:
                raise HabitStoreError(f"Habit {habit.id} no longer exists")
            record.name = habit.name
            record.color = habit.color
            session.add(record)
            session.commit()
        logger.info("Habit updated", extra={"habit_id": habit.id, "habit_name": habit.name})
        return habit

    def delete(self, habit_id: str) -> None:
        """Delete a habit and its completions; unknown ids are ignored."""
        with _store_errors("delete habit", habit_id=habit_id), self.session_factory() as session:
            record = session.get(HabitRecord, habit_id)
            if record is None:
                return
            session.delete(record)
            session.commit()
        logger.info("Habit deleted", extra={"habit_id": habit_id})

    def set_completion(self, habit_id: str, day_key: str, completed: bool) -> None:
        """Add or remove one completed day. Last write wins."""
        context = {"habit_id": habit_id, "day_key": day_key, "completed": completed}
        with _store_errors("save completion", **context), self.session_factory() as session:
            if session.get(HabitRecord, habit_id) is None:
                raise HabitStoreError(f"Habit {habit_id} no longer exists")
            existing = session.get(CompletionRecord, (habit_id, day_key))
            if completed and existing is None:
                session.add(CompletionRecord(habit_id=habit_id, day_key=day_key))
            elif not completed and existing is not None:
                session.delete(existing)
            session.commit()
