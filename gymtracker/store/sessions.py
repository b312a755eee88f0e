"""Session store: the completed-session log plus the single active session.

Every mutation is written through to a key-value store straight away. Write
failures are logged and swallowed; the in-memory state stays authoritative
for the rest of the process.
"""

import json
import logging
from collections.abc import Mapping
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError

from gymtracker.env_loader import get_data_dir, get_user_timezone, load_environment
from gymtracker.load.legacy import (
    LegacySession,
    convert_legacy_session,
    is_legacy_format,
)
from gymtracker.models import Exercise, ExerciseSet, Session, SessionCategory
from gymtracker.storage.kv import JsonFileKeyValueStore, KeyValueStore
from gymtracker.utils import ids
from gymtracker.utils.ids import IdGenerator, random_id
from gymtracker.utils.timezone import (
    group_sessions_by_local_date,
    local_dates_with_sessions,
)

logger = logging.getLogger(__name__)

SESSIONS_KEY = "sessions"
ACTIVE_SESSION_KEY = "active-session"

Clock = Callable[[], datetime]

# Payload keys accepted by update_session, by JSON alias or attribute name.
_SESSION_FIELD_NAMES: dict[str, str] = {}
for _name, _field in Session.model_fields.items():
    _SESSION_FIELD_NAMES[_name] = _name
    if _field.alias:
        _SESSION_FIELD_NAMES[_field.alias] = _name


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _sort_newest_first(sessions: list[Session]) -> None:
    sessions.sort(key=lambda s: s.start_time, reverse=True)


class SessionStore:
    """Owns the completed sessions and the active-session slot.

    Args:
        storage: Key-value layer the state is persisted to.
        id_generator: Source of new session IDs and of exercise IDs for
            names that aren't in the catalog.
        clock: Returns the current time; used for start and end stamps.
        user_timezone: IANA timezone for calendar-date views. None means the
            machine's local timezone.
        autoload: Load persisted state on construction.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        id_generator: IdGenerator = random_id,
        clock: Clock = utc_now,
        user_timezone: str | None = None,
        autoload: bool = True,
    ):
        self.storage = storage
        self.id_generator = id_generator
        self.clock = clock
        self.user_timezone = user_timezone
        self.sessions: list[Session] = []
        self.active_session: Session | None = None
        if autoload:
            self.load()

    # --- Persistence ---

    def load(self) -> None:
        """Replace in-memory state with what's persisted."""
        self.sessions = self._load_sessions()
        self.active_session = self._load_active_session()
        logger.info(
            f"Loaded {len(self.sessions)} sessions "
            f"({'with' if self.active_session else 'no'} active session)"
        )

    def save(self) -> None:
        """Persist both the completed sessions and the active slot."""
        self._save_sessions()
        self._save_active_session()

    def _read(self, key: str) -> Any:
        try:
            raw = self.storage.get_item(key)
        except Exception as e:
            logger.error(
                f"Failed to read {key!r} from storage: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring malformed JSON stored under {key!r}: {e}")
            return None

    def _load_sessions(self) -> list[Session]:
        items = self._read(SESSIONS_KEY)
        if items is None:
            return []
        if not isinstance(items, list):
            logger.warning(
                f"Ignoring stored sessions: expected a list, got {type(items).__name__}"
            )
            return []
        sessions = []
        for index, item in enumerate(items):
            try:
                sessions.append(Session.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping stored session at index {index}: {e}")
        _sort_newest_first(sessions)
        return sessions

    def _load_active_session(self) -> Session | None:
        item = self._read(ACTIVE_SESSION_KEY)
        if item is None:
            return None
        try:
            return Session.model_validate(item)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable active session: {e}")
            return None

    def _save_sessions(self) -> None:
        try:
            payload = json.dumps([s.to_json_dict() for s in self.sessions])
            self.storage.set_item(SESSIONS_KEY, payload)
        except Exception as e:
            logger.error(
                f"Failed to save sessions: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )

    def _save_active_session(self) -> None:
        try:
            if self.active_session is None:
                self.storage.remove_item(ACTIVE_SESSION_KEY)
            else:
                payload = json.dumps(self.active_session.to_json_dict())
                self.storage.set_item(ACTIVE_SESSION_KEY, payload)
        except Exception as e:
            logger.error(
                f"Failed to save active session: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )

    # --- Active session ---

    def start_session(self, category: SessionCategory | None = None) -> Session:
        """Start a new active session, replacing any session already active."""
        if self.active_session is not None:
            logger.info(
                f"Replacing active session {self.active_session.id} with a new one"
            )
        self.active_session = Session(
            id=ids.session_id(self.id_generator),
            start_time=self.clock(),
            category=category,
            exercises=[],
        )
        self._save_active_session()
        logger.info(f"Started session {self.active_session.id}")
        return self.active_session

    def add_exercise(self, name: str) -> Exercise | None:
        if self.active_session is None:
            return None
        exercise = Exercise(
            id=ids.exercise_id(name, self.id_generator), name=name, sets=[]
        )
        self.active_session.exercises.append(exercise)
        self._save_active_session()
        return exercise

    def add_set(
        self, exercise_id: str, exercise_set: ExerciseSet | Mapping[str, Any]
    ) -> None:
        """Append a set to the first exercise with the given ID.

        A set whose values don't validate is logged and ignored.
        """
        if self.active_session is None:
            return
        exercise = self.active_session.find_exercise(exercise_id)
        if exercise is None:
            return
        if isinstance(exercise_set, ExerciseSet):
            exercise_set = exercise_set.model_copy()
        else:
            try:
                exercise_set = ExerciseSet.model_validate(exercise_set)
            except ValidationError as e:
                logger.warning(f"Ignoring invalid set for exercise {exercise_id}: {e}")
                return
        exercise.sets.append(exercise_set)
        self._save_active_session()

    def remove_set(self, exercise_id: str, index: int) -> None:
        """Remove the set at a position. Out-of-range or negative indices do nothing."""
        if self.active_session is None:
            return
        exercise = self.active_session.find_exercise(exercise_id)
        if exercise is None or not 0 <= index < len(exercise.sets):
            return
        del exercise.sets[index]
        self._save_active_session()

    def remove_exercise(self, exercise_id: str) -> None:
        if self.active_session is None:
            return
        exercise = self.active_session.find_exercise(exercise_id)
        if exercise is None:
            return
        self.active_session.exercises.remove(exercise)
        self._save_active_session()

    def finish_session(self) -> Session | None:
        """Stamp the active session's end time and move it to the completed log.

        Returns:
            A copy of the finished session, or None if nothing was active.
        """
        if self.active_session is None:
            return None
        finished = self.active_session
        finished.end_time = self.clock()
        self.sessions.append(finished)
        _sort_newest_first(self.sessions)
        self._save_sessions()
        # Not atomic with the write above; a crash here leaves the session in
        # both places until the active slot is next written.
        self.active_session = None
        self._save_active_session()
        logger.info(f"Finished session {finished.id}")
        return finished.model_copy(deep=True)

    def cancel_session(self) -> None:
        if self.active_session is not None:
            logger.info(f"Cancelled session {self.active_session.id}")
        self.active_session = None
        self._save_active_session()

    # --- Completed sessions ---

    def _index_of(self, session_id: str) -> int | None:
        return next(
            (i for i, s in enumerate(self.sessions) if s.id == session_id), None
        )

    def get_session_by_id(self, session_id: str) -> Session | None:
        index = self._index_of(session_id)
        return None if index is None else self.sessions[index]

    def delete_session(self, session_id: str) -> None:
        index = self._index_of(session_id)
        if index is None:
            return
        del self.sessions[index]
        self._save_sessions()
        logger.info(f"Deleted session {session_id}")

    def update_session(
        self, session_id: str, fields: Mapping[str, Any]
    ) -> Session | None:
        """Merge fields into a completed session.

        Keys may be attribute names or JSON aliases. The session's ID never
        changes, even if the payload carries a different one.

        Raises:
            ValidationError: If the merged session isn't valid.
        """
        index = self._index_of(session_id)
        if index is None:
            return None
        current = self.sessions[index]
        data = current.model_dump()
        for key, value in fields.items():
            name = _SESSION_FIELD_NAMES.get(key)
            if name is None:
                logger.warning(f"Ignoring unknown session field {key!r} in update")
                continue
            data[name] = value
        data["id"] = current.id
        updated = Session.model_validate(data)
        self.sessions[index] = updated
        _sort_newest_first(self.sessions)
        self._save_sessions()
        return updated

    # --- Import ---

    def import_sessions(
        self, data: Any, id_generator: IdGenerator | None = None
    ) -> int:
        """Merge exported sessions (current or legacy format) into the log.

        Sessions whose ID is already present are dropped; stored sessions are
        never overwritten.

        Args:
            data: Decoded JSON export.
            id_generator: ID source for converted legacy sessions. Defaults to
                the store's own generator, which also supplies IDs for
                uncatalogued legacy exercises.

        Returns:
            The number of sessions added.

        Raises:
            ValueError: If the data isn't a list of sessions.
        """
        id_generator = id_generator or self.id_generator
        if is_legacy_format(data):
            incoming = self._convert_legacy(data, id_generator)
        elif isinstance(data, list):
            incoming = self._decode_current(data)
        else:
            raise ValueError("Invalid import format: expected a list of sessions")

        existing_ids = {s.id for s in self.sessions}
        added = []
        for session in incoming:
            if session.id in existing_ids:
                continue
            existing_ids.add(session.id)
            added.append(session)

        self.sessions.extend(added)
        _sort_newest_first(self.sessions)
        self._save_sessions()
        logger.info(
            f"Imported {len(added)} sessions "
            f"(skipped {len(incoming) - len(added)} duplicates)"
        )
        return len(added)

    def _convert_legacy(
        self, items: list[Any], id_generator: IdGenerator
    ) -> list[Session]:
        sessions = []
        for index, item in enumerate(items):
            if not isinstance(item, (Mapping, LegacySession)):
                logger.warning(
                    f"Skipping legacy item at index {index}: not an object"
                )
                continue
            sessions.append(
                convert_legacy_session(item, id_generator, self.id_generator)
            )
        return sessions

    def _decode_current(self, items: list[Any]) -> list[Session]:
        sessions = []
        for index, item in enumerate(items):
            if isinstance(item, Session):
                sessions.append(item.model_copy(deep=True))
                continue
            if not isinstance(item, Mapping):
                logger.warning(
                    f"Skipping imported item at index {index}: not an object"
                )
                continue
            try:
                sessions.append(Session.model_validate(self._normalize_ids(item)))
            except ValidationError as e:
                logger.warning(f"Skipping imported session at index {index}: {e}")
        return sessions

    def _normalize_ids(self, item: Mapping[str, Any]) -> dict[str, Any]:
        """Make session and exercise IDs non-empty strings."""
        item = dict(item)
        raw_id = item.get("id")
        if isinstance(raw_id, int) and not isinstance(raw_id, bool):
            item["id"] = str(raw_id)
        elif not isinstance(raw_id, str) or not raw_id:
            item["id"] = ids.session_id(self.id_generator)

        exercises = item.get("exercises")
        if isinstance(exercises, list):
            item["exercises"] = [self._normalize_exercise_id(e) for e in exercises]
        return item

    def _normalize_exercise_id(self, exercise: Any) -> Any:
        if not isinstance(exercise, Mapping):
            return exercise
        raw_id = exercise.get("id")
        if isinstance(raw_id, str) and raw_id:
            return exercise
        name = exercise.get("name")
        if not isinstance(name, str):
            # Leave it for validation to reject.
            return exercise
        return {**exercise, "id": ids.exercise_id(name, self.id_generator)}

    # --- Derived views ---

    @property
    def sessions_by_date(self) -> dict[date, list[Session]]:
        """Completed sessions grouped by the local date they started on."""
        return group_sessions_by_local_date(self.sessions, self.user_timezone)

    @property
    def dates_with_sessions(self) -> set[date]:
        return local_dates_with_sessions(self.sessions, self.user_timezone)

    @property
    def total_sessions(self) -> int:
        return len(self.sessions)


def open_session_store(data_dir: Path | str | None = None) -> SessionStore:
    """Open the session store backed by JSON files in the configured data directory."""
    load_environment()
    directory = Path(data_dir) if data_dir is not None else get_data_dir()
    logger.debug(f"Opening session store in {directory}")
    return SessionStore(
        JsonFileKeyValueStore(directory), user_timezone=get_user_timezone()
    )
