"""
Reading store service.

Keeps the in-memory reading collection sorted newest first and mirrors the
whole collection to the key-value backend after every mutation.
"""

import json
import logging

from pydantic import ValidationError as PydanticValidationError

from glucose_log.domain.reading import Reading, ReadingDraft, build_reading
from glucose_log.infrastructure.storage.kv_store import KeyValueStore
from glucose_log.utils.exceptions import StorageError
from glucose_log.utils.identifiers import ReadingIdGenerator
from glucose_log.utils.parameters import StorageConfig

logger = logging.getLogger(__name__)


def sort_readings(readings: list[Reading]) -> list[Reading]:
    """Return readings ordered by timestamp, newest first (stable for ties)."""
    return sorted(readings, key=lambda r: r.timestamp, reverse=True)


class ReadingStore:
    """
    Persistent collection of glucose readings plus the reminder chat ID.

    Storage failures never propagate out of this class: reads fall back to
    empty values and writes are logged and skipped.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        config: StorageConfig,
        timezone_str: str = "UTC",
        id_generator: ReadingIdGenerator | None = None,
    ) -> None:
        """
        Initialize reading store.

        Args:
            backend: Key-value storage backend.
            config: Storage configuration (slot names).
            timezone_str: Timezone used to derive reading timestamps.
            id_generator: Source of reading IDs. A fresh generator by default.
        """
        self.backend = backend
        self.config = config
        self.timezone_str = timezone_str
        self.id_generator = id_generator or ReadingIdGenerator()
        self.readings: list[Reading] = []

    def load(self) -> list[Reading]:
        """
        Load the persisted collection.

        Returns:
            Readings sorted newest first; empty if nothing is stored or the
            stored payload cannot be decoded.
        """
        try:
            raw = self.backend.get_item(self.config.readings_key)
        except StorageError as e:
            logger.warning(f"No existing data or error loading: {e}")
            raw = None

        readings: list[Reading] = []
        if raw:
            try:
                payload = json.loads(raw)
                if not isinstance(payload, list):
                    raise TypeError(f"expected a list, got {type(payload).__name__}")
                readings = [Reading.model_validate(item) for item in payload]
            except (json.JSONDecodeError, TypeError, PydanticValidationError) as e:
                logger.warning(f"Discarding unreadable readings payload: {e}")
                readings = []

        self.readings = sort_readings(readings)
        self.id_generator.seed([r.id for r in self.readings])
        logger.info(f"Loaded {len(self.readings)} readings")
        return list(self.readings)

    def save(self, readings: list[Reading]) -> None:
        """Serialize and store the full collection. Failures are logged only."""
        payload = json.dumps([r.to_dict() for r in readings])
        try:
            self.backend.set_item(self.config.readings_key, payload)
        except StorageError as e:
            logger.error(f"Error saving data: {e}")

    def add(self, draft: ReadingDraft) -> Reading:
        """
        Validate a draft, insert the resulting reading, and persist.

        Args:
            draft: User-submitted reading draft.

        Returns:
            The stored reading.

        Raises:
            ValidationError: If the draft has no value or cannot be interpreted.
                The collection is left unchanged.
        """
        reading = build_reading(draft, self.id_generator.next_id, self.timezone_str)

        self.readings = sort_readings([*self.readings, reading])
        self.save(self.readings)

        logger.info(f"Added reading {reading.id}: {reading.value} mg/dL at {reading.date} {reading.time}")
        return reading

    def remove(self, reading_id: int) -> list[Reading]:
        """
        Delete a reading by ID and persist. Unknown IDs leave the data as is.

        Args:
            reading_id: ID of the reading to delete.

        Returns:
            The updated collection.
        """
        remaining = [r for r in self.readings if r.id != reading_id]
        if len(remaining) == len(self.readings):
            logger.info(f"Reading {reading_id} not found, nothing removed")
        else:
            logger.info(f"Removed reading {reading_id}")

        self.readings = remaining
        self.save(self.readings)
        return list(self.readings)

    def load_reminder(self) -> str:
        """Return the stored reminder chat ID, or an empty string."""
        try:
            return self.backend.get_item(self.config.reminder_key) or ""
        except StorageError as e:
            logger.warning(f"Could not load reminder chat ID: {e}")
            return ""

    def save_reminder(self, chat_id: str) -> None:
        """Store the reminder chat ID. Failures are logged only."""
        try:
            self.backend.set_item(self.config.reminder_key, chat_id)
            logger.info("Saved reminder chat ID")
        except StorageError as e:
            logger.error(f"Error saving reminder chat ID: {e}")
