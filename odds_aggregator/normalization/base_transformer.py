from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, List, Optional, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from odds_aggregator.models.event import Event

RawT = TypeVar("RawT", bound=BaseModel)


class BaseTransformer(ABC, Generic[RawT]):
    """Turns one provider's raw records into unified events.

    A record that fails to parse or transform is logged and skipped; it never
    aborts the rest of the batch.
    """

    source_name: str = "Unknown"
    raw_model: type[RawT]

    def parse(self, raw_record: Any) -> Optional[RawT]:
        """Validates a raw record against the provider schema, or returns None."""
        if isinstance(raw_record, self.raw_model):
            return raw_record
        try:
            return self.raw_model.model_validate(raw_record)
        except ValidationError as e:
            logger.debug(
                f"Skipping malformed {self.source_name} record ({e.error_count()} validation errors)"
            )
            return None

    def transform(self, raw_records: Iterable[Any]) -> List[Event]:
        events: List[Event] = []
        skipped = 0

        for raw_record in raw_records or []:
            parsed = self.parse(raw_record)
            if parsed is None:
                skipped += 1
                continue
            try:
                event = self.transform_record(parsed)
            except Exception as e:
                logger.warning(
                    f"Failed to transform {self.source_name} record {getattr(parsed, 'id', '?')}: {e}"
                )
                skipped += 1
                continue
            if event is None:
                skipped += 1
                continue
            events.append(event)

        logger.debug(
            f"{self.source_name}: transformed {len(events)} events, skipped {skipped} records."
        )
        return events

    @abstractmethod
    def transform_record(self, record: RawT) -> Optional[Event]:
        """Builds one unified event from a validated raw record."""
        pass
