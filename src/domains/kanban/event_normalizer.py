from collections.abc import Mapping, Sequence

from domains.kanban.errors import MalformedEvent
from domains.kanban.models import MoveEvent
from domains.kanban.timestamps import parse_timestamp


class EventNormalizer:
    """Validates one item's raw move events and returns them strictly time-ordered.

    Raw events are ``(timestamp, stage)`` pairs or mappings with ``at`` and ``stage``
    keys. Timestamps may be datetimes or ISO-8601 strings.
    """

    def normalize(self, item_id: str, raw_events: Sequence) -> tuple[MoveEvent, ...]:
        """Parse, sort and de-duplicate the events of one item.

        - Events sharing a timestamp keep only the one that appears last in the input.
        - Consecutive moves into the same stage collapse into the earliest one.

        Raises:
            MalformedEvent: If the events are not a list, or any event lacks a parseable
                timestamp or a stage name.
        """
        if not isinstance(raw_events, (list, tuple)):
            raise MalformedEvent("Events are not a list", item_id=item_id, events_type=type(raw_events).__name__)

        parsed = [self._parse_event(item_id, position, raw) for position, raw in enumerate(raw_events)]

        # Stable sort; for equal timestamps the later input position ends up last
        parsed.sort(key=lambda entry: (entry[0].at, entry[1]))

        ordered: list[MoveEvent] = []
        for event, _ in parsed:
            if ordered and ordered[-1].at == event.at:
                ordered[-1] = event
            else:
                ordered.append(event)

        normalized: list[MoveEvent] = []
        for event in ordered:
            if normalized and normalized[-1].stage == event.stage:
                continue
            normalized.append(event)
        return tuple(normalized)

    @staticmethod
    def _parse_event(item_id: str, position: int, raw) -> tuple[MoveEvent, int]:
        if isinstance(raw, Mapping):
            timestamp, stage = raw.get("at"), raw.get("stage")
        elif isinstance(raw, (list, tuple)) and len(raw) == 2:
            timestamp, stage = raw
        else:
            raise MalformedEvent("Event is not a (timestamp, stage) pair", item_id=item_id, position=position)

        if not isinstance(stage, str) or not stage.strip():
            raise MalformedEvent("Missing stage name", item_id=item_id, position=position, stage=stage)

        try:
            at = parse_timestamp(timestamp)
        except ValueError as e:
            raise MalformedEvent(
                "Unparseable timestamp", item_id=item_id, position=position, timestamp=timestamp
            ) from e

        return MoveEvent(at=at, stage=stage), position
