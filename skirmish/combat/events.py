"""
Event system module for the resolver.

Defines the events an encounter emits for the presentation layer (combat
log, animations, input enabling) and a small bus to dispatch them.
"""

from collections import defaultdict
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum

from catchery import log_warning
from pydantic import BaseModel, Field

from skirmish.combat.outcome import DefeatReport, VictoryReport
from skirmish.combat.results import ActionResult
from skirmish.core.constants import BattlePhase


class EventType(Enum):
    """Enumeration of available event types."""

    ACTION_RESOLVED = "action_resolved"  # An action produced a result
    ACTION_REJECTED = "action_rejected"  # An illegal command was refused
    PHASE_CHANGED = "phase_changed"  # The encounter moved to a new phase
    AC_DISCOVERED = "ac_discovered"  # The monster's armor class was deduced
    ENCOUNTER_WON = "encounter_won"  # The monster reached 0 HP
    ENCOUNTER_LOST = "encounter_lost"  # The player reached 0 HP
    ENCOUNTER_FLED = "encounter_fled"  # The player escaped


class CombatEvent(BaseModel):
    """Base class for all encounter events."""

    event_type: EventType = Field(
        description="The type of event.",
    )
    monster_id: str = Field(
        description="Identifier of the monster the encounter is against.",
    )


class ActionResolved(CombatEvent):
    event_type: EventType = Field(
        default=EventType.ACTION_RESOLVED,
        description="The type of event.",
    )
    result: ActionResult = Field(
        description="The resolved action.",
    )

    def __str__(self) -> str:
        return f"ActionResolved({self.result.kind}: {self.result.message})"


class ActionRejected(CombatEvent):
    event_type: EventType = Field(
        default=EventType.ACTION_REJECTED,
        description="The type of event.",
    )
    command: str = Field(
        description="The command that was refused.",
    )
    reason: str = Field(
        description="User-facing reason for the rejection.",
    )

    def __str__(self) -> str:
        return f"ActionRejected({self.command}: {self.reason})"


class PhaseChanged(CombatEvent):
    event_type: EventType = Field(
        default=EventType.PHASE_CHANGED,
        description="The type of event.",
    )
    previous: BattlePhase = Field(
        description="Phase before the transition.",
    )
    current: BattlePhase = Field(
        description="Phase after the transition.",
    )

    def __str__(self) -> str:
        return f"PhaseChanged({self.previous.value} -> {self.current.value})"


class ArmorClassDiscovered(CombatEvent):
    event_type: EventType = Field(
        default=EventType.AC_DISCOVERED,
        description="The type of event.",
    )
    armor_class: int = Field(
        description="The deduced armor class.",
    )

    def __str__(self) -> str:
        return f"ArmorClassDiscovered({self.monster_id}, ac={self.armor_class})"


class EncounterWon(CombatEvent):
    event_type: EventType = Field(
        default=EventType.ENCOUNTER_WON,
        description="The type of event.",
    )
    report: VictoryReport = Field(
        description="Rewards granted.",
    )


class EncounterLost(CombatEvent):
    event_type: EventType = Field(
        default=EventType.ENCOUNTER_LOST,
        description="The type of event.",
    )
    report: DefeatReport = Field(
        description="Recovery applied.",
    )


class EncounterFled(CombatEvent):
    event_type: EventType = Field(
        default=EventType.ENCOUNTER_FLED,
        description="The type of event.",
    )


EventListener = Callable[[CombatEvent], None]


class EventBus:
    """
    Dispatches encounter events to subscribed listeners.

    Listeners subscribe to a single event type, or to every event when no type
    is given. A listener that raises is logged and skipped so that rendering
    problems never reach the combat state.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventType | None, list[EventListener]] = defaultdict(list)
        self.history: list[CombatEvent] = []
        self._pending: list[CombatEvent] | None = None

    def subscribe(self, listener: EventListener, event_type: EventType | None = None) -> None:
        self._listeners[event_type].append(listener)

    def unsubscribe(self, listener: EventListener, event_type: EventType | None = None) -> None:
        if listener in self._listeners[event_type]:
            self._listeners[event_type].remove(listener)

    def emit(self, event: CombatEvent) -> None:
        if self._pending is not None:
            self._pending.append(event)
            return
        self._dispatch(event)

    @contextmanager
    def deferred(self) -> Iterator[None]:
        """
        Holds back events emitted inside the block.

        They are dispatched when the block exits normally and dropped when it
        raises. Nested blocks join the outermost one.
        """
        if self._pending is not None:
            yield
            return
        self._pending = []
        try:
            yield
        except BaseException:
            self._pending = None
            raise
        pending, self._pending = self._pending, None
        for event in pending:
            self._dispatch(event)

    def _dispatch(self, event: CombatEvent) -> None:
        self.history.append(event)
        for listener in [*self._listeners[event.event_type], *self._listeners[None]]:
            try:
                listener(event)
            except Exception as e:
                log_warning(
                    f"Event listener failed on {event.event_type.value}",
                    {"listener": repr(listener), "error": str(e)},
                )

    def of_type(self, event_type: EventType) -> list[CombatEvent]:
        """Returns every emitted event of the given type, in order."""
        return [event for event in self.history if event.event_type == event_type]
