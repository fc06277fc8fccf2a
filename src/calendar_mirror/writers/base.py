"""Abstract base class for calendar writers."""

from abc import ABC, abstractmethod

from ..models.event import MirroredEvent


class CalendarWriter(ABC):
    """Abstract base class for calendar writers."""

    @abstractmethod
    def create_event(
        self,
        event: MirroredEvent,
        calendar_id: str = "primary",
    ) -> str:
        """
        Create a new event, keeping the identifier carried by ``event``.

        Args:
            event: MirroredEvent to create
            calendar_id: Calendar ID

        Returns:
            Created event ID

        Raises:
            CalendarWriteError: If event creation fails
        """

    @abstractmethod
    def update_event(
        self,
        event: MirroredEvent,
        calendar_id: str = "primary",
    ) -> None:
        """
        Replace an existing event with ``event`` (matched by ``event.id``).

        Args:
            event: MirroredEvent with updated data
            calendar_id: Calendar ID

        Raises:
            LockedResourceError: If the provider forbids editing the event
            CalendarWriteError: If event update fails
        """

    @abstractmethod
    def delete_event(
        self,
        event_id: str,
        calendar_id: str = "primary",
    ) -> None:
        """
        Delete an event.

        Args:
            event_id: Event identifier
            calendar_id: Calendar ID

        Raises:
            CalendarWriteError: If event deletion fails
        """
