"""Application services (use cases)."""

from srt_booking.application.ticketing_client import TicketingClient

__all__ = ["TicketingClient"]
