import logging
from typing import Iterable, List, Optional

from fastapi import Request

from .models.client import Client
from .models.invoice import Invoice

logger = logging.getLogger(__name__)


class SessionStore:
    """
    In-memory state for one running service: the seeded clients, the invoice
    collection and the dashboard insight slot.

    Created once at startup and handed to routes through `get_store`, so
    nothing else holds module-level mutable state. Everything here runs on
    the event loop thread; mutations only happen inside request handlers.

    Insight requests are tagged with a generation number. A result is only
    written back if its generation is still the current one, which is how a
    slow AI reply is ignored once the figures it describes have changed.
    """

    def __init__(self, clients: Iterable[Client] = (), invoices: Iterable[Invoice] = ()):
        self.clients: List[Client] = list(clients)
        self.invoices: List[Invoice] = list(invoices)
        self.insights: Optional[str] = None
        self.insight_generation = 0
        self.insight_in_flight = False

    def begin_insight_request(self) -> int:
        self.insight_generation += 1
        self.insight_in_flight = True
        return self.insight_generation

    def complete_insight_request(self, generation: int, text: str) -> bool:
        if generation != self.insight_generation:
            logger.info(
                "Discarding stale insight result (generation %s, current %s)",
                generation, self.insight_generation,
            )
            return False
        self.insights = text
        self.insight_in_flight = False
        return True

    def abandon_insight_request(self, generation: int) -> None:
        # request ended without a result; only the current one owns the flag
        if generation == self.insight_generation:
            self.insight_in_flight = False

    def invalidate_insights(self) -> None:
        # Any outstanding request now belongs to an older generation.
        self.insight_generation += 1
        self.insight_in_flight = False


def get_store(request: Request) -> SessionStore:
    return request.app.state.store
