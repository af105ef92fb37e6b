"""
Dependency injection container using dependency-injector.
Wires the clock, event bus, HTTP client, bank holiday feed and health stack.
"""

from typing import Optional
from dependency_injector import containers, providers

from tracker.core.change_log import register_change_log
from tracker.core.clock import Clock, SystemClock
from tracker.core.config import settings
from tracker.core.events import EventBus
from tracker.core.integrations.bank_holiday_feed import BankHolidayFeedClient
from tracker.core.integrations.http.http_client import HttpClient
from tracker.services.health_service import HealthService
from tracker.controllers.health_controller import HealthController


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Configuration
    config = providers.Configuration()

    # "Today" for every calculation
    clock = providers.Singleton(SystemClock)

    event_bus = providers.Singleton(EventBus)

    # Integrations
    http_client = providers.Singleton(
        HttpClient,
        timeout=config.http_timeout_seconds,
        max_retries=config.http_max_retries,
    )

    bank_holiday_feed = providers.Singleton(
        BankHolidayFeedClient,
        http_client=http_client,
        url=config.bank_holiday_feed_url,
    )

    # Services
    health_service = providers.Singleton(
        HealthService,
        clock=clock,
    )

    # Controllers
    health_controller = providers.Factory(
        HealthController,
        health_service=health_service,
    )


# Global container instance
_container: Optional[Container] = None


def build_container() -> Container:
    """Create a container configured from settings."""
    container = Container()
    container.config.from_dict({
        "database_url": settings.DATABASE_URL,
        "bank_holiday_feed_url": settings.BANK_HOLIDAY_FEED_URL,
        "http_timeout_seconds": settings.HTTP_TIMEOUT_SECONDS,
        "http_max_retries": settings.HTTP_MAX_RETRIES,
    })
    register_change_log(container.event_bus())
    return container


def get_container() -> Container:
    """Get the global dependency injection container."""
    global _container
    if _container is None:
        _container = build_container()
    return _container


def get_clock() -> Clock:
    """FastAPI dependency for the clock."""
    return get_container().clock()


def get_event_bus() -> EventBus:
    """FastAPI dependency for the event bus."""
    return get_container().event_bus()


def get_bank_holiday_feed() -> BankHolidayFeedClient:
    """FastAPI dependency for the bank holiday feed client."""
    return get_container().bank_holiday_feed()


def get_health_controller() -> HealthController:
    return get_container().health_controller()
