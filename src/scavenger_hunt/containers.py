"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from scavenger_hunt.adapters.qr_image_client import HttpxQrImageClient, QrImageClient
from scavenger_hunt.adapters.supabase_race_repository import SupabaseRaceRepository
from scavenger_hunt.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from scavenger_hunt.config import Settings
from scavenger_hunt.services.catalog import EventCatalog, load_catalog
from scavenger_hunt.services.leaderboard import LeaderboardService
from scavenger_hunt.services.progress import ProgressService
from scavenger_hunt.services.races import RaceService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog: EventCatalog
    race_service: RaceService
    progress_service: ProgressService
    leaderboard_service: LeaderboardService
    qr_image_client: QrImageClient
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    race_repository = SupabaseRaceRepository(supabase_client)
    session_repository = SupabaseSessionRepository(supabase_client)
    catalog = load_catalog(resolved_settings.events_file)
    race_service = RaceService(
        race_repository=race_repository,
        session_repository=session_repository,
        session_ttl_seconds=resolved_settings.session_ttl_seconds,
    )
    progress_service = ProgressService(
        race_repository=race_repository,
        session_repository=session_repository,
    )
    leaderboard_service = LeaderboardService(race_repository)
    qr_image_client = HttpxQrImageClient.create(resolved_settings.qr_image_base_url)

    async def close_resources() -> None:
        await qr_image_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog=catalog,
        race_service=race_service,
        progress_service=progress_service,
        leaderboard_service=leaderboard_service,
        qr_image_client=qr_image_client,
        close_resources=close_resources,
    )
