"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status
from fastapi.responses import Response

from calorie_tracker.api.errors import register_exception_handlers
from calorie_tracker.api.schemas import (
    DeleteEntriesIn,
    DeleteEntriesOut,
    EntryIn,
    EntryOut,
    GoalIn,
    GoalOut,
    ProfileIn,
    ProfileOut,
)
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.stats import MultiDayStats
from calorie_tracker.services.dashboard import Dashboard, energy_for
from calorie_tracker.services.export import export_entries_csv

_logger = logging.getLogger(__name__)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def current_user(
    request: Request,
    x_api_token: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> str:
    """Return the caller's user id after checking the API token."""
    container = _container(request)
    if not x_api_token or x_api_token != container.settings.api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user id"
        )
    return x_user_id.strip()


def resolve_timezone(request: Request, tz: str | None = Query(default=None)) -> str:
    """Return a valid IANA timezone name from the query or settings."""
    name = tz or _container(request).settings.default_timezone
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {name}",
        ) from exc
    return name


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    register_exception_handlers(app)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profile")
    async def get_profile(
        request: Request, user_id: str = Depends(current_user)
    ) -> ProfileOut | None:
        """Return the stored profile with BMR and TDEE."""
        profile = _container(request).profile_service.get_profile(user_id)
        if profile is None:
            return None
        return ProfileOut.build(profile, energy_for(profile))

    @app.put("/profile")
    async def save_profile(
        payload: ProfileIn, request: Request, user_id: str = Depends(current_user)
    ) -> ProfileOut:
        """Validate and save the profile, recomputing BMR and TDEE."""
        profile = payload.to_domain()
        energy = _container(request).profile_service.save_profile(user_id, profile)
        return ProfileOut.build(profile, energy)

    @app.get("/goal")
    async def get_goal(
        request: Request, user_id: str = Depends(current_user)
    ) -> GoalOut | None:
        """Return the stored goal."""
        goal = _container(request).profile_service.get_goal(user_id)
        if goal is None:
            return None
        return GoalOut(
            target_weight_lbs=goal.target_weight_lbs,
            daily_deficit_goal=goal.daily_deficit_goal,
        )

    @app.put("/goal")
    async def save_goal(
        payload: GoalIn, request: Request, user_id: str = Depends(current_user)
    ) -> GoalOut:
        """Validate and save the goal."""
        goal = _container(request).profile_service.save_goal(
            user_id, payload.to_domain()
        )
        return GoalOut(
            target_weight_lbs=goal.target_weight_lbs,
            daily_deficit_goal=goal.daily_deficit_goal,
        )

    @app.get("/entries")
    async def list_entries(
        request: Request, user_id: str = Depends(current_user)
    ) -> list[EntryOut]:
        """Return all entries, newest first."""
        entries = _container(request).entry_service.list_entries(user_id)
        return [EntryOut.build(entry) for entry in entries]

    @app.post("/entries", status_code=status.HTTP_201_CREATED)
    async def log_entry(
        payload: EntryIn, request: Request, user_id: str = Depends(current_user)
    ) -> EntryOut:
        """Estimate a free-text entry and log it."""
        state_container = _container(request)
        profile = state_container.profile_service.get_profile(user_id)
        entry = await state_container.entry_service.log_text(
            user_id, payload.text, profile
        )
        return EntryOut.build(entry)

    @app.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entry(
        entry_id: str, request: Request, user_id: str = Depends(current_user)
    ) -> Response:
        """Delete one entry."""
        _container(request).entry_service.delete_entry(user_id, entry_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/entries/delete")
    async def delete_entries(
        payload: DeleteEntriesIn,
        request: Request,
        user_id: str = Depends(current_user),
    ) -> DeleteEntriesOut:
        """Delete a batch of entries, reporting success per id."""
        results = _container(request).entry_service.delete_entries(
            user_id, payload.ids
        )
        return DeleteEntriesOut(results=results)

    @app.get("/dashboard")
    async def dashboard(
        request: Request,
        user_id: str = Depends(current_user),
        timezone_name: str = Depends(resolve_timezone),
    ) -> Dashboard:
        """Return today's totals, energy balance and progress ring."""
        return _container(request).dashboard_service.today(user_id, timezone_name)

    @app.get("/stats")
    async def stats(
        request: Request,
        days: int = Query(default=7, ge=1, le=365),
        user_id: str = Depends(current_user),
        timezone_name: str = Depends(resolve_timezone),
    ) -> MultiDayStats:
        """Return averages and estimated fat loss for the trailing window."""
        return _container(request).dashboard_service.stats(
            user_id, days, timezone_name
        )

    @app.get("/export.csv")
    async def export_csv(
        request: Request,
        user_id: str = Depends(current_user),
        timezone_name: str = Depends(resolve_timezone),
    ) -> Response:
        """Download all entries as CSV."""
        entries = _container(request).entry_service.list_entries(user_id)
        _logger.info("Exporting %s entries for user=%s", len(entries), user_id)
        return Response(
            content=export_entries_csv(entries, ZoneInfo(timezone_name)),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="entries.csv"'},
        )

    return app
