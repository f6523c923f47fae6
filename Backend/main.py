"""
LiftLog FastAPI Backend
Workout logging API with muscle engagement analysis and exercise suggestions.
"""
import datetime
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from models import (
    AddExerciseRequest, AnalysisResponse, Exercise, TimePeriod,
    UpdateSetRequest, Workout, WorkoutDayGroup,
)
from catalog import CatalogError, filter_exercises, find_exercise, list_categories, load_catalog
from workout_analysis import run_analysis
from workout_log import (
    DuplicateWorkoutError, EmptyWorkoutError, InvalidSetIndexError, WorkoutNotFoundError, WorkoutStore,
    add_exercise, add_set, group_workouts_by_date, remove_exercise, remove_set,
    start_new_workout, update_set,
)

logger = logging.getLogger(__name__)


def setup_logging():
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# ============================================================
# App Lifecycle
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("Starting %s API...", settings.APP_NAME)

    if app.state.catalog is None:
        try:
            app.state.catalog = load_catalog(
                settings.EXERCISE_CATALOG_PATH, settings.EXCLUDED_CATEGORIES
            )
        except CatalogError as e:
            logger.error("Could not load exercise catalog: %s", e)
            app.state.catalog = []

    yield
    logger.info("Shutting down...")


def create_app(
        catalog: Optional[list[Exercise]] = None,
        store: Optional[WorkoutStore] = None,
) -> FastAPI:
    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Workout logging with muscle engagement analysis",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.catalog = catalog
    app.state.store = store if store is not None else WorkoutStore()

    # CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


def _catalog(request: Request) -> list[Exercise]:
    return request.app.state.catalog or []


def _store(request: Request) -> WorkoutStore:
    return request.app.state.store


def register_routes(app: FastAPI):

    # ============================================================
    # Exercise Catalog
    # ============================================================

    @app.get("/api/exercises", response_model=list[Exercise])
    async def api_list_exercises(request: Request, search: str = "", category: str = "all"):
        """Search the exercise catalog."""
        return filter_exercises(_catalog(request), search, category)

    @app.get("/api/exercises/categories")
    async def api_list_categories(request: Request):
        """Catalog categories for filtering."""
        return {"categories": list_categories(_catalog(request))}

    # ============================================================
    # Draft Workouts
    # ============================================================

    @app.post("/api/drafts", response_model=Workout)
    async def api_start_draft(request: Request, date: Optional[datetime.date] = None):
        """Start a new workout."""
        store = _store(request)
        draft = start_new_workout(today=date, workout_id=store.next_id())
        return store.put_draft(draft)

    @app.get("/api/drafts/{workout_id}", response_model=Workout)
    async def api_get_draft(request: Request, workout_id: int):
        try:
            return _store(request).get_draft(workout_id)
        except WorkoutNotFoundError as e:
            raise HTTPException(404, str(e))

    @app.post("/api/drafts/{workout_id}/exercises", response_model=Workout)
    async def api_add_exercise(request: Request, workout_id: int, body: AddExerciseRequest):
        """Add a catalog exercise to a draft."""
        store = _store(request)
        exercise = find_exercise(_catalog(request), body.name)
        if exercise is None:
            raise HTTPException(404, f"Exercise not found: {body.name}")
        try:
            draft = store.get_draft(workout_id)
        except WorkoutNotFoundError as e:
            raise HTTPException(404, str(e))
        return store.put_draft(add_exercise(draft, exercise))

    @app.delete("/api/drafts/{workout_id}/exercises/{exercise_index}", response_model=Workout)
    async def api_remove_exercise(request: Request, workout_id: int, exercise_index: int):
        return _edit_draft(request, workout_id, lambda d: remove_exercise(d, exercise_index))

    @app.post("/api/drafts/{workout_id}/exercises/{exercise_index}/sets", response_model=Workout)
    async def api_add_set(request: Request, workout_id: int, exercise_index: int):
        """Repeat the last set of an exercise."""
        return _edit_draft(request, workout_id, lambda d: add_set(d, exercise_index))

    @app.patch(
        "/api/drafts/{workout_id}/exercises/{exercise_index}/sets/{set_index}",
        response_model=Workout,
    )
    async def api_update_set(
            request: Request, workout_id: int, exercise_index: int, set_index: int,
            body: UpdateSetRequest,
    ):
        return _edit_draft(
            request, workout_id,
            lambda d: update_set(d, exercise_index, set_index, body.reps, body.weight),
        )

    @app.delete(
        "/api/drafts/{workout_id}/exercises/{exercise_index}/sets/{set_index}",
        response_model=Workout,
    )
    async def api_remove_set(request: Request, workout_id: int, exercise_index: int, set_index: int):
        return _edit_draft(request, workout_id, lambda d: remove_set(d, exercise_index, set_index))

    @app.post("/api/drafts/{workout_id}/save", response_model=Workout)
    async def api_save_draft(request: Request, workout_id: int):
        """Commit a draft to the workout history."""
        try:
            return _store(request).commit_draft(workout_id)
        except WorkoutNotFoundError as e:
            raise HTTPException(404, str(e))
        except EmptyWorkoutError as e:
            raise HTTPException(400, str(e))
        except DuplicateWorkoutError as e:
            raise HTTPException(409, str(e))

    @app.delete("/api/drafts/{workout_id}")
    async def api_discard_draft(request: Request, workout_id: int):
        """Throw away a draft without saving it."""
        try:
            _store(request).discard_draft(workout_id)
        except WorkoutNotFoundError as e:
            raise HTTPException(404, str(e))
        return {"message": "Draft discarded", "workout_id": workout_id}

    # ============================================================
    # Workout History
    # ============================================================

    @app.post("/api/workouts", response_model=Workout)
    async def api_save_workout(request: Request, workout: Workout):
        """Save a complete workout."""
        try:
            return _store(request).save(workout)
        except EmptyWorkoutError as e:
            raise HTTPException(400, str(e))
        except DuplicateWorkoutError as e:
            raise HTTPException(409, str(e))

    @app.get("/api/workouts", response_model=list[WorkoutDayGroup])
    async def api_list_workouts(request: Request):
        """Workout history grouped by day, most recent first."""
        groups = group_workouts_by_date(_store(request).all())
        return [WorkoutDayGroup(date=day, workouts=workouts) for day, workouts in groups]

    @app.get("/api/workouts/{workout_id}", response_model=Workout)
    async def api_get_workout(request: Request, workout_id: int):
        try:
            return _store(request).get(workout_id)
        except WorkoutNotFoundError as e:
            raise HTTPException(404, str(e))

    @app.delete("/api/workouts/{workout_id}")
    async def api_delete_workout(request: Request, workout_id: int):
        try:
            _store(request).delete(workout_id)
        except WorkoutNotFoundError as e:
            raise HTTPException(404, str(e))
        return {"message": "Workout deleted", "workout_id": workout_id}

    # ============================================================
    # Analysis
    # ============================================================

    @app.get("/api/analysis", response_model=AnalysisResponse)
    async def api_get_analysis(
            request: Request,
            days: TimePeriod = Query(TimePeriod(settings.DEFAULT_TIME_PERIOD)),
            today: Optional[datetime.date] = None,
    ):
        """Muscle engagement, heatmap and suggestions for the chosen window."""
        return run_analysis(
            _store(request).all(),
            _catalog(request),
            days,
            today=today,
            limit_per_group=settings.SUGGESTIONS_PER_GROUP,
        )

    # ============================================================
    # Health Check
    # ============================================================

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "version": "1.0.0"
        }

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": f"{settings.APP_NAME} API",
            "version": "1.0.0",
            "docs": "/docs"
        }


def _edit_draft(request: Request, workout_id: int, edit) -> Workout:
    store = _store(request)
    try:
        draft = store.get_draft(workout_id)
        return store.put_draft(edit(draft))
    except WorkoutNotFoundError as e:
        raise HTTPException(404, str(e))
    except InvalidSetIndexError as e:
        raise HTTPException(400, str(e))


setup_logging()
app = create_app()


# ============================================================
# Run Server
# ============================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
