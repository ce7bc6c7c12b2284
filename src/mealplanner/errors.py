"""Error taxonomy shared by services, repositories and routers."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from mealplanner.logging_config import get_logger

logger = get_logger(__name__)


class MealPlannerError(Exception):
    """Base exception for application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MealPlannerError):
    """Raised when caller input is malformed. Nothing has been read or written yet."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(MealPlannerError):
    """Raised when an entity is absent, soft-deleted or owned by someone else."""

    status_code = status.HTTP_404_NOT_FOUND


class StoreError(MealPlannerError):
    """Raised when the database collaborator fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ExternalServiceError(MealPlannerError):
    """Raised when an outside data provider cannot answer."""

    status_code = status.HTTP_502_BAD_GATEWAY


async def meal_planner_error_handler(request: Request, exc: MealPlannerError) -> JSONResponse:
    """Translate application errors into JSON responses."""
    if isinstance(exc, StoreError):
        logger.error(f"Store failure on {request.method} {request.url.path}: {exc.message}")
        detail = "Internal server error"
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        detail = exc.message

    return JSONResponse(status_code=exc.status_code, content={"detail": detail})


def register_error_handlers(app: FastAPI) -> None:
    """Attach the application error handlers to a FastAPI app."""
    app.add_exception_handler(MealPlannerError, meal_planner_error_handler)
