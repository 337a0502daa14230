from fastapi import Request

from app.services.workout_store import WorkoutStore


def get_store(request: Request) -> WorkoutStore:
    """Store criado no startup da aplicação."""
    return request.app.state.store
