from typing import Optional
from fastapi import Depends
from sqlalchemy.orm import Session

from config.db_config import get_db
from helpers.progress_queries import ProgressQueries
from middleware.auth_middleware import get_current_user_id


def get_progress_queries(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
) -> ProgressQueries:
    """
    Per-request query object.
    FastAPI resolves this once per request, so every route dependency in the
    same request shares one cache and no two requests ever do.
    """
    return ProgressQueries(db, user_id)
