from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from config.db_config import get_db
from config.settings import LEARN_PATH
from controllers.dependencies import get_progress_queries
from helpers.progress_actions import (
    ChallengeNotFoundError,
    CourseNotFoundError,
    UnauthorizedError,
    UserProgressNotFoundError,
    upsert_challenge_progress,
    upsert_user_progress,
)
from helpers.progress_queries import ProgressQueries
from middleware.auth_middleware import require_user_id
from schemas.course_schema import UserProgressResponse, UserProgressUpsert, UserProgressUpsertResponse
from schemas.learn_schema import ChallengeProgressResponse, ChallengeProgressUpsert

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

router = APIRouter()


@router.get("/user-progress/", response_model=UserProgressResponse)
async def get_user_progress(queries: ProgressQueries = Depends(get_progress_queries)):
    """Current user's progress with the active course, or null"""
    try:
        return {
            "message": "User progress retrieved successfully",
            "data": queries.get_user_progress()
        }
    except Exception as e:
        logger.error(f"Error getting user progress: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to get user progress: {str(e)}")


@router.post("/user-progress/", response_model=UserProgressUpsertResponse)
async def select_course(
    request: UserProgressUpsert,
    user_id: str = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Make a course the user's active course"""
    try:
        updated = upsert_user_progress(
            db,
            user_id,
            request.course_id,
            user_name=request.user_name,
            user_image_src=request.user_image_src,
        )
    except UnauthorizedError:
        raise HTTPException(status_code=401, detail="Unauthorized")
    except CourseNotFoundError:
        raise HTTPException(status_code=404, detail="Course not found")
    except Exception as e:
        db.rollback()
        logger.error(f"Error selecting course {request.course_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Something went wrong")

    return {
        "message": "Active course updated" if updated else "Course already active",
        "data": {"updated": updated, "redirect": LEARN_PATH}
    }


@router.post("/challenge-progress/", response_model=ChallengeProgressResponse)
async def complete_challenge(
    request: ChallengeProgressUpsert,
    user_id: str = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Record a correct answer for a challenge"""
    try:
        outcome = upsert_challenge_progress(db, user_id, request.challenge_id)
    except UnauthorizedError:
        raise HTTPException(status_code=401, detail="Unauthorized")
    except (ChallengeNotFoundError, UserProgressNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving progress for challenge {request.challenge_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Something went wrong")

    return {
        "message": "Challenge progress saved",
        "data": {"outcome": outcome}
    }
