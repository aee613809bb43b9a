import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from config.settings import MAX_HEARTS, POINTS_PER_CHALLENGE
from models.course import Challenge, Course
from models.user_progress import ChallengeProgress, UserProgress

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class ProgressActionError(Exception):
    """Base class for failed progress mutations"""


class UnauthorizedError(ProgressActionError):
    pass


class CourseNotFoundError(ProgressActionError):
    pass


class ChallengeNotFoundError(ProgressActionError):
    pass


class UserProgressNotFoundError(ProgressActionError):
    pass


def upsert_user_progress(
    session: Session,
    user_id: Optional[str],
    course_id: int,
    user_name: Optional[str] = None,
    user_image_src: Optional[str] = None,
) -> bool:
    """
    Set the user's active course, creating their progress record on first use.

    Args:
        session: Open database session
        user_id: Current user, from the identity provider
        course_id: Course to make active
        user_name: Display name stored on first creation or refreshed on update
        user_image_src: Avatar stored on first creation or refreshed on update

    Returns:
        False when the course was already active and nothing was written,
        True otherwise
    """
    if not user_id:
        raise UnauthorizedError("Unauthorized")

    course = session.get(Course, course_id)
    if course is None:
        raise CourseNotFoundError(f"Course {course_id} not found")

    existing = session.get(UserProgress, user_id)
    if existing is not None and existing.active_course_id == course_id:
        logger.info(f"Course {course_id} already active for user {user_id}")
        return False

    if existing is not None:
        existing.active_course_id = course_id
        if user_name:
            existing.user_name = user_name
        if user_image_src:
            existing.user_image_src = user_image_src
    else:
        session.add(
            UserProgress(
                user_id=user_id,
                active_course_id=course_id,
                user_name=user_name or "User",
                user_image_src=user_image_src or "/mascot.svg",
                hearts=MAX_HEARTS,
                points=0,
            )
        )

    session.commit()
    logger.info(f"Active course for user {user_id} set to {course_id}")
    return True


def upsert_challenge_progress(session: Session, user_id: Optional[str], challenge_id: int) -> str:
    """
    Record a correct answer for a challenge.

    The first correct answer creates a completed progress record. Answering an
    already attempted challenge again counts as practice: its records are marked
    completed and one heart is refilled. Both award points.

    Returns:
        "completed" or "practice"
    """
    if not user_id:
        raise UnauthorizedError("Unauthorized")

    user_progress = session.get(UserProgress, user_id)
    if user_progress is None:
        raise UserProgressNotFoundError(f"No progress for user {user_id}")

    challenge = session.get(Challenge, challenge_id)
    if challenge is None:
        raise ChallengeNotFoundError(f"Challenge {challenge_id} not found")

    existing = session.scalars(
        select(ChallengeProgress)
        .where(ChallengeProgress.challenge_id == challenge_id)
        .where(ChallengeProgress.user_id == user_id)
    ).all()

    if existing:
        for progress in existing:
            progress.completed = True
        user_progress.hearts = min(user_progress.hearts + 1, MAX_HEARTS)
        outcome = "practice"
    else:
        session.add(ChallengeProgress(user_id=user_id, challenge_id=challenge_id, completed=True))
        outcome = "completed"

    user_progress.points = user_progress.points + POINTS_PER_CHALLENGE
    session.commit()
    logger.info(f"Challenge {challenge_id} {outcome} by user {user_id}")
    return outcome
