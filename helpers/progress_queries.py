"""
Read-side queries for the learn views.

Every view is scoped to the user id passed in at construction. A missing
user id never raises: the views degrade to None, an empty list or 0.
Store errors are not caught here.
"""
import functools
import inspect
import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from models.course import Challenge, ChallengeOption, Course, Lesson, Unit
from models.user_progress import ChallengeProgress, UserProgress

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def row_to_dict(row) -> Dict[str, Any]:
    """Convert a mapped row into a plain dict keyed by column name"""
    return {column.key: getattr(row, column.key) for column in row.__table__.columns}


def is_challenge_completed(progress: List[Dict[str, Any]]) -> bool:
    """A challenge counts as completed when it has progress and all of it is completed"""
    return len(progress) > 0 and all(p["completed"] for p in progress)


def is_lesson_completed(lesson: Dict[str, Any]) -> bool:
    return all(is_challenge_completed(c["challenge_progress"]) for c in lesson["challenges"])


def completion_percentage(completed: int, total: int) -> int:
    """Rounded share of completed items, half-up. 0 when there is nothing to complete"""
    if total <= 0:
        return 0
    return int(math.floor(completed / total * 100 + 0.5))


def request_cached(func):
    """Memoize a query method on its instance, keyed by method name and bound arguments"""
    signature = inspect.signature(func)

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        bound = signature.bind(self, *args, **kwargs)
        bound.apply_defaults()
        key = (func.__name__, tuple(bound.arguments.items())[1:])
        if key not in self._cache:
            self._cache[key] = func(*bound.args, **bound.kwargs)
        return self._cache[key]

    return wrapper


class ProgressQueries:
    """
    Aggregated views over the catalog for a single user.

    Build one instance per request. Results are cached on the instance, so
    it must never be shared between requests or users.
    """

    def __init__(self, session: Session, user_id: Optional[str]):
        self.session = session
        self.user_id = user_id
        self._cache: Dict[tuple, Any] = {}

    # Relation loaders, one query per level

    def _fetch_courses(self, course_ids) -> Dict[int, Dict[str, Any]]:
        if not course_ids:
            return {}
        rows = self.session.scalars(select(Course).where(Course.id.in_(course_ids)))
        return {row.id: row_to_dict(row) for row in rows}

    def _fetch_lessons(self, unit_ids) -> List[Dict[str, Any]]:
        if not unit_ids:
            return []
        rows = self.session.scalars(
            select(Lesson)
            .where(Lesson.unit_id.in_(unit_ids))
            .order_by(Lesson.order, Lesson.id)
        )
        return [row_to_dict(row) for row in rows]

    def _fetch_challenges(self, lesson_ids) -> List[Dict[str, Any]]:
        if not lesson_ids:
            return []
        rows = self.session.scalars(
            select(Challenge)
            .where(Challenge.lesson_id.in_(lesson_ids))
            .order_by(Challenge.order, Challenge.id)
        )
        return [row_to_dict(row) for row in rows]

    def _fetch_challenge_options(self, challenge_ids) -> List[Dict[str, Any]]:
        if not challenge_ids:
            return []
        rows = self.session.scalars(
            select(ChallengeOption)
            .where(ChallengeOption.challenge_id.in_(challenge_ids))
            .order_by(ChallengeOption.id)
        )
        return [row_to_dict(row) for row in rows]

    def _fetch_challenge_progress(self, challenge_ids) -> List[Dict[str, Any]]:
        if not challenge_ids:
            return []
        rows = self.session.scalars(
            select(ChallengeProgress)
            .where(ChallengeProgress.challenge_id.in_(challenge_ids))
            .where(ChallengeProgress.user_id == self.user_id)
            .order_by(ChallengeProgress.id)
        )
        return [row_to_dict(row) for row in rows]

    def _attach_progress(self, challenges: List[Dict[str, Any]]) -> None:
        progress = self._fetch_challenge_progress([c["id"] for c in challenges])
        for challenge in challenges:
            challenge["challenge_progress"] = [p for p in progress if p["challenge_id"] == challenge["id"]]

    @request_cached
    def _load_course_tree(self, course_id: int) -> List[Dict[str, Any]]:
        """
        Units of a course with lessons, challenges and the user's challenge progress.

        Units and lessons come back in ascending order, ties broken by id.
        """
        units = [
            row_to_dict(row)
            for row in self.session.scalars(
                select(Unit).where(Unit.course_id == course_id).order_by(Unit.order, Unit.id)
            )
        ]
        lessons = self._fetch_lessons([u["id"] for u in units])
        challenges = self._fetch_challenges([l["id"] for l in lessons])
        self._attach_progress(challenges)

        for lesson in lessons:
            lesson["challenges"] = [c for c in challenges if c["lesson_id"] == lesson["id"]]
        for unit in units:
            unit["lessons"] = [l for l in lessons if l["unit_id"] == unit["id"]]
        return units

    # Views

    @request_cached
    def get_user_progress(self) -> Optional[Dict[str, Any]]:
        """The user's progress record with its active course embedded"""
        if not self.user_id:
            return None

        row = self.session.get(UserProgress, self.user_id)
        if row is None:
            return None

        data = row_to_dict(row)
        courses = self._fetch_courses([row.active_course_id] if row.active_course_id is not None else [])
        data["active_course"] = courses.get(row.active_course_id)
        return data

    @request_cached
    def get_units(self) -> List[Dict[str, Any]]:
        """
        Units of the active course, each lesson flagged with ``completed``.

        Returns:
            Empty list when there is no user or no active course
        """
        if not self.user_id:
            return []

        user_progress = self.get_user_progress()
        if not user_progress or not user_progress.get("active_course_id"):
            return []

        units = self._load_course_tree(user_progress["active_course_id"])
        return [
            {
                **unit,
                "lessons": [
                    {**lesson, "completed": is_lesson_completed(lesson)}
                    for lesson in unit["lessons"]
                ],
            }
            for unit in units
        ]

    @request_cached
    def get_courses(self) -> List[Dict[str, Any]]:
        rows = self.session.scalars(select(Course).order_by(Course.id))
        return [row_to_dict(row) for row in rows]

    @request_cached
    def get_course_by_id(self, course_id: int) -> Optional[Dict[str, Any]]:
        row = self.session.get(Course, course_id)
        return row_to_dict(row) if row is not None else None

    @request_cached
    def get_course_progress(self) -> Optional[Dict[str, Any]]:
        """
        Find the first lesson of the active course that is not completed.

        Returns:
            Dict with ``active_lesson`` and ``active_lesson_id`` (both None when
            the course is finished), or None without a user or active course
        """
        user_progress = self.get_user_progress()
        if not self.user_id or not user_progress or not user_progress.get("active_course_id"):
            return None

        units = self._load_course_tree(user_progress["active_course_id"])
        active_lesson = None
        for unit in units:
            for lesson in unit["lessons"]:
                if not is_lesson_completed(lesson):
                    active_lesson = {
                        **lesson,
                        "unit": {k: v for k, v in unit.items() if k != "lessons"},
                    }
                    break
            if active_lesson is not None:
                break

        return {
            "active_lesson": active_lesson,
            "active_lesson_id": active_lesson["id"] if active_lesson else None,
        }

    @request_cached
    def get_lesson(self, lesson_id: Optional[int] = None) -> Optional[Dict[str, Any]]:
        """
        A lesson with its challenges, options and per-challenge ``completed`` flag.

        Args:
            lesson_id: Lesson to load; defaults to the user's active lesson

        Returns:
            None without a user, when no lesson resolves, or when it has no challenges
        """
        if not self.user_id:
            return None

        if lesson_id is None:
            course_progress = self.get_course_progress()
            lesson_id = course_progress["active_lesson_id"] if course_progress else None
        if lesson_id is None:
            return None

        row = self.session.get(Lesson, lesson_id)
        if row is None:
            return None

        lesson = row_to_dict(row)
        challenges = self._fetch_challenges([lesson["id"]])
        if not challenges:
            return None

        self._attach_progress(challenges)
        options = self._fetch_challenge_options([c["id"] for c in challenges])
        for challenge in challenges:
            challenge["challenge_options"] = [o for o in options if o["challenge_id"] == challenge["id"]]
            challenge["completed"] = is_challenge_completed(challenge["challenge_progress"])

        lesson["challenges"] = challenges
        return lesson

    @request_cached
    def get_lesson_percentage(self) -> int:
        """Share of the active lesson's challenges already completed, 0-100"""
        course_progress = self.get_course_progress()
        if not course_progress or course_progress["active_lesson_id"] is None:
            return 0

        lesson = self.get_lesson(course_progress["active_lesson_id"])
        if not lesson:
            return 0

        completed = sum(1 for c in lesson["challenges"] if c["completed"])
        return completion_percentage(completed, len(lesson["challenges"]))
