from typing import List, Optional
from pydantic import BaseModel

from models.course import ChallengeType
from .course_schema import UserProgress


class ChallengeProgress(BaseModel):
    id: int
    user_id: str
    challenge_id: int
    completed: bool


class ChallengeOption(BaseModel):
    id: int
    challenge_id: int
    text: str
    correct: bool
    image_src: Optional[str] = None
    audio_src: Optional[str] = None


class Challenge(BaseModel):
    id: int
    lesson_id: int
    type: ChallengeType
    question: str
    order: int
    challenge_progress: List[ChallengeProgress] = []


class LessonChallenge(Challenge):
    completed: bool
    challenge_options: List[ChallengeOption] = []


class UnitSummary(BaseModel):
    id: int
    title: str
    description: str
    course_id: int
    order: int


class Lesson(BaseModel):
    id: int
    title: str
    unit_id: int
    order: int


class UnitLesson(Lesson):
    completed: bool
    challenges: List[Challenge] = []


class Unit(UnitSummary):
    lessons: List[UnitLesson] = []


class ActiveLesson(Lesson):
    unit: UnitSummary
    challenges: List[Challenge] = []


class CourseProgress(BaseModel):
    active_lesson: Optional[ActiveLesson] = None
    active_lesson_id: Optional[int] = None


class LessonDetail(Lesson):
    challenges: List[LessonChallenge]


class ChallengeProgressUpsert(BaseModel):
    challenge_id: int


class ChallengeProgressResult(BaseModel):
    outcome: str


class LearnPage(BaseModel):
    user_progress: Optional[UserProgress] = None
    units: List[Unit] = []
    course_progress: Optional[CourseProgress] = None
    lesson_percentage: int = 0


# Response Models
class UnitsResponse(BaseModel):
    message: str
    data: List[Unit]


class CourseProgressResponse(BaseModel):
    message: str
    data: Optional[CourseProgress] = None


class LessonResponse(BaseModel):
    message: str
    data: Optional[LessonDetail] = None


class LessonPercentageResponse(BaseModel):
    message: str
    data: int


class LearnPageResponse(BaseModel):
    message: str
    data: LearnPage


class ChallengeProgressResponse(BaseModel):
    message: str
    data: ChallengeProgressResult
