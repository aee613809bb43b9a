from typing import List, Optional
from pydantic import BaseModel


class Course(BaseModel):
    id: int
    title: str
    image_src: str


class UserProgress(BaseModel):
    user_id: str
    user_name: str
    user_image_src: str
    active_course_id: Optional[int] = None
    hearts: int
    points: int
    active_course: Optional[Course] = None


class UserProgressUpsert(BaseModel):
    course_id: int
    user_name: Optional[str] = None
    user_image_src: Optional[str] = None


class UserProgressUpsertResult(BaseModel):
    updated: bool
    redirect: str


# Response Models
class CourseResponse(BaseModel):
    message: str
    data: Course


class CoursesResponse(BaseModel):
    message: str
    data: List[Course]


class UserProgressResponse(BaseModel):
    message: str
    data: Optional[UserProgress] = None


class UserProgressUpsertResponse(BaseModel):
    message: str
    data: UserProgressUpsertResult
