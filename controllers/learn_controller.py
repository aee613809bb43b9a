from fastapi import APIRouter, Depends, HTTPException
import logging

from controllers.dependencies import get_progress_queries
from helpers.progress_queries import ProgressQueries
from schemas.learn_schema import (
    CourseProgressResponse,
    LearnPageResponse,
    LessonPercentageResponse,
    LessonResponse,
    UnitsResponse,
)

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

router = APIRouter()
lessons_router = APIRouter()


@router.get("/", response_model=LearnPageResponse)
async def get_learn_page(queries: ProgressQueries = Depends(get_progress_queries)):
    """Everything the learn page renders, built from one request's cache"""
    try:
        data = {
            "user_progress": queries.get_user_progress(),
            "units": queries.get_units(),
            "course_progress": queries.get_course_progress(),
            "lesson_percentage": queries.get_lesson_percentage(),
        }
        return {"message": "Learn page retrieved successfully", "data": data}
    except Exception as e:
        logger.error(f"Error building learn page: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to build learn page: {str(e)}")


@router.get("/units", response_model=UnitsResponse)
async def get_units(queries: ProgressQueries = Depends(get_progress_queries)):
    """Units of the active course with per-lesson completion"""
    try:
        return {"message": "Units retrieved successfully", "data": queries.get_units()}
    except Exception as e:
        logger.error(f"Error getting units: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to get units: {str(e)}")


@router.get("/course-progress", response_model=CourseProgressResponse)
async def get_course_progress(queries: ProgressQueries = Depends(get_progress_queries)):
    try:
        return {"message": "Course progress retrieved successfully", "data": queries.get_course_progress()}
    except Exception as e:
        logger.error(f"Error getting course progress: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to get course progress: {str(e)}")


@router.get("/lesson-percentage", response_model=LessonPercentageResponse)
async def get_lesson_percentage(queries: ProgressQueries = Depends(get_progress_queries)):
    try:
        return {"message": "Lesson percentage retrieved successfully", "data": queries.get_lesson_percentage()}
    except Exception as e:
        logger.error(f"Error getting lesson percentage: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to get lesson percentage: {str(e)}")


@lessons_router.get("/active", response_model=LessonResponse)
async def get_active_lesson(queries: ProgressQueries = Depends(get_progress_queries)):
    """The user's current lesson, or null when there is none"""
    try:
        return {"message": "Lesson retrieved successfully", "data": queries.get_lesson()}
    except Exception as e:
        logger.error(f"Error getting active lesson: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to get lesson: {str(e)}")


@lessons_router.get("/{lesson_id}", response_model=LessonResponse)
async def get_lesson(lesson_id: int, queries: ProgressQueries = Depends(get_progress_queries)):
    """A lesson with challenges and options, or null when missing or empty"""
    try:
        return {"message": "Lesson retrieved successfully", "data": queries.get_lesson(lesson_id)}
    except Exception as e:
        logger.error(f"Error getting lesson {lesson_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to get lesson: {str(e)}")
