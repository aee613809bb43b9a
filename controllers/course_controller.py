from fastapi import APIRouter, Depends, HTTPException
import logging

from controllers.dependencies import get_progress_queries
from helpers.progress_queries import ProgressQueries
from schemas.course_schema import CourseResponse, CoursesResponse

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

router = APIRouter()


@router.get("/courses/", response_model=CoursesResponse)
async def list_courses(queries: ProgressQueries = Depends(get_progress_queries)):
    """List the full course catalog"""
    try:
        courses = queries.get_courses()
        return {
            "message": "Courses retrieved successfully",
            "data": courses
        }
    except Exception as e:
        logger.error(f"Error listing courses: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to list courses: {str(e)}")


@router.get("/courses/{course_id}", response_model=CourseResponse)
async def get_course(course_id: int, queries: ProgressQueries = Depends(get_progress_queries)):
    """Get a single course"""
    try:
        course = queries.get_course_by_id(course_id)
    except Exception as e:
        logger.error(f"Error getting course {course_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to get course: {str(e)}")

    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return {
        "message": "Course retrieved successfully",
        "data": course
    }
