import os
import json
import logging
from typing import Any, Dict, List

from sqlalchemy import delete
from sqlalchemy.orm import Session

from config.db_config import SessionLocal, create_tables
from models.course import Challenge, ChallengeOption, ChallengeType, Course, Lesson, Unit
from models.user_progress import ChallengeProgress, UserProgress

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

# Children first, so foreign keys never point at deleted rows
CLEAR_ORDER = [ChallengeProgress, UserProgress, ChallengeOption, Challenge, Lesson, Unit, Course]


class SeedValidationError(ValueError):
    pass


def validate_data(data: List[Dict[str, Any]], schema: Dict[str, Any]) -> bool:
    """
    Basic validation for the data structure against a schema.
    """
    for record in data:
        for field, field_schema in schema.items():
            if field not in record:
                if field_schema.get('required', True):
                    logger.error(f"Missing required field '{field}' in record: {record}")
                    return False
            else:
                value = record[field]
                expected_type = field_schema['type']
                if value is None and not field_schema.get('required', True):
                    continue
                # bool is an int subclass; keep booleans out of integer fields
                if isinstance(value, bool) and expected_type is not bool:
                    logger.error(f"Field '{field}' has incorrect type in record: {record}")
                    return False
                if not isinstance(value, expected_type):
                    logger.error(f"Field '{field}' has incorrect type in record: {record}")
                    return False
    return True


def load_json_data(file_path: str, data_dir: str = DATA_DIR) -> List[Dict[str, Any]]:
    """
    Load data from a JSON file located in the 'data' directory.
    """
    full_path = os.path.join(data_dir, file_path)

    try:
        with open(full_path, 'r', encoding='utf-8') as file:
            return json.load(file)
    except FileNotFoundError:
        logger.error(f"File not found: {full_path}")
        raise
    except json.JSONDecodeError:
        logger.error(f"Invalid JSON format in file: {full_path}")
        raise


def seed_table(session: Session, model, data_file: str, schema: Dict[str, Dict[str, Any]], data_dir: str = DATA_DIR):
    """
    Insert every record of a data file into the model's table.
    """
    data = load_json_data(data_file, data_dir)

    # Validate the data before seeding
    if not validate_data(data, schema):
        raise SeedValidationError(f"Data validation failed for file: {data_file}")

    session.add_all(model(**record) for record in data)
    session.flush()
    logger.info(f"Seeded {len(data)} rows into {model.__tablename__}")


def clear_tables(session: Session):
    for model in CLEAR_ORDER:
        session.execute(delete(model))
    logger.info("Cleared existing rows")


def seed_catalog(session: Session, data_dir: str = DATA_DIR):
    seed_table(session, Course, "courses.json", {
        "id": {"type": int, "required": True},
        "title": {"type": str, "required": True},
        "image_src": {"type": str, "required": True},
    }, data_dir)
    seed_table(session, Unit, "units.json", {
        "id": {"type": int, "required": True},
        "course_id": {"type": int, "required": True},
        "title": {"type": str, "required": True},
        "description": {"type": str, "required": True},
        "order": {"type": int, "required": True},
    }, data_dir)
    seed_table(session, Lesson, "lessons.json", {
        "id": {"type": int, "required": True},
        "unit_id": {"type": int, "required": True},
        "title": {"type": str, "required": True},
        "order": {"type": int, "required": True},
    }, data_dir)

    challenges = load_json_data("challenges.json", data_dir)
    for record in challenges:
        if record.get("type") not in ChallengeType.__members__:
            raise SeedValidationError(f"Unknown challenge type in record: {record}")
    seed_table(session, Challenge, "challenges.json", {
        "id": {"type": int, "required": True},
        "lesson_id": {"type": int, "required": True},
        "type": {"type": str, "required": True},
        "question": {"type": str, "required": True},
        "order": {"type": int, "required": True},
    }, data_dir)
    seed_table(session, ChallengeOption, "challengeOptions.json", {
        "id": {"type": int, "required": True},
        "challenge_id": {"type": int, "required": True},
        "text": {"type": str, "required": True},
        "correct": {"type": bool, "required": True},
        "image_src": {"type": str, "required": False},
        "audio_src": {"type": str, "required": False},
    }, data_dir)


def seed_all(session_factory=SessionLocal, data_dir: str = DATA_DIR):
    """
    Wipe the database and load the fixed catalog.
    Destructive: all user progress is removed too.
    """
    logger.info("Starting database seeding...")
    session = session_factory()
    try:
        clear_tables(session)
        seed_catalog(session, data_dir)
        session.commit()
        logger.info("Database seeding completed successfully!")
    except Exception as e:
        session.rollback()
        logger.error(f"Database seeding failed: {e}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    create_tables()
    seed_all()
