import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.db_config import create_tables, get_db, get_engine
from models.course import Challenge, ChallengeOption, ChallengeType, Course, Lesson, Unit
from models.user_progress import ChallengeProgress, UserProgress


@pytest.fixture
def engine():
    engine = get_engine("sqlite://", poolclass=StaticPool)
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    import main

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    main.app.dependency_overrides[get_db] = override_get_db
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


class Catalog:
    """Small builder for courses, units, lessons and challenges in tests"""

    def __init__(self, session):
        self.session = session

    def course(self, id, title="Inglês"):
        self.session.add(Course(id=id, title=title, image_src=f"/{id}.svg"))
        self.session.flush()
        return id

    def unit(self, id, course_id, order):
        self.session.add(Unit(id=id, course_id=course_id, title=f"Unit {id}", description="desc", order=order))
        self.session.flush()
        return id

    def lesson(self, id, unit_id, order):
        self.session.add(Lesson(id=id, unit_id=unit_id, title=f"Lesson {id}", order=order))
        self.session.flush()
        return id

    def challenge(self, id, lesson_id, order=1, options=0):
        self.session.add(
            Challenge(id=id, lesson_id=lesson_id, type=ChallengeType.SELECT, question=f"Question {id}", order=order)
        )
        self.session.flush()
        for i in range(options):
            self.session.add(ChallengeOption(challenge_id=id, text=f"option {i}", correct=i == 0))
        self.session.flush()
        return id

    def progress(self, user_id, challenge_id, completed=True):
        self.session.add(ChallengeProgress(user_id=user_id, challenge_id=challenge_id, completed=completed))
        self.session.flush()

    def user(self, user_id, active_course_id=None):
        self.session.add(UserProgress(user_id=user_id, user_name="Ana", user_image_src="/ana.png",
                                      active_course_id=active_course_id))
        self.session.flush()

    def commit(self):
        self.session.commit()


@pytest.fixture
def catalog(session):
    return Catalog(session)


@pytest.fixture
def two_unit_course(catalog):
    """
    Course 1 with units [1, 2] holding lessons [1, 2] and [3].
    Lesson 1 has challenges 1-2, lesson 2 has 3-4, lesson 3 has 5.
    """
    catalog.course(1)
    catalog.course(2, title="Espanhol")
    catalog.unit(1, course_id=1, order=1)
    catalog.unit(2, course_id=1, order=2)
    catalog.lesson(1, unit_id=1, order=1)
    catalog.lesson(2, unit_id=1, order=2)
    catalog.lesson(3, unit_id=2, order=1)
    catalog.challenge(1, lesson_id=1, order=1, options=3)
    catalog.challenge(2, lesson_id=1, order=2, options=3)
    catalog.challenge(3, lesson_id=2, order=1, options=2)
    catalog.challenge(4, lesson_id=2, order=2, options=2)
    catalog.challenge(5, lesson_id=3, order=1, options=2)
    catalog.user("user_1", active_course_id=1)
    catalog.commit()
    return catalog
