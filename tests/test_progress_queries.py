import pytest
from sqlalchemy.exc import OperationalError

from helpers.progress_queries import (
    ProgressQueries,
    completion_percentage,
    is_challenge_completed,
    is_lesson_completed,
)


def _lesson(*progress_lists):
    return {"challenges": [{"challenge_progress": p} for p in progress_lists]}


def test_challenge_without_progress_is_not_completed():
    assert is_challenge_completed([]) is False


def test_challenge_with_any_incomplete_record_is_not_completed():
    assert is_challenge_completed([{"completed": True}, {"completed": False}]) is False
    assert is_challenge_completed([{"completed": True}, {"completed": True}]) is True


def test_lesson_completed_requires_every_challenge():
    assert is_lesson_completed(_lesson([{"completed": True}], [{"completed": True}])) is True
    assert is_lesson_completed(_lesson([{"completed": True}], [])) is False
    assert is_lesson_completed(_lesson([{"completed": True}], [{"completed": False}])) is False


def test_completion_percentage_rounds_half_up():
    assert completion_percentage(2, 3) == 67
    assert completion_percentage(1, 3) == 33
    assert completion_percentage(1, 2) == 50
    assert completion_percentage(1, 8) == 13
    assert completion_percentage(0, 0) == 0
    assert completion_percentage(4, 4) == 100


def test_unauthenticated_user_gets_no_data(two_unit_course, session):
    queries = ProgressQueries(session, None)

    assert queries.get_user_progress() is None
    assert queries.get_units() == []
    assert queries.get_course_progress() is None
    assert queries.get_lesson() is None
    assert queries.get_lesson(1) is None
    assert queries.get_lesson_percentage() == 0


def test_catalog_is_not_scoped_by_user(two_unit_course, session):
    queries = ProgressQueries(session, None)

    assert [c["id"] for c in queries.get_courses()] == [1, 2]
    assert queries.get_course_by_id(2)["title"] == "Espanhol"
    assert queries.get_course_by_id(99) is None


def test_user_progress_embeds_active_course(two_unit_course, session):
    progress = ProgressQueries(session, "user_1").get_user_progress()

    assert progress["user_id"] == "user_1"
    assert progress["active_course_id"] == 1
    assert progress["active_course"]["title"] == "Inglês"
    assert progress["hearts"] == 5
    assert progress["points"] == 0


def test_user_without_record_gets_no_data(two_unit_course, session):
    queries = ProgressQueries(session, "stranger")

    assert queries.get_user_progress() is None
    assert queries.get_units() == []
    assert queries.get_course_progress() is None
    assert queries.get_lesson_percentage() == 0


def test_user_without_active_course_gets_no_units(two_unit_course, session):
    two_unit_course.user("user_2", active_course_id=None)
    two_unit_course.commit()
    queries = ProgressQueries(session, "user_2")

    assert queries.get_user_progress()["active_course"] is None
    assert queries.get_units() == []
    assert queries.get_course_progress() is None


def test_units_flag_lesson_completion(two_unit_course, session):
    two_unit_course.progress("user_1", 1)
    two_unit_course.progress("user_1", 2)
    two_unit_course.progress("user_1", 3)
    two_unit_course.commit()

    units = ProgressQueries(session, "user_1").get_units()

    assert [u["id"] for u in units] == [1, 2]
    assert [(l["id"], l["completed"]) for l in units[0]["lessons"]] == [(1, True), (2, False)]
    assert [(l["id"], l["completed"]) for l in units[1]["lessons"]] == [(3, False)]


def test_units_ignore_other_users_progress(two_unit_course, session):
    two_unit_course.user("user_2", active_course_id=1)
    two_unit_course.progress("user_2", 1)
    two_unit_course.progress("user_2", 2)
    two_unit_course.commit()

    units = ProgressQueries(session, "user_1").get_units()

    assert units[0]["lessons"][0]["completed"] is False


def test_lesson_with_incomplete_record_is_not_completed(two_unit_course, session):
    two_unit_course.progress("user_1", 1)
    two_unit_course.progress("user_1", 2)
    two_unit_course.progress("user_1", 2, completed=False)
    two_unit_course.commit()

    units = ProgressQueries(session, "user_1").get_units()

    assert units[0]["lessons"][0]["completed"] is False


def test_units_come_back_in_order(catalog, session):
    catalog.course(1)
    catalog.unit(10, course_id=1, order=2)
    catalog.unit(20, course_id=1, order=1)
    catalog.lesson(1, unit_id=20, order=3)
    catalog.lesson(2, unit_id=20, order=1)
    catalog.user("user_1", active_course_id=1)
    catalog.commit()

    units = ProgressQueries(session, "user_1").get_units()

    assert [u["id"] for u in units] == [20, 10]
    assert [l["id"] for l in units[0]["lessons"]] == [2, 1]
    assert units[1]["lessons"] == []


def test_active_lesson_is_first_incomplete_lesson(two_unit_course, session):
    two_unit_course.progress("user_1", 1)
    two_unit_course.progress("user_1", 2)
    two_unit_course.progress("user_1", 3)
    two_unit_course.commit()

    course_progress = ProgressQueries(session, "user_1").get_course_progress()

    assert course_progress["active_lesson_id"] == 2
    assert course_progress["active_lesson"]["unit"]["id"] == 1
    assert "lessons" not in course_progress["active_lesson"]["unit"]
    assert [c["id"] for c in course_progress["active_lesson"]["challenges"]] == [3, 4]


def test_active_lesson_moves_to_next_unit(two_unit_course, session):
    for challenge_id in (1, 2, 3, 4):
        two_unit_course.progress("user_1", challenge_id)
    two_unit_course.commit()

    assert ProgressQueries(session, "user_1").get_course_progress()["active_lesson_id"] == 3


def test_finished_course_has_no_active_lesson(two_unit_course, session):
    for challenge_id in (1, 2, 3, 4, 5):
        two_unit_course.progress("user_1", challenge_id)
    two_unit_course.commit()
    queries = ProgressQueries(session, "user_1")

    assert queries.get_course_progress() == {"active_lesson": None, "active_lesson_id": None}
    assert queries.get_lesson() is None
    assert queries.get_lesson_percentage() == 0


def test_get_lesson_defaults_to_active_lesson(two_unit_course, session):
    two_unit_course.progress("user_1", 1)
    two_unit_course.commit()

    lesson = ProgressQueries(session, "user_1").get_lesson()

    assert lesson["id"] == 1
    assert [(c["id"], c["completed"]) for c in lesson["challenges"]] == [(1, True), (2, False)]
    assert len(lesson["challenges"][0]["challenge_options"]) == 3


def test_get_lesson_by_id(two_unit_course, session):
    lesson = ProgressQueries(session, "user_1").get_lesson(3)

    assert lesson["id"] == 3
    assert lesson["unit_id"] == 2
    assert lesson["challenges"][0]["completed"] is False


def test_get_lesson_missing_or_empty_returns_none(two_unit_course, session):
    two_unit_course.lesson(4, unit_id=2, order=2)
    two_unit_course.commit()
    queries = ProgressQueries(session, "user_1")

    assert queries.get_lesson(4) is None
    assert queries.get_lesson(404) is None


def test_lesson_percentage_two_of_three(catalog, session):
    catalog.course(1)
    catalog.unit(1, course_id=1, order=1)
    catalog.lesson(1, unit_id=1, order=1)
    for challenge_id in (1, 2, 3):
        catalog.challenge(challenge_id, lesson_id=1, order=challenge_id)
    catalog.user("user_1", active_course_id=1)
    catalog.progress("user_1", 1)
    catalog.progress("user_1", 2)
    catalog.commit()
    queries = ProgressQueries(session, "user_1")

    assert queries.get_units()[0]["lessons"][0]["completed"] is False
    assert queries.get_lesson_percentage() == 67


def test_lesson_percentage_stays_in_range(two_unit_course, session):
    queries = ProgressQueries(session, "user_1")

    assert queries.get_lesson_percentage() == 0
    assert 0 <= queries.get_lesson_percentage() <= 100


def test_repeated_calls_share_one_result(two_unit_course, session):
    queries = ProgressQueries(session, "user_1")

    assert queries.get_units() is queries.get_units()
    assert queries.get_course_progress() is queries.get_course_progress()
    assert queries.get_lesson(1) is queries.get_lesson(1)
    assert queries.get_lesson(1) is not queries.get_lesson(2)


def test_cache_is_per_instance(two_unit_course, session):
    first = ProgressQueries(session, "user_1")
    assert first.get_course_progress()["active_lesson_id"] == 1

    two_unit_course.progress("user_1", 1)
    two_unit_course.progress("user_1", 2)
    two_unit_course.commit()

    assert first.get_course_progress()["active_lesson_id"] == 1
    assert ProgressQueries(session, "user_1").get_course_progress()["active_lesson_id"] == 2


def test_store_errors_propagate(engine, session):
    with engine.begin() as conn:
        conn.exec_driver_sql("DROP TABLE user_progress")

    with pytest.raises(OperationalError):
        ProgressQueries(session, "user_1").get_user_progress()


def test_keyword_calls_share_the_positional_cache_entry(two_unit_course, session):
    two_unit_course.progress("user_1", 1)
    two_unit_course.commit()
    queries = ProgressQueries(session, "user_1")

    assert queries.get_lesson(lesson_id=3) is queries.get_lesson(3)
    assert queries.get_course_by_id(course_id=2) is queries.get_course_by_id(2)
    assert queries.get_course_by_id(course_id=2)["title"] == "Espanhol"
    assert queries.get_lesson() is queries.get_lesson(None)
    assert queries.get_lesson(lesson_id=None)["id"] == 1


def test_lesson_without_challenges_is_completed_and_skipped(two_unit_course, session):
    two_unit_course.lesson(9, unit_id=1, order=0)
    two_unit_course.commit()
    queries = ProgressQueries(session, "user_1")

    lessons = queries.get_units()[0]["lessons"]
    assert [(l["id"], l["completed"]) for l in lessons] == [(9, True), (1, False), (2, False)]
    assert queries.get_course_progress()["active_lesson_id"] == 1
