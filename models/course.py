import enum
from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, String, Text

from .base import Base


class ChallengeType(str, enum.Enum):
    SELECT = "SELECT"
    ASSIST = "ASSIST"


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    image_src = Column(Text, nullable=False)

    def __repr__(self):
        return f"<Course(id={self.id} title='{self.title}')>"


class Unit(Base):
    __tablename__ = "units"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    order = Column(Integer, nullable=False)


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    unit_id = Column(Integer, ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True)
    order = Column(Integer, nullable=False)


class Challenge(Base):
    __tablename__ = "challenges"

    id = Column(Integer, primary_key=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Enum(ChallengeType, name="challenge_type"), nullable=False)
    question = Column(Text, nullable=False)
    order = Column(Integer, nullable=False)


class ChallengeOption(Base):
    __tablename__ = "challenge_options"

    id = Column(Integer, primary_key=True)
    challenge_id = Column(Integer, ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    correct = Column(Boolean, nullable=False)
    image_src = Column(String, nullable=True)
    audio_src = Column(String, nullable=True)
