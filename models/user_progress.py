from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text

from config.settings import MAX_HEARTS
from .base import Base


class ChallengeProgress(Base):
    __tablename__ = "challenge_progress"

    id = Column(Integer, primary_key=True)
    user_id = Column(Text, nullable=False, index=True)
    challenge_id = Column(Integer, ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False, index=True)
    completed = Column(Boolean, nullable=False, default=False)


class UserProgress(Base):
    __tablename__ = "user_progress"

    user_id = Column(Text, primary_key=True)
    user_name = Column(Text, nullable=False, default="User")
    user_image_src = Column(Text, nullable=False, default="/mascot.svg")
    active_course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=True)
    hearts = Column(Integer, nullable=False, default=MAX_HEARTS)
    points = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<UserProgress(user='{self.user_id}' course={self.active_course_id} points={self.points})>"
