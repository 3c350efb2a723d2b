from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Index
from sqlalchemy.sql import func
from ..base import Base


class QuestionModel(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    subject = Column(String, nullable=False)
    round = Column(Integer, nullable=False, index=True)
    question_type = Column(String, nullable=False)
    question_role = Column(String, nullable=False, default="Tossup")
    question_number = Column(Integer, nullable=False)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    choices = Column(JSON, nullable=False, default=list)  # W,X,Y,Z or ranked 1..3
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Placement lookups; uniqueness is kept by the swap rule, not the schema
    __table_args__ = (
        Index("ix_question_slot", "subject", "round", "question_role", "question_number"),
    )

    @property
    def slot(self):
        return (self.subject, self.round, self.question_role, self.question_number)
