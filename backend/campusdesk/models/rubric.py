"""Rubric and criterion models."""


from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, Float
from sqlalchemy.orm import relationship
import uuid

from ..database import Base
from ..utils import utcnow

MAX_CRITERION_POINTS = 1000


class Rubric(Base):
    """Rubric model."""
    __tablename__ = "rubrics"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text)
    created_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    created_by_user = relationship("User")
    criteria = relationship("RubricCriterion", back_populates="rubric",
                            order_by="RubricCriterion.order", cascade="all, delete-orphan")
    assignments = relationship("Assignment", back_populates="rubric")

    def __repr__(self):
        return f"<Rubric(id={self.id}, title='{self.title}')>"

    @property
    def total_points(self):
        """Calculate total points for this rubric."""
        return sum(criterion.max_points for criterion in self.criteria)

    @property
    def criterion_count(self):
        return len(self.criteria)

    def get_criterion(self, criterion_id: str):
        """Get a specific criterion by id, or None if it is not on this rubric."""
        for criterion in self.criteria:
            if criterion.id == criterion_id:
                return criterion
        return None


class RubricCriterion(Base):
    __tablename__ = "rubric_criteria"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    rubric_id = Column(String(36), ForeignKey("rubrics.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    max_points = Column(Float, nullable=False)
    order = Column(Integer, default=0)

    rubric = relationship("Rubric", back_populates="criteria")
    scores = relationship("RubricScore", back_populates="criterion", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<RubricCriterion(id={self.id}, title='{self.title}', max_points={self.max_points})>"
