"""
Feedback Service
Anonymous student feedback on faculty, and the admin statistics over it.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from auxia.core.exceptions import ValidationError
from auxia.core.logging_config import logger
from auxia.models.course import Course
from auxia.models.faculty import Faculty
from auxia.models.feedback import Feedback, student_feedbacks
from auxia.models.student import Student
from auxia.services.base import BaseService
from auxia.services.relations import STUDENT_FEEDBACKS


class FeedbackService(BaseService):
    """Service for feedback"""

    def __init__(self, db: AsyncSession):
        super().__init__(db)

    async def submit_feedback(
        self,
        student_id: str,
        faculty_id: str,
        feedback_text: str,
        course_id: Optional[str] = None,
    ) -> Feedback:
        """Store feedback as anonymous; only the student's own log points at it"""
        if not feedback_text or not feedback_text.strip():
            raise ValidationError("Feedback text is required", field="feedback_text")

        async with self.transaction():
            await self._load(Student, student_id)
            await self._load(Faculty, faculty_id)
            if course_id is not None:
                await self._load(Course, course_id)

            feedback = Feedback(
                faculty_id=faculty_id,
                course_id=course_id,
                feedback_text=feedback_text.strip(),
                anonymous=True,
            )
            self.db.add(feedback)
            await self.db.flush()
            await STUDENT_FEEDBACKS.link(self.db, student_id, feedback.id)

        # No student id here: the log must not de-anonymise feedback
        logger.log_domain_event("Feedback", "submitted", feedback.id, faculty_id=faculty_id)
        return feedback

    async def list_student_feedback(self, student_id: str) -> List[Feedback]:
        result = await self.db.execute(
            select(Feedback)
            .join(student_feedbacks, student_feedbacks.c.feedback_id == Feedback.id)
            .where(student_feedbacks.c.student_id == student_id)
            .order_by(Feedback.created_at.desc())
        )
        return list(result.scalars().all())

    async def feedback_stats(self) -> Dict[str, Any]:
        """Per-faculty totals with per-course counts"""
        feedbacks = (await self.db.execute(select(Feedback))).scalars().all()

        course_ids = {f.course_id for f in feedbacks if f.course_id}
        courses: Dict[str, Course] = {}
        if course_ids:
            result = await self.db.execute(select(Course).where(Course.id.in_(course_ids)))
            courses = {c.id: c for c in result.scalars().all()}

        faculty_stats: Dict[str, Dict[str, Any]] = {}
        for feedback in feedbacks:
            stats = faculty_stats.setdefault(feedback.faculty_id, {
                "faculty": feedback.faculty,
                "total_feedback": 0,
                "courses": {},
            })
            stats["total_feedback"] += 1

            if feedback.course_id:
                course_stats = stats["courses"].setdefault(feedback.course_id, {
                    "course": courses.get(feedback.course_id),
                    "course_id": feedback.course_id,
                    "feedback_count": 0,
                })
                course_stats["feedback_count"] += 1

        return {"faculty_stats": faculty_stats, "total_feedbacks": len(feedbacks)}


def get_feedback_service(db: AsyncSession) -> FeedbackService:
    return FeedbackService(db)
