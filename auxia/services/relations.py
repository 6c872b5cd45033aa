"""
Relationship tables.

Each many-to-many link (course-faculty, course-student, club-member,
project-member, project-request, student-feedback) is one row keyed by the
entity pair. `RelationTable` is the only write path for those rows; both
"sides" of the link are read from the same row, so they cannot drift.
"""

from typing import List

from sqlalchemy import Table, select, insert, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from auxia.models.course import course_faculty, course_enrollments
from auxia.models.club import club_memberships, project_members, project_requests
from auxia.models.feedback import student_feedbacks


class RelationTable:
    """Link/unlink/query helper for one association table"""

    def __init__(self, table: Table, left: str, right: str):
        self.table = table
        self.left = table.c[left]
        self.right = table.c[right]

    def _pair(self, left_id: str, right_id: str):
        return (self.left == left_id) & (self.right == right_id)

    async def exists(self, db: AsyncSession, left_id: str, right_id: str) -> bool:
        result = await db.execute(
            select(func.count()).select_from(self.table).where(self._pair(left_id, right_id))
        )
        return result.scalar_one() > 0

    async def link(self, db: AsyncSession, left_id: str, right_id: str) -> None:
        """Insert the pair; a duplicate raises IntegrityError from the primary key"""
        await db.execute(
            insert(self.table).values({self.left.key: left_id, self.right.key: right_id})
        )

    async def unlink(self, db: AsyncSession, left_id: str, right_id: str) -> int:
        """Delete the pair; returns 0 when it was not linked"""
        result = await db.execute(delete(self.table).where(self._pair(left_id, right_id)))
        return result.rowcount

    async def unlink_left(self, db: AsyncSession, left_id: str) -> int:
        result = await db.execute(delete(self.table).where(self.left == left_id))
        return result.rowcount

    async def right_ids(self, db: AsyncSession, left_id: str) -> List[str]:
        result = await db.execute(select(self.right).where(self.left == left_id))
        return [str(v) for v in result.scalars().all()]

    async def left_ids(self, db: AsyncSession, right_id: str) -> List[str]:
        result = await db.execute(select(self.left).where(self.right == right_id))
        return [str(v) for v in result.scalars().all()]

    async def count_left(self, db: AsyncSession, left_id: str) -> int:
        result = await db.execute(
            select(func.count()).select_from(self.table).where(self.left == left_id)
        )
        return result.scalar_one()


COURSE_FACULTY = RelationTable(course_faculty, "course_id", "faculty_id")
COURSE_STUDENTS = RelationTable(course_enrollments, "course_id", "student_id")
CLUB_MEMBERS = RelationTable(club_memberships, "club_id", "student_id")
PROJECT_MEMBERS = RelationTable(project_members, "project_id", "student_id")
PROJECT_REQUESTS = RelationTable(project_requests, "project_id", "student_id")
STUDENT_FEEDBACKS = RelationTable(student_feedbacks, "student_id", "feedback_id")
