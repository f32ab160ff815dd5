from typing import Optional

from sqlalchemy.orm import Session

from learnix.models.enrollment import Enrollment


class EnrollmentRepository:
    def get_for_user(self, db: Session, user_id: str, course_id: str) -> Optional[Enrollment]:
        return (
            db.query(Enrollment)
            .filter(
                Enrollment.user_id == user_id,
                Enrollment.course_id == course_id,
            )
            .first()
        )
