
from typing import Optional

from sqlalchemy.orm import Session

from learnix.models.base import utcnow
from learnix.models.user import User


class UserRepository:
    def get_by_external_id(self, db: Session, external_id: str) -> Optional[User]:
        return db.query(User).filter(User.external_id == external_id).first()

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def create(
        self,
        db: Session,
        external_id: str,
        name: str,
        email: str,
        image: Optional[str],
        role: Optional[str] = None,
    ) -> User:
        user = User(
            external_id=external_id,
            name=name,
            email=email,
            image=image,
            email_verified=True,
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def update_profile(
        self,
        db: Session,
        user: User,
        name: str,
        image: Optional[str],
        external_id: Optional[str] = None,
    ) -> User:
        """Refreshes provider-owned fields; role and ban state are never touched here."""
        user.name = name
        user.image = image
        user.email_verified = True
        user.updated_at = utcnow()
        if external_id:
            user.external_id = external_id
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
