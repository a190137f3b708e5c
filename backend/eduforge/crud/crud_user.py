from sqlalchemy.orm import Session
from typing import List, Optional, Tuple

from .. import models, schemas
from ..utils.auth import get_password_hash, normalize_email
from ..utils.pagination import paginate


class CRUDUser:
    def get_user(self, db: Session, user_id: int) -> Optional[models.User]:
        return db.query(models.User).filter(models.User.id == user_id).first()

    def get_user_by_email(self, db: Session, email: str) -> Optional[models.User]:
        return (
            db.query(models.User)
            .filter(models.User.email == normalize_email(email))
            .first()
        )

    def create_user(
        self,
        db: Session,
        user: schemas.UserCreate,
        role: models.UserRole = models.UserRole.STUDENT,
    ) -> models.User:
        db_user = models.User(
            email=normalize_email(user.email),
            password=get_password_hash(user.password),
            name=user.name.strip(),
            phone=user.phone,
            role=role,
        )
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        return db_user

    def list_users(
        self,
        db: Session,
        *,
        role: Optional[models.UserRole] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[models.User], dict]:
        query = db.query(models.User)
        if role is not None:
            query = query.filter(models.User.role == role)
        if search:
            like = f"%{search.strip()}%"
            query = query.filter(
                (models.User.name.ilike(like)) | (models.User.email.ilike(like))
            )
        return paginate(query.order_by(models.User.created_at.desc(), models.User.id.desc()), page, limit)


user = CRUDUser()
