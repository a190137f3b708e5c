from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from .. import models
from ..utils.pagination import paginate


def get_contact(db: Session, contact_id: int) -> Optional[models.ContactMessage]:
    return db.get(models.ContactMessage, contact_id)


def list_contacts(
    db: Session,
    *,
    status: Optional[models.ContactStatus] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[models.ContactMessage], dict]:
    query = db.query(models.ContactMessage).options(
        joinedload(models.ContactMessage.admin)
    )
    if status is not None:
        query = query.filter(models.ContactMessage.status == status)
    query = query.order_by(
        models.ContactMessage.created_at.desc(), models.ContactMessage.id.desc()
    )
    return paginate(query, page, limit)
