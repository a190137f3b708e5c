from sqlalchemy.orm import Session
from typing import List, Optional

from .. import models, schemas
from ..utils.errors import Conflict


class CRUDService:
    def get_service(self, db: Session, service_id: int) -> Optional[models.Service]:
        return db.query(models.Service).filter(models.Service.id == service_id).first()

    def get_service_by_slug(self, db: Session, slug: str) -> Optional[models.Service]:
        return db.query(models.Service).filter(models.Service.slug == slug).first()

    def list_services(self, db: Session, include_inactive: bool = False) -> List[models.Service]:
        query = db.query(models.Service)
        if not include_inactive:
            query = query.filter(models.Service.is_active.is_(True))
        return query.order_by(models.Service.sort_order, models.Service.id).all()

    def create_service(self, db: Session, service: schemas.ServiceCreate) -> models.Service:
        if self.get_service_by_slug(db, service.slug):
            raise Conflict("Service slug already exists", {"slug": "taken"})
        db_service = models.Service(**service.model_dump())
        db.add(db_service)
        db.flush()
        return db_service

    def update_service(
        self,
        db: Session,
        db_service: models.Service,
        service_in: schemas.ServiceUpdate,
    ) -> models.Service:
        update_data = service_in.model_dump(exclude_unset=True)
        slug = update_data.get("slug")
        if slug and slug != db_service.slug and self.get_service_by_slug(db, slug):
            raise Conflict("Service slug already exists", {"slug": "taken"})
        for key, value in update_data.items():
            setattr(db_service, key, value)
        db.flush()
        return db_service


service = CRUDService()
