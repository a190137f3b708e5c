from sqlalchemy import Column, Integer, String, Text

from .base import BaseModel


class SystemSetting(BaseModel):
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, unique=True, index=True, nullable=False)
    value = Column(Text, nullable=False)
    category = Column(String, nullable=False, default="general", index=True)
