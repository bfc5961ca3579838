from sqlalchemy import Boolean, Column, DateTime, Integer, String, UniqueConstraint, func

from database import Base


class AppConfiguration(Base):
    """One admin-editable option value (e.g. a bank name) within a category."""

    __tablename__ = "app_configuration"
    __table_args__ = (UniqueConstraint("category", "value", name="uq_app_configuration_category_value"),)

    id = Column(String(64), primary_key=True, index=True)
    category = Column(String(32), nullable=False, index=True)
    value = Column(String(256), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
