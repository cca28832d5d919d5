"""Setting model - global key/value application settings."""
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from linkshelf.models.base import Base, TimestampMixin


class Setting(Base, TimestampMixin):
    """
    Global setting stored as a string.

    Boolean flags use the "0"/"1" convention; see
    services.settings_service.setting_enabled for how they are read.
    """

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
