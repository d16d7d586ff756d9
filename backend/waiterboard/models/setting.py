from sqlalchemy import Column, DateTime, String, Text

from waiterboard.models.base import Base
from waiterboard.utils.time_utils import utcnow


class Setting(Base):
    """
    Key/value row of the board configuration. Values are stored as text and
    typed by the BoardSettings schema on read.
    """

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
