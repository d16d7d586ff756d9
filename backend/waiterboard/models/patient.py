from sqlalchemy import Column, DateTime, Integer, String

from waiterboard.models.base import Base
from waiterboard.utils.time_utils import utcnow


class Patient(Base):
    """
    Directory entry used to pre-fill the order entry form by MRN.
    """

    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    mrn = Column(String, unique=True, index=True, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    dob = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow)
