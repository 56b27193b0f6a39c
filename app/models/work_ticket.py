from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base

class WorkTicket(Base):
    __tablename__ = "work_tickets"

    id = Column(Integer, primary_key=True, index=True)
    ticket_number = Column(String(50), nullable=True)
    cost_centre = Column(String(100), nullable=True)
    activity = Column(String(200), nullable=True)
    operator_name = Column(String(100), nullable=True)
    num_operators = Column(Integer, nullable=False, default=0)

    start_date_time = Column(DateTime, nullable=False)
    start_counter = Column(Integer, nullable=False, default=0)
    end_date_time = Column(DateTime, nullable=False)
    end_counter = Column(Integer, nullable=False, default=0)

    quantity_in = Column(Integer, nullable=False, default=0)
    quantity_out = Column(Integer, nullable=False, default=0)
    material_used = Column(String(500), nullable=True)

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)
    created_by = Column(String(100), nullable=True)
