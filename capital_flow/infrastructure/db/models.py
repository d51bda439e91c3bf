"""
Database Models (SQLAlchemy ORM)
One classified day per row
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, Index

from capital_flow.infrastructure.db.database import Base


class FlowHistoryModel(Base):
    """Daily classification record (one per calendar date)"""
    __tablename__ = "flow_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, unique=True, index=True)
    timestamp = Column(DateTime, nullable=False)

    btc = Column(String(8), nullable=False)
    gold = Column(String(8), nullable=False)
    usdjpy = Column(String(8), nullable=False)
    eurusd = Column(String(8), nullable=False)

    scenario_id = Column(Integer, nullable=False)
    scenario_name = Column(String(200), nullable=False)
    confidence = Column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_flow_history_timestamp", "timestamp"),
    )
