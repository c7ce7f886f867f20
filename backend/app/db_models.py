# backend/app/db_models.py
from sqlalchemy import Column, Integer, String, DateTime, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from datetime import datetime, timezone
import os

from .settings import DB_PATH

os.makedirs(os.path.dirname(DB_PATH), exist_ok=True)
DATABASE_URL = f"sqlite:///{DB_PATH}"

engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()

def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)

class MetricsSnapshot(Base):
    __tablename__ = "metrics_snapshots"
    id = Column(Integer, primary_key=True, index=True)
    computed_at = Column(DateTime)
    saved_at = Column(DateTime, default=_utcnow)
    total_regions = Column(Integer)
    active_alerts = Column(Integer)
    flood_zones = Column(Integer)
    people_at_risk = Column(Integer)
    weather_stations = Column(Integer)

def init_db():
    Base.metadata.create_all(bind=engine)
