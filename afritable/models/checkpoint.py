"""Job checkpoint ORM model — last processed restaurant id per maintenance job."""

from sqlalchemy import Column, Integer, String, TIMESTAMP, func

from afritable.database import Base


class JobCheckpoint(Base):
    __tablename__ = "job_checkpoints"

    job_name = Column(String(64), primary_key=True)
    last_id = Column(Integer, nullable=False)
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
