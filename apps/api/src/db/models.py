import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    CheckConstraint,
    Column,
    String,
    Text,
    Boolean,
    Integer,
    Float,
    DateTime,
    ForeignKey,
    Index,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import relationship

from .session import Base


def uuid4_str():
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(String(32), nullable=False, default="WORKER")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    worker_profile = relationship("WorkerProfile", back_populates="user", uselist=False)


class WorkerProfile(Base):
    """Searchable support-worker profile. Never physically deleted; see is_deleted."""
    __tablename__ = "worker_profiles"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    mobile = Column(String(50), nullable=False)

    # Demographics; date_of_birth is ISO text (YYYY-MM-DD), age is the legacy integer column
    gender = Column(String(32), nullable=True)
    age = Column(Integer, nullable=True)
    date_of_birth = Column(String(20), nullable=True)
    languages = Column(ARRAY(String), nullable=False, default=list)

    location = Column(String(255), nullable=True)
    city = Column(String(255), nullable=True)
    state = Column(String(32), nullable=True)
    postal_code = Column(String(16), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    experience = Column(Text, nullable=True)
    introduction = Column(Text, nullable=True)
    photos = Column(Text, nullable=True)

    is_published = Column(Boolean, nullable=False, default=False)
    is_deleted = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="worker_profile")
    services = relationship("WorkerService", back_populates="worker_profile")
    additional_info = relationship("WorkerAdditionalInfo", back_populates="worker_profile", uselist=False)
    verification_requirements = relationship("VerificationRequirement", back_populates="worker_profile")

    __table_args__ = (
        CheckConstraint(
            "(latitude IS NULL) = (longitude IS NULL)",
            name="ck_worker_profiles_lat_lon_pair",
        ),
        Index("ix_worker_profiles_lat_lon", "latitude", "longitude"),
        Index("ix_worker_profiles_created_at", "created_at"),
    )


class WorkerService(Base):
    """One offered service category per row; subcategory ids only matter for therapeutic supports."""
    __tablename__ = "worker_services"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    worker_profile_id = Column(String(36), ForeignKey("worker_profiles.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(String(100), nullable=False)
    category_name = Column(String(255), nullable=False)
    subcategory_ids = Column(ARRAY(String), nullable=False, default=list)

    worker_profile = relationship("WorkerProfile", back_populates="services")

    __table_args__ = (
        Index("ix_worker_services_worker_profile_id", "worker_profile_id"),
        Index("ix_worker_services_category_name", "category_name"),
    )


class WorkerAdditionalInfo(Base):
    __tablename__ = "worker_additional_info"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    worker_profile_id = Column(
        String(36), ForeignKey("worker_profiles.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    languages = Column(ARRAY(String), nullable=False, default=list)

    worker_profile = relationship("WorkerProfile", back_populates="additional_info")


class VerificationRequirement(Base):
    """A compliance document submitted by a worker."""
    __tablename__ = "verification_requirements"

    id = Column(String(36), primary_key=True, default=uuid4_str)
    worker_profile_id = Column(String(36), ForeignKey("worker_profiles.id", ondelete="CASCADE"), nullable=False)
    requirement_type = Column(String(100), nullable=False)  # Document.id, e.g. police-check
    document_category = Column(String(64), nullable=True)  # e.g. WORKING_RIGHTS
    status = Column(String(32), nullable=False, default="PENDING")  # PENDING, SUBMITTED, APPROVED, REJECTED
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    worker_profile = relationship("WorkerProfile", back_populates="verification_requirements")

    __table_args__ = (
        Index("ix_verification_requirements_worker_profile_id", "worker_profile_id"),
        Index("ix_verification_requirements_profile_type", "worker_profile_id", "requirement_type"),
        Index("ix_verification_requirements_status", "status"),
        Index("ix_verification_requirements_document_category", "document_category"),
    )


class Document(Base):
    """Master list of every document type a worker can upload."""
    __tablename__ = "documents"

    id = Column(String(100), primary_key=True)  # kebab-case, e.g. driver-license-vehicle
    name = Column(String(255), nullable=False)
    category = Column(String(64), nullable=True)
