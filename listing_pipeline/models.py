# listing_pipeline/models.py
from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# -----------------------------
# Core enums
# -----------------------------
class JobRunStatus(str, enum.Enum):
    running = "running"
    success = "success"
    failed = "failed"


def _uuid() -> str:
    return str(uuid.uuid4())


# -----------------------------
# Listings
# -----------------------------
class Agent(Base):
    __tablename__ = "agents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(120))
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Property(Base):
    __tablename__ = "properties"
    __table_args__ = (UniqueConstraint("slug", name="uq_property_slug"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    title: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(255))
    seo_slug: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    price: Mapped[int | None] = mapped_column(Integer, nullable=True)
    price_display: Mapped[str | None] = mapped_column(String(60), nullable=True)

    property_type: Mapped[str] = mapped_column(String(40))
    location: Mapped[str] = mapped_column(String(120), index=True)
    micro_market: Mapped[str | None] = mapped_column(String(120), nullable=True)
    project_name: Mapped[str] = mapped_column(String(255), index=True)
    bhk_config: Mapped[str] = mapped_column(String(40), index=True)

    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    area_sqft: Mapped[float | None] = mapped_column(Float, nullable=True)
    floor_number: Mapped[str | None] = mapped_column(String(40), nullable=True)
    total_floors: Mapped[str | None] = mapped_column(String(40), nullable=True)
    facing: Mapped[str | None] = mapped_column(String(40), nullable=True)
    parking_spaces: Mapped[int | None] = mapped_column(Integer, nullable=True)

    ownership_type: Mapped[str | None] = mapped_column(String(40), nullable=True)
    possession_status: Mapped[str | None] = mapped_column(String(40), nullable=True)
    furnished_status: Mapped[str | None] = mapped_column(String(40), nullable=True)

    # "/images/placeholder-property.png" until real media is attached
    main_image_url: Mapped[str] = mapped_column(String(512), index=True)
    image_gallery: Mapped[list] = mapped_column(JSON, default=list)
    amenities: Mapped[list] = mapped_column(JSON, default=list)
    unique_features: Mapped[list] = mapped_column(JSON, default=list)
    nearby_landmarks: Mapped[dict] = mapped_column(JSON, default=dict)

    google_maps_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    status: Mapped[str] = mapped_column(String(40), default="active")
    agent_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


# -----------------------------
# Reference data (seeded)
# -----------------------------
class City(Base):
    __tablename__ = "cities"
    __table_args__ = (UniqueConstraint("city_name", name="uq_city_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    city_name: Mapped[str] = mapped_column(String(120))
    country: Mapped[str] = mapped_column(String(80))

    url_slug: Mapped[str] = mapped_column(String(160))
    seo_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    h1_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hero_hook: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city_overview_seo: Mapped[str | None] = mapped_column(Text, nullable=True)

    page_status: Mapped[str] = mapped_column(String(20), default="draft")
    average_price_sqft: Mapped[float | None] = mapped_column(Float, nullable=True)
    annual_appreciation_pct: Mapped[float | None] = mapped_column(Float, nullable=True)
    rental_yield_pct: Mapped[float | None] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class MicroMarket(Base):
    __tablename__ = "micro_markets"
    __table_args__ = (UniqueConstraint("city_id", "micro_market_name", name="uq_micro_market_city_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    micro_market_name: Mapped[str] = mapped_column(String(120))
    city_id: Mapped[int] = mapped_column(ForeignKey("cities.id"), index=True)

    url_slug: Mapped[str] = mapped_column(String(160))
    seo_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    h1_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hero_hook: Mapped[str | None] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(String(20), default="draft")
    price_per_sqft_min: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Developer(Base):
    __tablename__ = "developers"
    __table_args__ = (UniqueConstraint("primary_market_id", "developer_name", name="uq_developer_city_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    developer_name: Mapped[str] = mapped_column(String(120))
    primary_market_id: Mapped[int] = mapped_column(ForeignKey("cities.id"), index=True)

    url_slug: Mapped[str] = mapped_column(String(160))
    seo_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    hero_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    long_description_seo: Mapped[str | None] = mapped_column(Text, nullable=True)

    specialization: Mapped[str | None] = mapped_column(String(120), nullable=True)
    years_in_business: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_projects: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_sft_delivered: Mapped[str | None] = mapped_column(String(60), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_name: Mapped[str] = mapped_column(String(255))

    micro_market_id: Mapped[int] = mapped_column(ForeignKey("micro_markets.id"), index=True)
    developer_id: Mapped[int] = mapped_column(ForeignKey("developers.id"), index=True)
    city_id: Mapped[int] = mapped_column(ForeignKey("cities.id"), index=True)

    url_slug: Mapped[str] = mapped_column(String(160))
    seo_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    h1_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hero_hook: Mapped[str | None] = mapped_column(String(255), nullable=True)
    project_overview_seo: Mapped[str | None] = mapped_column(Text, nullable=True)

    price_range_text: Mapped[str | None] = mapped_column(String(80), nullable=True)
    completion_status: Mapped[str | None] = mapped_column(String(40), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="draft")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class JobRun(Base):
    """
    Tracks operator-triggered runs (bulk insert, media update, seeding).
    """
    __tablename__ = "job_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    job_name: Mapped[str] = mapped_column(String(80), index=True)

    status: Mapped[JobRunStatus] = mapped_column(Enum(JobRunStatus), default=JobRunStatus.running, index=True)

    started_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # store error stack or message
    error: Mapped[str | None] = mapped_column(Text, nullable=True)

    # optional metadata: {"rows": 45, "drive_folder_url": ...}
    meta_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary_json: Mapped[str | None] = mapped_column(Text, nullable=True)


# Table-name registry used by the generic store.
TABLES: dict[str, type[Base]] = {
    "agents": Agent,
    "properties": Property,
    "cities": City,
    "micro_markets": MicroMarket,
    "developers": Developer,
    "projects": Project,
}
