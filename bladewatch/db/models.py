"""
Database Models
===============

ORM models for turbines, inspections, findings and repair plans.

Ownership cascades from the turbine down: deleting a turbine removes its
inspections, their findings and the repair plan. Two unique keys carry
the core invariants:

    - uq_inspections_turbine_date: one inspection per turbine per day
    - uq_repair_plans_inspection: one repair plan per inspection

Author: Bladewatch Team
Version: 1.0.0
"""

import datetime
from typing import Any, List, Optional

from sqlalchemy import (
    JSON,
    Date,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bladewatch.db.base import Base, TimestampMixin, generate_uuid


SnapshotType = JSON().with_variant(JSONB(), "postgresql")


class TurbineDB(TimestampMixin, Base):
    """A wind turbine. Read-only from the point of view of the core."""

    __tablename__ = "turbines"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    manufacturer: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    mw_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    inspections: Mapped[List["InspectionDB"]] = relationship(
        back_populates="turbine",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class InspectionDB(TimestampMixin, Base):
    """A dated inspection of one turbine."""

    __tablename__ = "inspections"
    __table_args__ = (
        UniqueConstraint("turbine_id", "date", name="uq_inspections_turbine_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    turbine_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("turbines.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Calendar date only; time of day is discarded before storage.
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    inspector_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    data_source: Mapped[str] = mapped_column(String(20), nullable=False)
    raw_package_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    turbine: Mapped[TurbineDB] = relationship(back_populates="inspections")
    findings: Mapped[List["FindingDB"]] = relationship(
        back_populates="inspection",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="FindingDB.created_at",
    )
    repair_plan: Mapped[Optional["RepairPlanDB"]] = relationship(
        back_populates="inspection",
        cascade="all, delete-orphan",
        passive_deletes=True,
        uselist=False,
    )


class FindingDB(TimestampMixin, Base):
    """A defect recorded during an inspection."""

    __tablename__ = "findings"
    __table_args__ = (
        CheckConstraint("estimated_cost >= 0", name="ck_findings_cost_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    inspection_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("inspections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    severity: Mapped[int] = mapped_column(Integer, nullable=False)
    estimated_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    inspection: Mapped[InspectionDB] = relationship(back_populates="findings")


class RepairPlanDB(TimestampMixin, Base):
    """
    Materialized repair plan for an inspection.

    Regenerating a plan rewrites this row in place; the id and created_at
    survive, everything else is replaced.
    """

    __tablename__ = "repair_plans"
    __table_args__ = (
        UniqueConstraint("inspection_id", name="uq_repair_plans_inspection"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    inspection_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("inspections.id", ondelete="CASCADE"),
        nullable=False,
    )
    priority: Mapped[str] = mapped_column(String(10), nullable=False)
    total_estimated_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    snapshot: Mapped[List[dict[str, Any]]] = mapped_column(
        SnapshotType,
        nullable=False,
        default=list,
    )

    inspection: Mapped[InspectionDB] = relationship(back_populates="repair_plan")
