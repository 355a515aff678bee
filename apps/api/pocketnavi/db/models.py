from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from pocketnavi.core.constants import (
    ARCHITECT_COMPOSITIONS_TABLE,
    BUILDING_ARCHITECTS_TABLE,
    BUILDINGS_TABLE,
    INDIVIDUAL_ARCHITECTS_TABLE,
)

from .session import Base


class Building(Base):
    """One architectural work. Column names keep the content pipeline's camelCase spelling."""
    __tablename__ = BUILDINGS_TABLE

    building_id = Column(BigInteger, primary_key=True)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    title = Column(Text, nullable=True)
    titleEn = Column(Text, nullable=True)
    buildingTypes = Column(Text, nullable=True)  # comma-joined tags
    buildingTypesEn = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    locationEn_from_datasheetChunkEn = Column(Text, nullable=True)
    completionYears = Column(String(64), nullable=True)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    history = Column(Text, nullable=True)
    technical_info = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)

    credits = relationship("BuildingArchitect", back_populates="building")


class BuildingArchitect(Base):
    """Credit of a (possibly group) architect on a building."""
    __tablename__ = BUILDING_ARCHITECTS_TABLE

    building_id = Column(
        BigInteger,
        ForeignKey(f"{BUILDINGS_TABLE}.building_id", ondelete="CASCADE"),
        primary_key=True,
    )
    architect_id = Column(BigInteger, primary_key=True)

    building = relationship("Building", back_populates="credits")

    __table_args__ = (Index("ix_building_architects_architect_id", "architect_id"),)


class ArchitectComposition(Base):
    """Group architect -> individual architect, ordered by order_index."""
    __tablename__ = ARCHITECT_COMPOSITIONS_TABLE

    architect_id = Column(BigInteger, primary_key=True)
    individual_architect_id = Column(
        BigInteger,
        ForeignKey(f"{INDIVIDUAL_ARCHITECTS_TABLE}.individual_architect_id", ondelete="CASCADE"),
        primary_key=True,
    )
    order_index = Column(Integer, nullable=False, default=0)

    individual = relationship("IndividualArchitect", back_populates="compositions")

    __table_args__ = (
        Index("ix_architect_compositions_architect_order", "architect_id", "order_index"),
        Index("ix_architect_compositions_individual", "individual_architect_id"),
    )


class IndividualArchitect(Base):
    __tablename__ = INDIVIDUAL_ARCHITECTS_TABLE

    individual_architect_id = Column(BigInteger, primary_key=True)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    name_ja = Column(Text, nullable=True)
    name_en = Column(Text, nullable=True)
    birth_year = Column(String(16), nullable=True)
    death_year = Column(String(16), nullable=True)
    biography = Column(Text, nullable=True)
    awards = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)

    compositions = relationship("ArchitectComposition", back_populates="individual")
