"""
Location models.

A Location owns exactly one Coordinates row and may reference one shared
CountryPart. CountryPart rows are deduplicated on
(area_name, postal_code, country_part).
"""
from sqlalchemy import Column, Integer, String, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from flightlog.models.base import Base, TimestampMixin, SoftDeleteMixin


class Coordinates(Base):
    __tablename__ = "coordinates"

    id = Column(Integer, primary_key=True, index=True)
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)

    def __repr__(self):
        return f"<Coordinates(id={self.id}, lon={self.longitude}, lat={self.latitude})>"


class CountryPart(Base):
    __tablename__ = "country_parts"

    id = Column(Integer, primary_key=True, index=True)
    area_name = Column(String(255), nullable=False, default="")
    postal_code = Column(String(32), nullable=False, default="")
    country_part = Column(String(255), nullable=False, default="")

    locations = relationship("Location", back_populates="country_part", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("area_name", "postal_code", "country_part", name="uq_country_parts_triple"),
    )

    def __repr__(self):
        return f"<CountryPart(id={self.id}, area='{self.area_name}', postal='{self.postal_code}', part='{self.country_part}')>"


class Location(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)

    # Foreign keys
    coordinates_id = Column(
        Integer,
        ForeignKey("coordinates.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    country_part_id = Column(
        Integer,
        ForeignKey("country_parts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    coordinates = relationship(
        "Coordinates",
        cascade="all, delete-orphan",
        single_parent=True,
        lazy="joined",
    )
    country_part = relationship("CountryPart", back_populates="locations", lazy="joined")

    def __repr__(self):
        return f"<Location(id={self.id}, name='{self.name}')>"
