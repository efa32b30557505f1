import uuid

from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, Text, JSON, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from stayll.db.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Account owning properties and listings."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    first_name = Column(String)
    last_name = Column(String)
    user_type = Column(String, default="landlord")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    properties = relationship("Property", back_populates="user", cascade="all, delete", passive_deletes=True)
    listings = relationship("Listing", back_populates="user", cascade="all, delete", passive_deletes=True)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class Property(Base):
    """Rental property record."""
    __tablename__ = "properties"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    title = Column(String, nullable=False)
    address = Column(String)
    city = Column(String, index=True)
    state = Column(String)
    zip = Column(String)

    number_of_bedrooms = Column(Integer, default=0)
    number_of_bathrooms = Column(Float, default=0)
    square_footage = Column(Integer)
    rent = Column(Float, default=0)

    description = Column(Text)
    amenities = Column(JSON)  # list of strings
    photos = Column(JSON)
    property_type = Column(String, default="house")
    pet_friendly = Column(Boolean, default=False)
    utilities_included = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="properties")
    listings = relationship("Listing", back_populates="property", cascade="all, delete", passive_deletes=True)

    def __repr__(self):
        return f"<Property(id={self.id}, title='{self.title}')>"


class Listing(Base):
    """Generated marketing text for one property."""
    __tablename__ = "listings"

    id = Column(String, primary_key=True, default=new_id)
    listing_text = Column(Text, nullable=False)
    property_id = Column(String, ForeignKey("properties.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    property = relationship("Property", back_populates="listings")
    user = relationship("User", back_populates="listings")
    analytics = relationship(
        "ListingAnalytics",
        back_populates="listing",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Listing(id={self.id}, property_id={self.property_id})>"


class ListingAnalytics(Base):
    """Engagement counters for one listing.

    Rows are only ever written by ``AnalyticsAggregator`` through single
    SQL ``UPDATE`` statements.
    """
    __tablename__ = "listing_analytics"

    id = Column(String, primary_key=True, default=new_id)
    listing_id = Column(
        String,
        ForeignKey("listings.id", ondelete="CASCADE"),
        unique=True,
        index=True,
        nullable=False,
    )

    views = Column(Integer, nullable=False, default=0)
    inquiries = Column(Integer, nullable=False, default=0)
    favorited = Column(Integer, nullable=False, default=0)
    last_viewed = Column(DateTime(timezone=True))
    average_view_time = Column(Float, nullable=False, default=0.0)  # seconds
    click_through_rate = Column(Float, nullable=False, default=0.0)  # percent

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    listing = relationship("Listing", back_populates="analytics")

    def __repr__(self):
        return f"<ListingAnalytics(listing_id={self.listing_id}, views={self.views})>"
