import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from review_api.db.base import Base

def new_id() -> str:
	return str(uuid.uuid4())

class User(Base):
	__tablename__ = "users"
	__table_args__ = (UniqueConstraint("username", name="uq_users_username"),)

	id = Column(String(36), primary_key=True)
	username = Column(String(255), index=True, nullable=False)
	password_hash = Column(String(255), nullable=False)

	reviews = relationship("Review", back_populates="user")

	def __repr__(self):
		return f"<User(id={self.id}, username={self.username})>"

class Item(Base):
	__tablename__ = "items"
	__table_args__ = (UniqueConstraint("name", name="uq_items_name"),)

	id = Column(String(36), primary_key=True)
	name = Column(String(255), index=True, nullable=False)
	description = Column(Text, nullable=True)
	category = Column(String(255), nullable=True)

	reviews = relationship("Review", back_populates="item")

class Review(Base):
	__tablename__ = "reviews"
	__table_args__ = (
		UniqueConstraint("user_id", "item_id", name="uq_reviews_user_item"),
		CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
	)

	id = Column(String(36), primary_key=True)
	user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
	item_id = Column(String(36), ForeignKey("items.id"), index=True, nullable=False)
	rating = Column(Integer, nullable=False)
	review_text = Column(Text, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow)

	user = relationship("User", back_populates="reviews")
	item = relationship("Item", back_populates="reviews")

class Comment(Base):
	__tablename__ = "comments"

	id = Column(String(36), primary_key=True)
	review_id = Column(String(36), ForeignKey("reviews.id", ondelete="CASCADE"), index=True, nullable=False)
	user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
	comment_text = Column(Text, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow)

class Favorite(Base):
	__tablename__ = "favorites"
	__table_args__ = (UniqueConstraint("user_id", "item_id", name="uq_favorites_user_item"),)

	id = Column(String(36), primary_key=True)
	user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
	item_id = Column(String(36), ForeignKey("items.id"), index=True, nullable=False)

	item = relationship("Item")

	@property
	def item_name(self):
		return self.item.name if self.item is not None else None
