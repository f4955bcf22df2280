from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from review_api.core.errors import (
	AppError,
	DuplicateFavorite,
	DuplicateName,
	DuplicateReview,
	ForeignKeyViolation,
	ValidationError,
)
from review_api.db.integrity import is_foreign_key_violation, is_unique_violation
from review_api.db.models import Comment, Favorite, Item, Review, User, new_id

MIN_RATING = 1
MAX_RATING = 5

def _check_rating(rating) -> None:
	if isinstance(rating, bool) or not isinstance(rating, int):
		raise ValidationError("Rating must be an integer")
	if rating < MIN_RATING or rating > MAX_RATING:
		raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

def _require_text(value: str | None, field: str) -> str:
	value = (value or "").strip()
	if not value:
		raise ValidationError(f"{field} must not be empty")
	return value


class EntityRepository:
	"""Items, reviews, comments and favorites.

	Every write is committed as its own transaction. Uniqueness and references
	are checked by the database; an ``IntegrityError`` is rolled back and
	re-raised as the matching error kind. Update and delete statements on
	reviews and comments are always scoped by ``id`` and owner, and report a
	miss as ``None``/``False`` without saying which of the two did not match.
	"""

	def __init__(self, db: Session):
		self.db = db

	def _commit(self, duplicate: AppError | None = None, missing_reference: AppError | None = None) -> None:
		try:
			self.db.commit()
		except IntegrityError as exc:
			self.db.rollback()
			if duplicate is not None and is_unique_violation(exc):
				raise duplicate
			if missing_reference is not None and is_foreign_key_violation(exc):
				raise missing_reference
			raise AppError("Could not save record", details=str(exc.orig))

	# ---- items ----

	def create_item(self, name: str, description: str | None = None, category: str | None = None) -> Item:
		item = Item(
			id=new_id(),
			name=_require_text(name, "Name"),
			description=description,
			category=category,
		)
		self.db.add(item)
		self._commit(duplicate=DuplicateName())
		self.db.refresh(item)
		return item

	def list_items(self) -> list[Item]:
		return self.db.query(Item).order_by(Item.name.asc()).all()

	def get_item(self, item_id: str) -> Item | None:
		return self.db.query(Item).filter(Item.id == item_id).first()

	# ---- reviews ----

	def create_review(self, owner_id: str, item_id: str, rating: int, review_text: str | None = None) -> Review:
		_check_rating(rating)
		review = Review(
			id=new_id(),
			user_id=owner_id,
			item_id=item_id,
			rating=rating,
			review_text=review_text,
		)
		self.db.add(review)
		self._commit(
			duplicate=DuplicateReview(),
			missing_reference=ForeignKeyViolation("Referenced item or user not found"),
		)
		self.db.refresh(review)
		return review

	def get_review(self, review_id: str) -> Review | None:
		return self.db.query(Review).filter(Review.id == review_id).first()

	def fetch_item_reviews(self, item_id: str) -> list[dict]:
		rows = (
			self.db.query(Review, User.username)
			.join(User, Review.user_id == User.id)
			.filter(Review.item_id == item_id)
			.order_by(Review.created_at.desc(), Review.id.asc())
			.all()
		)
		return [
			{
				"id": review.id,
				"user_id": review.user_id,
				"item_id": review.item_id,
				"rating": review.rating,
				"review_text": review.review_text,
				"created_at": review.created_at,
				"username": username,
			}
			for review, username in rows
		]

	def list_reviews_by_user(self, user_id: str) -> list[Review]:
		return (
			self.db.query(Review)
			.filter(Review.user_id == user_id)
			.order_by(Review.created_at.desc(), Review.id.asc())
			.all()
		)

	def update_review(
		self,
		review_id: str,
		owner_id: str,
		rating: int | None = None,
		review_text: str | None = None,
	) -> Review | None:
		values = {}
		if rating is not None:
			_check_rating(rating)
			values[Review.rating] = rating
		if review_text is not None:
			values[Review.review_text] = review_text
		if not values:
			raise ValidationError("Nothing to update")

		count = (
			self.db.query(Review)
			.filter(Review.id == review_id, Review.user_id == owner_id)
			.update(values, synchronize_session=False)
		)
		if not count:
			self.db.rollback()
			return None
		self._commit()
		return self.get_review(review_id)

	def delete_review(self, review_id: str, owner_id: str) -> bool:
		owned = select(Review.id).where(Review.id == review_id, Review.user_id == owner_id)
		# comments go with their review, in the same transaction
		self.db.query(Comment).filter(Comment.review_id.in_(owned)).delete(synchronize_session=False)
		count = (
			self.db.query(Review)
			.filter(Review.id == review_id, Review.user_id == owner_id)
			.delete(synchronize_session=False)
		)
		if not count:
			self.db.rollback()
			return False
		self._commit()
		return True

	# ---- comments ----

	def create_comment(self, owner_id: str, review_id: str, comment_text: str) -> Comment:
		comment = Comment(
			id=new_id(),
			review_id=review_id,
			user_id=owner_id,
			comment_text=_require_text(comment_text, "Comment"),
		)
		self.db.add(comment)
		self._commit(missing_reference=ForeignKeyViolation("Referenced review or user not found"))
		self.db.refresh(comment)
		return comment

	def get_comment(self, comment_id: str) -> Comment | None:
		return self.db.query(Comment).filter(Comment.id == comment_id).first()

	def list_review_comments(self, review_id: str) -> list[Comment]:
		return (
			self.db.query(Comment)
			.filter(Comment.review_id == review_id)
			.order_by(Comment.created_at.asc(), Comment.id.asc())
			.all()
		)

	def list_comments_by_user(self, user_id: str) -> list[Comment]:
		return (
			self.db.query(Comment)
			.filter(Comment.user_id == user_id)
			.order_by(Comment.created_at.desc(), Comment.id.asc())
			.all()
		)

	def update_comment(self, comment_id: str, owner_id: str, comment_text: str) -> Comment | None:
		text = _require_text(comment_text, "Comment")
		count = (
			self.db.query(Comment)
			.filter(Comment.id == comment_id, Comment.user_id == owner_id)
			.update({Comment.comment_text: text}, synchronize_session=False)
		)
		if not count:
			self.db.rollback()
			return None
		self._commit()
		return self.get_comment(comment_id)

	def delete_comment(self, comment_id: str, owner_id: str) -> bool:
		count = (
			self.db.query(Comment)
			.filter(Comment.id == comment_id, Comment.user_id == owner_id)
			.delete(synchronize_session=False)
		)
		if not count:
			self.db.rollback()
			return False
		self._commit()
		return True

	# ---- favorites ----

	def create_favorite(self, user_id: str, item_id: str) -> Favorite:
		favorite = Favorite(id=new_id(), user_id=user_id, item_id=item_id)
		self.db.add(favorite)
		self._commit(
			duplicate=DuplicateFavorite(),
			missing_reference=ForeignKeyViolation("Referenced item or user not found"),
		)
		self.db.refresh(favorite)
		return favorite

	def list_favorites(self, user_id: str) -> list[Favorite]:
		return self.db.query(Favorite).filter(Favorite.user_id == user_id).all()

	def delete_favorite(self, favorite_id: str, user_id: str) -> bool:
		count = (
			self.db.query(Favorite)
			.filter(Favorite.id == favorite_id, Favorite.user_id == user_id)
			.delete(synchronize_session=False)
		)
		if not count:
			self.db.rollback()
			return False
		self._commit()
		return True
