from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from review_api.core.errors import AppError, AuthenticationFailed, DuplicateUsername, ValidationError
from review_api.core.security import PasswordHasher, default_hasher
from review_api.db.integrity import is_unique_violation
from review_api.db.models import User, new_id

class CredentialStore:
	"""Users and their password hashes.

	Uniqueness of usernames is left to the ``uq_users_username`` constraint so
	two concurrent registrations cannot both succeed.
	"""

	def __init__(self, db: Session, hasher: PasswordHasher | None = None):
		self.db = db
		self.hasher = hasher or default_hasher

	def create_user(self, username: str, password: str) -> User:
		username = (username or "").strip()
		if not username:
			raise ValidationError("Username must not be empty")
		if not password:
			raise ValidationError("Password must not be empty")

		user = User(id=new_id(), username=username, password_hash=self.hasher.hash(password))
		self.db.add(user)
		try:
			self.db.commit()
		except IntegrityError as exc:
			self.db.rollback()
			if is_unique_violation(exc):
				raise DuplicateUsername()
			raise AppError("Could not create user", details=str(exc.orig))
		self.db.refresh(user)
		return user

	def verify_credentials(self, username: str, password: str) -> str:
		user = self.db.query(User).filter(User.username == (username or "").strip()).first()
		if not user:
			self.hasher.burn(password or "")
			raise AuthenticationFailed()
		if not self.hasher.verify(password or "", user.password_hash):
			raise AuthenticationFailed()
		return user.id

	def get_user(self, user_id: str) -> User | None:
		return self.db.query(User).filter(User.id == user_id).first()

	def list_users(self) -> list[User]:
		return self.db.query(User).order_by(User.username.asc()).all()
