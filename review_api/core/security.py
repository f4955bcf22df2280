import binascii
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode
from passlib.context import CryptContext

from review_api.core.config import Settings, settings as default_settings
from review_api.core.errors import InvalidToken

def _normalize_password(password: str) -> str:
	# bcrypt only considers the first 72 bytes; truncate consistently to avoid errors.
	raw = password.encode("utf-8")
	if len(raw) <= 72:
		return password
	return raw[:72].decode("utf-8", errors="ignore")


class PasswordHasher:
	"""bcrypt hashing with the cost factor taken from ``PASSWORD_HASH_ROUNDS``."""

	def __init__(self, settings: Settings = default_settings):
		self.context = CryptContext(
			schemes=["bcrypt"],
			deprecated="auto",
			bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
		)
		self._dummy_hash = None

	def hash(self, password: str) -> str:
		return self.context.hash(_normalize_password(password))

	def verify(self, password: str, password_hash: str) -> bool:
		return self.context.verify(_normalize_password(password), password_hash)

	def burn(self, password: str) -> None:
		# Verified against when the username is unknown, so both failure paths cost one bcrypt check.
		if self._dummy_hash is None:
			self._dummy_hash = self.hash("not-a-real-password")
		self.context.verify(_normalize_password(password), self._dummy_hash)


default_hasher = PasswordHasher()

def _is_canonical_segment(segment: str) -> bool:
	# base64url decoding ignores the unused low bits of the last character,
	# so several spellings decode to the same bytes; accept only the one we emit.
	try:
		raw = segment.encode("ascii")
		return bool(raw) and base64url_encode(base64url_decode(raw)) == raw
	except (UnicodeEncodeError, binascii.Error, ValueError, TypeError):
		return False


class TokenService:
	"""Issues and verifies signed bearer tokens that carry only the user id."""

	def __init__(self, settings: Settings = default_settings):
		self.secret = settings.JWT_SECRET
		self.algorithm = settings.JWT_ALG
		expires = settings.ACCESS_TOKEN_EXPIRES_MIN
		self.expires_delta = None if expires <= 0 else timedelta(minutes=expires)

	def issue_token(self, user_id: str) -> str:
		now = datetime.now(timezone.utc)
		payload = {
			"sub": str(user_id),
			"iat": int(now.timestamp()),
		}
		if self.expires_delta:
			payload["exp"] = int((now + self.expires_delta).timestamp())
		return jwt.encode(payload, self.secret, algorithm=self.algorithm)

	def verify_token(self, token: str) -> str:
		segments = token.split(".") if isinstance(token, str) else []
		if len(segments) != 3 or not all(_is_canonical_segment(s) for s in segments):
			raise InvalidToken("Invalid or expired token")
		try:
			payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
		except JWTError:
			raise InvalidToken("Invalid or expired token")
		user_id = payload.get("sub")
		if not user_id or not isinstance(user_id, str):
			raise InvalidToken("Invalid token (missing sub)")
		return user_id
