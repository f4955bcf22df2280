from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from review_api.core.errors import InvalidToken
from review_api.core.security import TokenService
from conftest import make_settings


def _flip_bit(token: str, index: int, bit: int) -> str:
	return token[:index] + chr(ord(token[index]) ^ (1 << bit)) + token[index + 1:]


def test_round_trip(tokens):
	token = tokens.issue_token("user-123")

	assert tokens.verify_token(token) == "user-123"


def test_token_carries_only_subject_and_issue_time(tokens):
	claims = jwt.get_unverified_claims(tokens.issue_token("user-123"))

	assert set(claims) == {"sub", "iat"}


def test_every_single_bit_mutation_is_rejected(tokens):
	token = tokens.issue_token("user-123")

	for index in range(len(token)):
		for bit in range(8):
			mutated = _flip_bit(token, index, bit)
			with pytest.raises(InvalidToken):
				tokens.verify_token(mutated)


def test_unused_low_bits_of_signature_are_not_ignored(tokens):
	# 32 signature bytes leave 2 unused bits in the last of 43 characters
	for n in range(50):
		token = tokens.issue_token(f"user-{n}")
		signature = token.rsplit(".", 1)[1]
		assert len(signature) == 43
		for bit in (0, 1):
			with pytest.raises(InvalidToken):
				tokens.verify_token(_flip_bit(token, len(token) - 1, bit))


def test_padded_segment_rejected(tokens):
	head, body, signature = tokens.issue_token("user-123").split(".")

	with pytest.raises(InvalidToken):
		tokens.verify_token(f"{head}.{body}.{signature}=")


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "Bearer x"])
def test_malformed_tokens_rejected(tokens, garbage):
	with pytest.raises(InvalidToken):
		tokens.verify_token(garbage)


def test_token_signed_with_other_secret_rejected(tokens):
	other = TokenService(make_settings(JWT_SECRET="someone-else"))

	with pytest.raises(InvalidToken):
		tokens.verify_token(other.issue_token("user-123"))


def test_token_without_subject_rejected(tokens, settings):
	token = jwt.encode({"iat": 0}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)

	with pytest.raises(InvalidToken):
		tokens.verify_token(token)


def test_tokens_do_not_expire_by_default(tokens, settings):
	long_ago = int((datetime.now(timezone.utc) - timedelta(days=3650)).timestamp())
	token = jwt.encode({"sub": "user-123", "iat": long_ago}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)

	assert tokens.verify_token(token) == "user-123"


def test_expiry_is_opt_in():
	service = TokenService(make_settings(ACCESS_TOKEN_EXPIRES_MIN=5))
	claims = jwt.get_unverified_claims(service.issue_token("user-123"))
	assert "exp" in claims

	past = int((datetime.now(timezone.utc) - timedelta(minutes=1)).timestamp())
	expired = jwt.encode({"sub": "user-123", "iat": past - 600, "exp": past}, "test-secret", algorithm="HS256")
	with pytest.raises(InvalidToken):
		service.verify_token(expired)
