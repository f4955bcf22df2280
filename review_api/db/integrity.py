"""Classify driver integrity errors into unique and foreign-key violations."""

from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

def _sqlstate(exc: IntegrityError):
	orig = exc.orig
	# psycopg2 exposes pgcode, psycopg 3 exposes sqlstate; sqlite has neither
	return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)

def is_unique_violation(exc: IntegrityError) -> bool:
	code = _sqlstate(exc)
	if code:
		return code == UNIQUE_VIOLATION
	text = str(exc.orig).lower()
	return "unique constraint" in text or "duplicate key" in text

def is_foreign_key_violation(exc: IntegrityError) -> bool:
	code = _sqlstate(exc)
	if code:
		return code == FOREIGN_KEY_VIOLATION
	return "foreign key constraint" in str(exc.orig).lower()
