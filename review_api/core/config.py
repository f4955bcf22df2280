import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
	APP_NAME = os.getenv("APP_NAME", "Review API")
	DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./reviews.db")
	DB_TIMEOUT_SEC = float(os.getenv("DB_TIMEOUT_SEC", "10"))
	AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "true").lower() == "true"

	JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
	JWT_ALG = "HS256"

	# 0 keeps tokens valid until the secret changes
	ACCESS_TOKEN_EXPIRES_MIN = int(os.getenv("ACCESS_TOKEN_EXPIRES_MIN", "0"))

	PASSWORD_HASH_ROUNDS = int(os.getenv("PASSWORD_HASH_ROUNDS", "12"))

	# "conceal": someone else's review looks missing (404); "explicit": 403
	OWNERSHIP_POLICY = os.getenv("OWNERSHIP_POLICY", "conceal").lower()

	SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "false").lower() == "true"
	EXPOSE_USER_LIST = os.getenv("EXPOSE_USER_LIST", "false").lower() == "true"

	def __init__(self, **overrides):
		for key, value in overrides.items():
			if not hasattr(type(self), key):
				raise AttributeError(f"Unknown setting: {key}")
			setattr(self, key, value)

settings = Settings()
