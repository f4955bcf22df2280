from pydantic import BaseModel, Field, validator

class RegisterRequest(BaseModel):
	username: str = Field(min_length=1, max_length=255)
	password: str = Field(min_length=1, max_length=72)  # bcrypt truncates after 72 bytes

	@validator("username")
	def username_not_blank(cls, v):
		v = v.strip()
		if not v:
			raise ValueError("Username must not be blank")
		return v

class LoginRequest(BaseModel):
	username: str
	password: str

class TokenResponse(BaseModel):
	access_token: str
	token_type: str = "bearer"

class UserOut(BaseModel):
	id: str
	username: str

	class Config:
		from_attributes = True
