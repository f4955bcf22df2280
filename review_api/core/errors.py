from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status

from review_api.core.logging import log_event, request_id_of


class AppError(Exception):
	status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
	message = "Internal server error"

	def __init__(self, message: str | None = None, details=None):
		super().__init__(message or self.message)
		if message:
			self.message = message
		self.details = details


class DuplicateUsername(AppError):
	status_code = status.HTTP_409_CONFLICT
	message = "Username already registered"


class DuplicateName(AppError):
	status_code = status.HTTP_409_CONFLICT
	message = "Item name already exists"


class DuplicateReview(AppError):
	status_code = status.HTTP_409_CONFLICT
	message = "You have already reviewed this item"


class DuplicateFavorite(AppError):
	status_code = status.HTTP_409_CONFLICT
	message = "Item is already a favorite"


class ForeignKeyViolation(AppError):
	# the row being referenced does not exist
	status_code = status.HTTP_404_NOT_FOUND
	message = "Referenced record not found"


class AuthenticationFailed(AppError):
	status_code = status.HTTP_401_UNAUTHORIZED
	message = "Invalid credentials"


class InvalidToken(AppError):
	status_code = status.HTTP_401_UNAUTHORIZED
	message = "Invalid token"


class Unauthenticated(AppError):
	status_code = status.HTTP_401_UNAUTHORIZED
	message = "Unauthorized"


class NotFound(AppError):
	status_code = status.HTTP_404_NOT_FOUND
	message = "Not found"


class Forbidden(AppError):
	status_code = status.HTTP_403_FORBIDDEN
	message = "Forbidden"


class ValidationError(AppError):
	status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
	message = "Validation error"


def error_response(request: Request, status_code: int, message: str, details=None):
	# Ensure details is serializable
	if isinstance(details, Exception):
		details = str(details)
	return JSONResponse(
		status_code=status_code,
		content={
			"error": {
				"message": message,
				"details": details,
				"request_id": request_id_of(request),
			}
		},
	)

async def app_error_handler(request: Request, exc: AppError):
	log_event(
		"app_error",
		kind=type(exc).__name__,
		status=exc.status_code,
		path=request.url.path,
		request_id=request_id_of(request),
	)
	headers = None
	if exc.status_code == status.HTTP_401_UNAUTHORIZED:
		headers = {"WWW-Authenticate": "Bearer"}
	response = error_response(request, exc.status_code, exc.message, details=exc.details)
	if headers:
		response.headers.update(headers)
	return response

async def validation_exception_handler(request: Request, exc: RequestValidationError):
	return error_response(
		request,
		status.HTTP_422_UNPROCESSABLE_ENTITY,
		"Validation error",
		details=jsonable_errors(exc.errors()),
	)

def jsonable_errors(errors):
	# pydantic may put the raw exception object under "ctx"
	cleaned = []
	for err in errors:
		err = dict(err)
		ctx = err.get("ctx")
		if ctx:
			err["ctx"] = {k: str(v) for k, v in ctx.items()}
		cleaned.append(err)
	return cleaned
