from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from review_api.core.config import Settings, settings as default_settings
from review_api.core.errors import AppError, app_error_handler, validation_exception_handler
from review_api.core.logging import log_event, request_id_middleware
from review_api.core.security import PasswordHasher, TokenService
from review_api.db.base import Base
from review_api.db.seed import seed_demo_data
from review_api.db.session import build_engine, build_session_factory

from review_api.routers.auth import router as auth_router
from review_api.routers.comments import router as comments_router
from review_api.routers.favorites import router as favorites_router
from review_api.routers.items import router as items_router
from review_api.routers.reviews import router as reviews_router
from review_api.routers.users import router as users_router

API_PREFIX = "/api"

def create_app(settings: Settings | None = None) -> FastAPI:
	settings = settings or default_settings
	app = FastAPI(title=settings.APP_NAME)

	# DB init
	engine = build_engine(settings)
	session_factory = build_session_factory(engine)
	if settings.AUTO_CREATE_TABLES:
		Base.metadata.create_all(bind=engine)
	password_hasher = PasswordHasher(settings)
	if settings.SEED_DEMO_DATA:
		users, items = seed_demo_data(session_factory, password_hasher)
		log_event("demo_data_seeded", users=users, items=items)

	app.state.settings = settings
	app.state.engine = engine
	app.state.session_factory = session_factory
	app.state.password_hasher = password_hasher
	app.state.token_service = TokenService(settings)

	# Middleware
	app.middleware("http")(request_id_middleware)

	# Error handlers (consistent format)
	app.add_exception_handler(AppError, app_error_handler)
	app.add_exception_handler(RequestValidationError, validation_exception_handler)

	# Routers
	app.include_router(auth_router, prefix=API_PREFIX)
	app.include_router(items_router, prefix=API_PREFIX)
	app.include_router(reviews_router, prefix=API_PREFIX)
	app.include_router(comments_router, prefix=API_PREFIX)
	app.include_router(favorites_router, prefix=API_PREFIX)
	if settings.EXPOSE_USER_LIST:
		app.include_router(users_router, prefix=API_PREFIX)

	@app.get("/health")
	def health():
		return {"status": "OK"}

	return app

app = create_app()
