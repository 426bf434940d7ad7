
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from docchat.config import Settings, get_settings
from docchat.db.session import build_engine, build_sessionmaker, init_db
from docchat.errors import DocChatError
from docchat.files.blob_store import BlobStore
from docchat.llm.client import LLMClient
from docchat.llm.llm_gateway import InferenceGateway
from docchat.utils.security import TokenCodec
from docchat.auth.routes import router as auth_router
from docchat.files.routes import router as files_router, DOWNLOAD_PREFIX
from docchat.chat.routes import router as chat_router

logger = logging.getLogger("docchat")

def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger.setLevel(level)

def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(DocChatError)
    async def docchat_error_handler(request: Request, exc: DocChatError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid or missing fields"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

def create_app(settings: Settings | None = None, llm_transport=None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    if settings.is_production and settings.secret_key == "change-me":
        raise RuntimeError("SECRET_KEY must be set in production")

    # built here rather than in the lifespan so the static mount has its directory
    blob_store = BlobStore(settings.upload_dir, max_bytes=settings.max_upload_mb * 1024 * 1024)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("starting %s env=%s", settings.app_name, settings.app_env)
        engine = build_engine(settings.database_url)
        init_db(engine)
        app.state.settings = settings
        app.state.engine = engine
        app.state.sessionmaker = build_sessionmaker(engine)
        app.state.blob_store = blob_store
        app.state.token_codec = TokenCodec(
            settings.secret_key, timedelta(days=settings.access_token_expire_days)
        )
        app.state.gateway = InferenceGateway(
            LLMClient(
                settings.llm_base_url,
                settings.llm_api_key,
                settings.llm_model,
                timeout=settings.llm_timeout_seconds,
                transport=llm_transport,
            ),
            max_tokens=settings.llm_max_tokens,
        )
        yield
        engine.dispose()
        logger.info("stopped %s", settings.app_name)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(files_router)
    app.include_router(chat_router)

    app.mount(DOWNLOAD_PREFIX, StaticFiles(directory=blob_store.root), name="uploads")

    @app.get("/", tags=["root"])
    def root():
        return {"name": settings.app_name, "env": settings.app_env}

    return app
