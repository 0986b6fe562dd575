import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from src.routes import contacts, auth, users
from src.conf.config import settings
from src.conf.base import Base
from src.conf.db import engine
from src.exceptions import error_response, register_exception_handlers

import contextlib

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
    yield

app = FastAPI(
    title="Contact Book API",
    description="Personal address book: register, log in and manage your own contacts.",
    docs_url="/api-docs",
    lifespan=lifespan,
)

app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(contacts.router, prefix="/api")

register_exception_handlers(app)


# Registered before CORS so CORS stays the outer layer, even for 500s
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        response = error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")
    elapsed = (time.perf_counter() - start) * 1000
    logger.info("%s %s %s - %.1f ms", request.method, request.url.path, response.status_code, elapsed)
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def read_root():
    return {"message": "Contact Book API is running"}
