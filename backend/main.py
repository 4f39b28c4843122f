from controllers import auth_controller, user_controller, course_controller, assignment_controller
from services.storage_service import UPLOAD_DIR, UPLOAD_URL_PREFIX
from fastapi.middleware.cors import CORSMiddleware
from config.database import init_db
from fastapi.staticfiles import StaticFiles
from config.rate_limit import limiter, rate_limit_exceeded_handler
from config.logging import setup_logging
from slowapi.errors import RateLimitExceeded
from contextlib import asynccontextmanager
from fastapi.responses import JSONResponse
from fastapi import FastAPI, Request, status
import os

# Set custom logger for application
logger = setup_logging()

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    os.makedirs(UPLOAD_DIR, exist_ok = True)
    logger.info("Application started")
    yield
    logger.info("Application stopped")

app = FastAPI(title = "Thesis Management API", lifespan = lifespan)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins = CORS_ORIGINS,
    allow_credentials = True,
    allow_methods = ["*"],
    allow_headers = ["*"],
)

# Unexpected errors are logged, never echoed to the client
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code = status.HTTP_500_INTERNAL_SERVER_ERROR, content = {"detail": "Internal server error"})

# Include routers
app.include_router(auth_controller.router)
app.include_router(user_controller.admin_router)
app.include_router(user_controller.students_router)
app.include_router(user_controller.student_router)
app.include_router(course_controller.router)
app.include_router(assignment_controller.router)

# Uploaded files
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory = UPLOAD_DIR, check_dir = False), name = "uploads")
