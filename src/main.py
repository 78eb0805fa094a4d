"""Main FastAPI application for the blog API."""

import time
import logging
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src import config
from src.database import init_db, seed_admin_user
from src.errors import register_exception_handlers
from src.routers import auth, blog

# Configure logging
handlers = [logging.StreamHandler()]
if config.LOG_FILE:
    handlers.append(logging.FileHandler(config.LOG_FILE))

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=handlers
)

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

# Create FastAPI application
app = FastAPI(
    title=config.NAME_APP,
    description="REST API for blog posts with user authentication",
    version="1.0.0"
)

# Configure CORS for the frontend and local development servers
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router)
app.include_router(blog.router)


@app.on_event("startup")
def startup_event():
    """Initialize database and seed admin user on application startup."""
    logger.info(f"Starting {config.NAME_APP} in {config.APP_ENV} mode")
    init_db()
    logger.info("Database initialized successfully")
    seed_admin_user()
    logger.info("Admin user seed completed")


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "success": True,
        "message": f"Welcome to {config.NAME_APP}",
        "version": "1.0.0",
        "documentation": "/api",
        "health": "/api/health",
    }


@app.get("/api")
def api_index():
    """List the available endpoints."""
    return {
        "success": True,
        "message": "Blog API v1.0",
        "endpoints": {
            "auth": {
                "register": "POST /api/auth/register",
                "login": "POST /api/auth/login",
                "profile": "GET /api/auth/profile",
                "updateProfile": "PUT /api/auth/profile",
                "logout": "POST /api/auth/logout",
            },
            "blogs": {
                "getAll": "GET /api/blogs",
                "getById": "GET /api/blogs/:id",
                "getBySlug": "GET /api/blogs/slug/:slug",
                "getByAuthor": "GET /api/blogs/author/:authorId",
                "getMyBlogs": "GET /api/blogs/my",
                "create": "POST /api/blogs",
                "update": "PUT /api/blogs/:id",
                "delete": "DELETE /api/blogs/:id",
                "like": "POST /api/blogs/:id/like",
                "stats": "GET /api/blogs/stats",
                "myStats": "GET /api/blogs/my/stats",
            },
        },
    }


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {
        "success": True,
        "message": "Server is running successfully",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(config.PORT))
