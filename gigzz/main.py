import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from gigzz.core import config
from gigzz.core.logging_config import sanitize_log_data, setup_logging

# ✅ Import All API Routes
from gigzz.api.routes import (
    admin,
    applications,
    auth,
    billing,
    chats,
    content,
    health,
    jobs,
    profiles,
    projects,
    wallet,
)

setup_logging(config.LOG_LEVEL)
logger = logging.getLogger(__name__)


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Gigzz API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


@app.on_event("startup")
def prepare_database():
    settings = sanitize_log_data({
        "database_url": config.DATABASE_URL,
        "stripe_secret_key": config.STRIPE_SECRET_KEY,
        "run_migrations": config.RUN_MIGRATIONS,
    })
    logger.info(f"Starting Gigzz API: {settings}")
    if config.RUN_MIGRATIONS:
        from gigzz.db.migrate import run_migrations
        run_migrations()
    else:
        from gigzz.db.init_db import init_db
        init_db()


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(profiles.router)
app.include_router(projects.router)
app.include_router(jobs.router)
app.include_router(applications.router)
app.include_router(wallet.router)
app.include_router(billing.router)
app.include_router(chats.router)
app.include_router(admin.router)
app.include_router(content.router)
app.include_router(health.router)

# ✅ Uploaded media (avatars, attachments, news images, project covers)
Path(config.MEDIA_ROOT).mkdir(parents=True, exist_ok=True)
app.mount(config.MEDIA_URL, StaticFiles(directory=config.MEDIA_ROOT), name="media")


# ============================================
# ✅ HEALTH CHECK ROOT ENDPOINT
# ============================================

@app.get("/")
def root():
    return {"status": "Gigzz API running"}
