import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# -------------------------------------------------------
# ⚙️ Core Imports
# -------------------------------------------------------
from .core.config import settings
from .core.db import db_healthcheck, init_db

# -------------------------------------------------------
# 🧩 Routers
# -------------------------------------------------------
from .routers import appointments, auth, doctors, patients

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logging.getLogger("web3").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# -------------------------------------------------------
# 🚀 FastAPI Initialization
# -------------------------------------------------------
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=VERSION,
    debug=settings.DEBUG,
    description="MediConnect – wallet-authenticated doctor appointment booking",
)

# -------------------------------------------------------
# 🌐 CORS Middleware
# -------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------------------------------------
# 🏁 Startup Events
# -------------------------------------------------------
@app.on_event("startup")
def on_startup():
    """Create tables if they are missing."""
    init_db()
    logger.info("✅ Database models created.")
    logger.info(f"🗃️ Environment: {settings.ENVIRONMENT}, on-chain payment checks: {settings.VERIFY_PAYMENTS_ONCHAIN}")

# -------------------------------------------------------
# ❤️ Health Checks
# -------------------------------------------------------
@app.get("/health", tags=["Health"])
def health():
    return {
        "status": "ok",
        "service": settings.PROJECT_NAME,
        "version": VERSION,
    }

@app.get("/health/db", tags=["Health"])
def health_db():
    ok, error = db_healthcheck()
    return {"database": "ok" if ok else "error", "error": error}

# -------------------------------------------------------
# 🔗 Router Registration
# -------------------------------------------------------
app.include_router(auth.router)
app.include_router(doctors.router)
app.include_router(patients.router)
app.include_router(appointments.router)
