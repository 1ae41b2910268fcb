from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session
from app.api.routers import dashboard, favorites, profiles, properties, saved_searches
from app.core.config import settings
from app.core.database import Base, engine, get_db
import logging

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Rental Matching API",
    description="API for rental listings, saved searches, favorites and tenant/landlord profiles",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(properties.router, prefix="/api/v1/properties", tags=["properties"])
app.include_router(saved_searches.router, prefix="/api/v1/saved-searches", tags=["saved-searches"])
app.include_router(favorites.router, prefix="/api/v1/favorites", tags=["favorites"])
app.include_router(profiles.router, prefix="/api/v1/profiles", tags=["profiles"])
app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["dashboard"])

@app.on_event("startup")
async def startup_event():
    """Create missing tables on startup"""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Application startup completed successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

@app.get("/")
async def root():
    return {"message": "Rental Matching API"}

@app.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """Health check endpoint that verifies the database"""
    health_status = {
        "status": "healthy",
        "services": {}
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["services"]["database"] = "healthy"
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["services"]["database"] = "unhealthy"
        health_status["error"] = str(e)

    return health_status
