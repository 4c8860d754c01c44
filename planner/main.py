import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from planner.routers import gateway, session, summary, wizard
from planner.config import settings, cloud_config
from planner.errors import PlannerError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Trip Planner Wizard API",
    version="0.1.0",
    description="Step-by-step trip planning with AI-generated itineraries and cost summaries"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins if not cloud_config.IS_CLOUD_RUN else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError):
    logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

# Include routers
app.include_router(gateway.router, prefix="/api/v1")
app.include_router(session.router, prefix="/api/v1")
app.include_router(wizard.router, prefix="/api/v1")
app.include_router(summary.router, prefix="/api/v1")

@app.get("/health")
def health_check():
    """Health check endpoint for Cloud Run and monitoring"""
    return {
        "status": "ok",
        "message": "Trip Planner API is running",
        "environment": "cloud-run" if cloud_config.IS_CLOUD_RUN else "local",
        "aiConfigured": bool(settings.gemini_api_key)
    }

@app.get("/")
def root():
    """Root endpoint with API information"""
    return {
        "name": "Trip Planner Wizard API",
        "version": "0.1.0",
        "docs_url": "/docs",
        "health_url": "/health"
    }

# For Cloud Run, the port is set via environment variable
if __name__ == "__main__":
    import uvicorn
    port = cloud_config.PORT if cloud_config.IS_CLOUD_RUN else settings.port
    uvicorn.run(app, host="0.0.0.0", port=port)
