from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables before the config class reads them
load_dotenv()

from apocapalette import __version__
from apocapalette.api.v1 import router as v1_router
from apocapalette.config import config
from apocapalette.schemas import HealthResponse
from apocapalette.utils.logging import get_logger
from apocapalette.utils.metrics import get_metrics_instance

log = get_logger()

app = FastAPI(
    title=config.API_TITLE,
    description="Design token synthesis, mood boards and palette export",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins() or ["http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"]
)

app.include_router(v1_router)

log.info("Apocapalette token core started", {"version": __version__, "log_level": config.LOG_LEVEL})


@app.get("/healthz", response_model=HealthResponse)
def healthz():
    """Liveness check."""
    return HealthResponse(ok=True, version=__version__)


@app.get("/metrics")
def metrics():
    """Counters and timing statistics since start-up (or the last reset)."""
    if not config.METRICS_ENABLED:
        return {"enabled": False}
    return get_metrics_instance().get_summary()
