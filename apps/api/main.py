import importlib.util

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from config import settings
from logging_config import setup_logging, get_logger
from routers import extract

# Setup logging on startup
setup_logging(log_level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR)
logger = get_logger(__name__)


def _log_ocr_dependency() -> None:
    """Log whether PaddleOCR is available in this runtime."""
    if importlib.util.find_spec("paddleocr") is None:
        logger.warning("PaddleOCR not installed. Image scans will be unavailable.")
    else:
        logger.info("PaddleOCR dependency detected.")


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    redirect_slashes=False,
)

# Log OCR dependency status
_log_ocr_dependency()

logger.info(f"Enabling CORS for origins: {settings.allowed_origins_list}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(extract.router, prefix="/extract")


@app.get("/")
def health_check() -> dict:
    """Health check endpoint."""
    logger.debug("Health check called")
    return {"status": "ok", "version": settings.API_VERSION}
