import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .catalog import OUTPUT_TYPES
from .db import Base, engine
from .enrichment import EnrichmentError
from .generation.orchestrator import BatchExhaustedError
from .settings import settings
from .routers import generate
from .routers import enrich
from .routers import products
from .routers import configurations
from .routers import logs

logging.basicConfig(
	level=logging.DEBUG if settings.debug_mode else logging.INFO,
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="DigiCraft API")
app.include_router(generate.router)
app.include_router(enrich.router)
app.include_router(products.router)
app.include_router(configurations.router)
app.include_router(logs.router)


@app.exception_handler(BatchExhaustedError)
async def batch_exhausted_handler(request: Request, exc: BatchExhaustedError):
	logger.warning("%s %s: %s", request.method, request.url.path, exc)
	return JSONResponse(status_code=502, content={"error": str(exc), "attemptedSections": exc.attempted})


@app.exception_handler(EnrichmentError)
async def enrichment_error_handler(request: Request, exc: EnrichmentError):
	return JSONResponse(status_code=502, content={"error": str(exc)})


@app.get("/info")
def root():
	return {
		"status": "ok",
		"gemini_configured": bool(settings.gemini_api_key),
		"model": settings.gemini_model,
		"debug_mode": settings.debug_mode,
		"track_usage": settings.track_usage,
	}


@app.get("/output-types")
def list_output_types():
	return [t.summary() for t in OUTPUT_TYPES.values()]


@app.on_event("startup")
async def startup_event():
	# Initialize DB schema
	Base.metadata.create_all(bind=engine)
