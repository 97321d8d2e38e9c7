"""
Main FastAPI application entry point.
Initializes the app, middleware, and routes.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from vocabstudy.config import settings

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Vocabulary study service: adaptive review scheduling and tiered definition lookups",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """
    Run on application startup.
    Prepare the Cosmos DB containers when credentials are configured.
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    if settings.COSMOS_DB_ENDPOINT and settings.COSMOS_DB_KEY:
        from vocabstudy.services.cosmos_db_service import cosmos_db_service
        await cosmos_db_service.initialize()
    else:
        logger.warning("Cosmos DB is not configured; persistence calls will fail")

    logger.info(f"Dictionary providers: {settings.DICTIONARY_PROVIDERS}")
    logger.info("Application started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Run on application shutdown.
    Drop the in-process definition cache.
    """
    logger.info("Shutting down application...")

    from vocabstudy.services.dictionary import definition_resolver
    definition_resolver.clear_memory_cache()

    logger.info("Application shutdown complete")


@app.get("/")
async def root():
    """Health check endpoint"""
    return JSONResponse(content={
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy",
        "environment": settings.ENVIRONMENT
    })


@app.get("/health")
async def health_check():
    """
    Detailed health check endpoint.
    Reports which backing services are configured and the size of the
    in-process definition cache.
    """
    from vocabstudy.services.dictionary import definition_resolver

    cosmos_ready = bool(settings.COSMOS_DB_ENDPOINT and settings.COSMOS_DB_KEY)
    openai_ready = bool(settings.AZURE_OPENAI_API_KEY and settings.AZURE_OPENAI_ENDPOINT)

    return JSONResponse(content={
        "status": "healthy",
        "services": {
            "api": "up",
            "cosmos_db": "configured" if cosmos_ready else "not_configured",
            "azure_openai": "configured" if openai_ready else "not_configured"
        },
        "dictionary": {
            "providers": definition_resolver.provider_chain.provider_names,
            "memory_cache_entries": len(definition_resolver.memory_cache)
        }
    })


# Include routers
from vocabstudy.api.v1.endpoints import review, words, progress

for module, tag in ((review, "review"), (words, "words"), (progress, "progress")):
    app.include_router(module.router, prefix=f"{settings.API_V1_PREFIX}/{tag}", tags=[tag])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "vocabstudy.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
