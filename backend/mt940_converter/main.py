'''
MT940 Converter API - Main application entry point

This file initializes the FastAPI application and defines the root endpoint.
'''
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mt940_converter.core.config import settings
from mt940_converter.core.logging_config import setup_logging
from mt940_converter.core.storage import LatestResultStore
from mt940_converter.routes import convert

setup_logging(settings.LOG_LEVEL, settings.PARSER_LOG_LEVEL)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Convert SWIFT MT940 bank statements to CSV and Excel",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS (allows frontend to call API)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Last parsed statement, read by the download endpoints
app.state.result_store = LatestResultStore()

app.include_router(convert.router)


# Root endpoint - Health check
@app.get("/")
def root():
    """
    Health check endpoint
    Returns basic API info
    """
    return {
        "app": settings.PROJECT_NAME,
        "message": "MT940 Converter API is running",
        "status": "healthy",
        "version": settings.VERSION,
        "docs": "/docs"
    }


# Health endpoint (useful for deployment monitoring)
@app.get("/health")
def health_check():
    """
    Detailed health check
    """
    return {
        "status": "ok",
        "has_result": app.state.result_store.get() is not None,
        "app": settings.PROJECT_NAME
    }


# This runs when you execute: uvicorn mt940_converter.main:app --reload
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
