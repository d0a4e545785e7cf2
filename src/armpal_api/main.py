"""Main FastAPI application."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from armpal_api.api.chat_routes import router as chat_router
from armpal_api.api.converter_routes import router as converter_router
from armpal_api.api.food_scan_routes import router as food_scan_router
from armpal_api.api.program_routes import router as program_router
from armpal_api.config import settings
from armpal_api.errors import register_error_handlers

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="ArmPal API")

# Configure CORS to allow requests from the PWA
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(converter_router)
app.include_router(food_scan_router)
app.include_router(chat_router)
app.include_router(program_router)


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"ok": True}
