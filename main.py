from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import logging

from lexai.config import CORS_ORIGINS
from lexai.database import engine, Base
from lexai import models  # noqa: F401  registers the tables on Base
from lexai.auth.routes import router as auth_router
from lexai.clients.routes import router as clients_router
from lexai.finances.routes import router as finances_router
from lexai.movements.routes import router as movements_router
from lexai.activity.routes import router as activity_router
from lexai.settings.routes import router as settings_router
from lexai.assistant.routes import router as assistant_router
from lexai.dashboard.routes import router as dashboard_router

logging.basicConfig(level=logging.INFO)

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="LexAI Backend",
    description="Legal practice management: clients, court agenda, fees and AI triage",
    version="1.0.0"
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Popups of the client-side Google consent flow need COOP relaxed
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin-allow-popups"
        response.headers["Cross-Origin-Embedder-Policy"] = "unsafe-none"
        return response

app.add_middleware(SecurityHeadersMiddleware)

# Include routers
app.include_router(auth_router)
app.include_router(clients_router)
app.include_router(finances_router)
app.include_router(movements_router)
app.include_router(activity_router)
app.include_router(settings_router)
app.include_router(assistant_router)
app.include_router(dashboard_router)

@app.get("/")
def root():
    return {
        "message": "LexAI Backend API",
        "version": "1.0.0",
        "status": "running"
    }

@app.get("/health")
def health_check():
    return {"status": "healthy"}
