# main.py
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from config.logging_config import configure_logging
from middleware.rate_limit import limiter
from middleware.request_logging import RequestLoggingMiddleware
from routers.scenario_routes import router as scenario_router
from routers.user_scenario_routes import router as user_scenario_router
from services.ai.llm_service import get_llm_client

configure_logging()

app = FastAPI(title="Finance Scenario Lab API")

origins = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers
app.include_router(scenario_router, prefix="/api/scenarios")
app.include_router(user_scenario_router, prefix="/api/user-scenarios")


@app.get("/health")
def health():
    return {"status": "ok", "ai_enabled": get_llm_client() is not None}


# db startup
from database import Base, engine  # noqa: E402
import models  # noqa: E402,F401  this triggers models/__init__.py which imports all tables

Base.metadata.create_all(bind=engine)
