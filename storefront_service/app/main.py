import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import create_tables
from shared.helpers.exception_handler import setup_exception_handlers
from .models import inventory, orders, reviews
from .router import admin_router, orders_router, products_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

# Create all tables (SQL storage only)
create_tables()

app = FastAPI(title="Storefront Service API")

# Allow requests from the storefront frontend
origins = [
    settings.FRONTEND_URL.rstrip("/"),
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    # any local dev server and vercel preview deployments
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?|https://[a-zA-Z0-9-]+\.vercel\.app",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
setup_exception_handlers(app)

# Include routers
app.include_router(products_router.router)
app.include_router(orders_router.router)
app.include_router(admin_router.router)


@app.get("/health")
def health():
    return {"ok": True}
