from fastapi import FastAPI
from contextlib import asynccontextmanager
from storefront.core.logging import configure_logging
from storefront.db.session import create_db_and_tables

# Import models to ensure they are registered with SQLModel metadata
from storefront.models.user import User
from storefront.models.storage import StorageSlot

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    create_db_and_tables()
    yield

app = FastAPI(
    title="Storefront Cart API",
    version="1.0.0",
    lifespan=lifespan,
    description="Shopping cart store for the fashion storefront"
)

@app.get("/")
def read_root():
    return {"message": "Welcome to the Storefront Cart API. Visit /docs for Swagger UI."}

from storefront.routers import auth, cart

app.include_router(auth.router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["cart"])

# Add CORS
from fastapi.middleware.cors import CORSMiddleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], # Allow all for demo
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
