from fastapi import FastAPI, Request, Depends
from fastapi.responses import RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from challanbook.database import connect_to_mongo, close_mongo_connection
from challanbook.dependencies import get_current_user
from challanbook.indexes import ensure_indexes
from challanbook.routers import auth, dashboard, challans, suppliers, settings
from challanbook.services.challan_service import sync_challan_counter
from config import settings as app_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await connect_to_mongo()
    await ensure_indexes()
    await sync_challan_counter()
    yield
    # Shutdown
    await close_mongo_connection()

app = FastAPI(
    title="Challan Book",
    description="Delivery challans, suppliers and company profile for a small business",
    version="1.0.0",
    lifespan=lifespan
)

allowed_origins = app_settings.ALLOWED_ORIGINS.split(",") if app_settings.ALLOWED_ORIGINS else ["http://localhost:8000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(dashboard.router, prefix="", tags=["Dashboard"])
app.include_router(challans.router, prefix="/challans", tags=["Challans"])
app.include_router(suppliers.router, prefix="/suppliers", tags=["Suppliers"])
app.include_router(settings.router, prefix="/settings", tags=["Settings"])


@app.get("/")
async def root(request: Request):
    token = request.cookies.get(app_settings.SESSION_COOKIE_NAME)
    if token:
        return RedirectResponse(url="/dashboard", status_code=302)
    return RedirectResponse(url="/auth/login", status_code=302)


@app.get("/api/me")
async def me(current_user=Depends(get_current_user)):
    return current_user.model_dump(mode="json")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
