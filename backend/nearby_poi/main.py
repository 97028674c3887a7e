import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from nearby_poi.core.exceptions import POIError
from nearby_poi.core.logger import logs
from nearby_poi.routes.poi_route import router as poi_router, build_poi_service, poi_error_response

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.poi_service = build_poi_service()
    logs.log(logging.INFO, "POI service ready")
    yield
    await app.state.poi_service.aclose()
    logs.log(logging.INFO, "POI service closed")

app = FastAPI(title="Nearby POI Service", lifespan=lifespan)
app.include_router(poi_router)

@app.exception_handler(POIError)
async def poi_error_handler(request: Request, exc: POIError):
    logs.log(logging.WARNING, f"{request.url.path} failed with {exc.code}: {exc.message}")
    return poi_error_response(exc)

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {
        "message": "Welcome to the Nearby POI API",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "nearby": "/pois/nearby",
            "search": "/pois/search",
            "categories": "/pois/categories",
            "docs": "/docs"
        },
        "version": "1.0.0"
    }

# --- Health Check ---
@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "Nearby POI Service"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("nearby_poi.main:app", host="0.0.0.0", port=8000, reload=True)
