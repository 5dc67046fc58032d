import logging
from fastapi import FastAPI
from splitter.core.config import get_settings
from splitter.api.v1.routes.splits import router as splits_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(
    title=settings.app_name,
    description="Computes balances and minimal settlements for shared expenses",
    version="1.0.0"
)

app.include_router(splits_router)

@app.get("/")
def read_root():
    return {"message": f"{settings.app_name} API", "version": "1.0.0"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}
