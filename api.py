"""HTTP entry point: `python api.py` or `uvicorn api:app`"""

from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI
from config import ApplicationConfig
from src.api.app import create_app
from src.depends import create_tables, dispose_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    if ApplicationConfig.DB_CREATE_TABLES:
        await create_tables()
    yield
    await dispose_engine()


app = create_app(ApplicationConfig, lifespan=lifespan)

if __name__ == "__main__":
    uvicorn.run(
        "api:app",
        host=ApplicationConfig.API_HOST,
        port=ApplicationConfig.API_PORT,
        reload=ApplicationConfig.API_RELOAD,
        log_level=ApplicationConfig.LOG_LEVEL.lower(),
    )
