from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from app.core.logging import setup_logging
from app.core.init_db import init_db
from app.api.router import api_router

setup_logging()
logger.info("Starting Campus Tracker backend")


app = FastAPI(
    title="Campus Tracker Backend",
    version="0.1.0"
)

# All API routes (location, status, notifications, admin, weather)
app.include_router(api_router)

# Init DB after app is created
init_db()


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error | path={request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/health")
def health():
    logger.debug("Health check hit")
    return {"status": "ok"}
