from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from .database import Base, engine
from . import models  # noqa: F401  (registers the tasks table on Base)
from .errors import TaskTrackerError
from .logging import logger, setup_logger
from .routes import tasks

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logger()
    # Auto-create tables for all models imported above
    Base.metadata.create_all(bind=engine)
    logger.info("Task tracker started")
    yield

app = FastAPI(title="tasktracker", lifespan=lifespan)


@app.exception_handler(TaskTrackerError)
async def task_tracker_error_handler(request: Request, exc: TaskTrackerError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code or 500, content={"error": exc.message})


# Unparseable ids, non-integer paging, malformed JSON: all plain 400s
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": problems or "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health")
def health():
    return {"status": "ok"}

app.include_router(tasks.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
