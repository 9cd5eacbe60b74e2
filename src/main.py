import structlog
from fastapi import FastAPI

from src.core.config import config
from src.core.models import EventType
from src.core.utils.logging import configure_logging
from src.integrations.github import github_client
from src.tasks.task_queue import task_queue
from src.webhooks.dispatcher import dispatcher
from src.webhooks.handlers.pull_request import PullRequestEventHandler
from src.webhooks.handlers.pull_request_review import PullRequestReviewEventHandler
from src.webhooks.router import router as webhook_router

# --- Application Setup ---

configure_logging(config.logging.level, config.logging.format)
logger = structlog.get_logger()

app = FastAPI(
    title="approvalgate",
    description="Review policy checks for GitHub pull requests.",
    version="0.1.0",
)

# --- Include Routers ---

app.include_router(webhook_router, prefix="/webhooks", tags=["GitHub Webhooks"])

# --- Root Endpoint ---


@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the service is running."""
    return {"status": "ok", "message": "approvalgate is running."}


@app.get("/health/tasks", tags=["Health Check"])
async def health_tasks():
    """Check the status of background tasks."""
    return {
        "task_queue_status": "running" if task_queue.workers else "stopped",
        "workers": len(task_queue.workers),
        "pending": task_queue.queue.qsize(),
        "tracked_events": len(task_queue.processed_hashes),
    }


# --- Application Lifecycle ---


@app.on_event("startup")
async def startup_event():
    """Application startup logic."""
    logger.info("application_starting", environment=config.environment)

    await task_queue.start_workers(num_workers=5)

    dispatcher.register_handler(EventType.PULL_REQUEST, PullRequestEventHandler())
    dispatcher.register_handler(EventType.PULL_REQUEST_REVIEW, PullRequestReviewEventHandler())

    logger.info("application_started")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown logic."""
    await task_queue.stop_workers()
    await github_client.close()
    logger.info("application_stopped")
