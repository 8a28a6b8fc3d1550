"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from notion_relay.config import Settings
from notion_relay.db.repository import Repository
from notion_relay.notion.client import NotionClient
from notion_relay.operations import routes as operation_routes
from notion_relay.webhook import handler as webhook_handler
from notion_relay.webhook import subscriptions
from notion_relay.webhook.dispatch import OutboxDispatcher
from notion_relay.webhook.tokens import OperatorSignal, VerificationTokenManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    repo = Repository(settings.database_url)
    await repo.init_db()

    notion_client = NotionClient(
        settings.notion_api_key,
        retry_attempts=settings.retry_attempts,
        timeout_ms=settings.request_timeout_ms,
    )

    tokens = VerificationTokenManager(repo, OperatorSignal())
    await tokens.resync()
    if tokens.signal.value is None:
        logger.warning(
            "No webhook verification token provisioned; inbound events will be "
            "accepted unverified until Notion's handshake completes"
        )

    # Inject dependencies into routers
    webhook_handler.configure(tokens, repo, OutboxDispatcher(repo))
    subscriptions.configure(repo)
    operation_routes.configure(notion_client)

    if settings.default_workspace_name:
        logger.info("Notion relay started for workspace %s", settings.default_workspace_name)
    else:
        logger.info("Notion relay started")
    yield

    # Cleanup
    await notion_client.close()
    await repo.close()
    logger.info("Notion relay stopped")


app = FastAPI(title="Notion Relay", lifespan=lifespan)
app.include_router(webhook_handler.router)
app.include_router(subscriptions.router)
app.include_router(operation_routes.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "notion_relay.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
