from fastapi import FastAPI, Request
from fastapi.responses import Response
import uvicorn
import os

from formrelay.config import SiteConfig, load_config
from formrelay.endpoints.analytics import create_analytics_handler
from formrelay.endpoints.contact import create_contact_handler
from formrelay.notifier.adapters import create_notifier
from formrelay.pipeline.orchestrator import Orchestrator
from formrelay.schemas.request import RequestContext
from formrelay.utils.logger_util import get_logger, logging
logger=get_logger(__name__,logging.DEBUG)

config = load_config()
app = FastAPI(title="formrelay", version="0.1.0")


def _notifier_for(name: str, site_config: SiteConfig):
    # FORMRELAY_*_NOTIFIER selects the backend ('mock', 'ses', 'pinpoint'); a broken backend stops startup
    try:
        return create_notifier(name, site_config)
    except Exception:
        logger.error("failed to create notifier %r", name, exc_info=True)
        raise


contact_notifier = _notifier_for(config.contact_notifier, config)
analytics_notifier = _notifier_for(config.analytics_notifier, config)
contact_handler = create_contact_handler(config, notifier=contact_notifier)
analytics_handler = create_analytics_handler(config, notifier=analytics_notifier)


async def _dispatch(handler: Orchestrator, request: Request) -> Response:
    ctx = RequestContext(headers=dict(request.headers), body=await request.body())
    envelope = await handler.handle(ctx)
    return Response(
        content=envelope.body,
        status_code=envelope.status_code,
        headers=envelope.headers,
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/contact")
async def contact(request: Request):
    return await _dispatch(contact_handler, request)


@app.post("/analytics")
async def analytics(request: Request):
    return await _dispatch(analytics_handler, request)


if __name__ == "__main__":
    uvicorn.run(app, host=os.environ.get("FORMRELAY_HOST", "0.0.0.0"), port=int(os.environ.get("FORMRELAY_PORT", "8000")))
