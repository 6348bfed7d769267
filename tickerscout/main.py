import os
from typing import Any, Dict

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tickerscout.api import analyze, channel, email_results
from tickerscout.utils.config import init_pipeline_settings, load_config
from tickerscout.utils.dates import utc_now_iso
from tickerscout.utils.logger import logger, setup_logging


def create_app(config: Dict[str, Any]) -> FastAPI:
    """Build the API: CORS from ALLOWED_ORIGINS, the analysis and email routers, root and health checks."""
    app_cfg = config.get("app", {})
    name = app_cfg.get("name", "TickerScout")
    api = FastAPI(title=name, version=str(app_cfg.get("version", "0.1.0")))

    api.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api.include_router(analyze.router, tags=["Video Analysis"])
    api.include_router(channel.router, tags=["Channel Analysis"])
    api.include_router(email_results.router, tags=["Email Results"])

    @api.get("/")
    async def root():
        return {"message": f"Welcome to {name}!"}

    @api.get("/health")
    async def health():
        return {"status": "ok", "timestamp": utc_now_iso()}

    return api


load_dotenv()
config = load_config()
setup_logging(config.get("logging", {}))
init_pipeline_settings(config)

app = create_app(config)
logger.info(f"✅ {app.title} is starting up!")
