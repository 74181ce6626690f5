"""
FastAPI web server for the workflow run dashboard.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from board import build_dashboard
from config import Settings
from github_client import GitHubClient
from models import DashboardResponse
from run_collector import CollectionError, RunCollector

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Dashboard server initialized for organizations: %s", ", ".join(settings.organizations))
    yield
    logger.info("Dashboard server shutting down")


def create_app(settings: Settings, github_client: GitHubClient | None = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        settings: Loaded settings
        github_client: Client to use instead of one built from the token
    """
    app = FastAPI(title="Workflow Run Dashboard", lifespan=lifespan)
    app.state.settings = settings
    app.state.github = github_client or GitHubClient(settings.github_token)

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET"])

    @app.get("/api/dashboard", response_model=DashboardResponse)
    async def get_dashboard(request: Request, period: str | None = None):
        """Fetch workflow runs for the requested period (today, week, month)."""
        logger.info("🌐 Dashboard API request from %s", request.client.host if request.client else "unknown")
        collector = RunCollector(app.state.github, settings.organizations, settings.runs_per_repo)
        try:
            return await build_dashboard(collector, period, settings.now())
        except CollectionError as e:
            logger.error("❌ Error fetching workflow runs: %s", e)
            raise HTTPException(status_code=500, detail=f"Error fetching workflow runs: {e}")

    @app.get("/api/status")
    async def status():
        """Get server status."""
        return {
            "status": "ok",
            "organizations": settings.organizations,
            "github_token_set": bool(settings.github_token),
            "timezone": settings.timezone or "local",
        }

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = Settings.from_env()
    logger.info("Server starting on port %d", settings.port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)
