"""instanti8 FastAPI application entry point."""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from instanti8.assistant.router import get_assistant_service
from instanti8.assistant.router import router as assistant_router
from instanti8.assistant.service import AssistantService
from instanti8.db.connection import Database
from instanti8.deployments.router import get_deployment_service
from instanti8.deployments.router import router as deployments_router
from instanti8.deployments.service import DeploymentService
from instanti8.importer.router import get_import_service
from instanti8.importer.router import router as import_router
from instanti8.importer.service import InfrastructureImportService
from instanti8.namecheap.client import NamecheapClient
from instanti8.namecheap.router import get_namecheap_client
from instanti8.namecheap.router import router as domains_router
from instanti8.providers.registry import (
    clear_providers,
    get_all_providers,
    get_preferred_provider,
    register_from_env,
)
from instanti8.terraform.executor import DEFAULT_TIMEOUT_SECONDS, TerraformExecutor
from instanti8.terraform.router import get_terraform_executor
from instanti8.terraform.router import router as terraform_router

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage database lifecycle and service wiring."""
    # Load .env from the project root
    load_dotenv(Path(__file__).resolve().parent.parent / ".env")

    db = await Database.connect(os.environ.get("INSTANTI8_DB", "instanti8.db"))

    # Deployment registry
    deployment_svc = DeploymentService(db)
    app.dependency_overrides[get_deployment_service] = lambda: deployment_svc

    # Terraform executor (plan-only)
    executor = TerraformExecutor(
        Path(os.environ.get("TERRAFORM_WORKSPACE_DIR", "./terraform-workspace")),
        timeout=float(os.environ.get("TERRAFORM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)),
    )
    app.dependency_overrides[get_terraform_executor] = lambda: executor

    # Import service
    import_svc = InfrastructureImportService(executor)
    app.dependency_overrides[get_import_service] = lambda: import_svc

    # LLM providers from env vars; Groq is preferred over OpenAI
    register_from_env(os.environ)
    assistant_svc = AssistantService(get_preferred_provider())
    app.dependency_overrides[get_assistant_service] = lambda: assistant_svc
    if assistant_svc.provider_name is None:
        logger.warning("No AI provider configured; assistant will use fallback responses")

    # Domain registrar, only with all three credentials
    namecheap: NamecheapClient | None = None
    credentials = [
        os.environ.get(name)
        for name in ("NAMECHEAP_API_USER", "NAMECHEAP_API_KEY", "NAMECHEAP_USERNAME")
    ]
    if all(credentials):
        namecheap = NamecheapClient(*credentials)
        await namecheap.initialize()
    app.dependency_overrides[get_namecheap_client] = lambda: namecheap

    app.state.db = db
    yield

    if namecheap is not None:
        await namecheap.close()
    clear_providers()
    await db.close()


app = FastAPI(
    title="instanti8",
    description=(
        "Multi-cloud dashboard backend: infrastructure import and conversion,"
        " Terraform planning, AI assistance and domain management"
    ),
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        origin.strip()
        for origin in os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(",")
        if origin.strip()
    ],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(import_router)
app.include_router(terraform_router)
app.include_router(deployments_router)
app.include_router(assistant_router)
app.include_router(domains_router)


@app.get("/api/health")
async def health() -> dict:
    return {"status": "ok", "version": VERSION}


@app.get("/api/providers")
async def providers() -> list[dict]:
    return [
        {
            "name": p.name,
            "available": True,
            "models": p.suggested_models,
            "default_model": p.default_model,
        }
        for p in get_all_providers()
    ]
