"""
Admin HTTP application.

POST /rpc/{method} with {"params": [...]} answers {"result": [code, message, value]}.
"""

from typing import Any, List

from fastapi import FastAPI
from pydantic import BaseModel, Field

from module_launcher.domain.ports import IAdminRequestPort


class AdminCall(BaseModel):
    """Body of an administrative request."""

    params: List[Any] = Field(default_factory=list, description="Positional parameters")


class AdminReply(BaseModel):
    """Body of an administrative response."""

    result: List[Any] = Field(..., description="[code, status_message, value]")


def create_admin_app(dispatcher: IAdminRequestPort) -> FastAPI:
    """
    Build the admin application around a dispatcher.

    Args:
        dispatcher: Method table serving the requests

    Returns:
        FastAPI application
    """
    app = FastAPI(
        title="module-launcher admin",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # Plain def: handlers may take locks, so run them off the event loop
    @app.post("/rpc/{method}", response_model=AdminReply)
    def call(method: str, body: AdminCall) -> AdminReply:
        return AdminReply(result=dispatcher.dispatch(method, body.params))

    return app
