"""In-memory Mandii stand-in for local runs and tests"""

from dataclasses import dataclass, field
from typing import Dict

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel


class UserStatusRequest(BaseModel):
    phone: str


@dataclass
class MandiiState:
    profiles: Dict[str, dict] = field(default_factory=dict)  # phone -> profile
    unavailable: bool = False


def create_mandii_app(state: MandiiState | None = None) -> FastAPI:
    state = state or MandiiState()
    app = FastAPI(title="Mock Mandii Server", version="1.0.0")
    app.state.backend = state

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/v1/check-user-status/")
    def check_user_status(body: UserStatusRequest):
        if state.unavailable:
            raise HTTPException(status_code=503, detail="Service temporarily unavailable")
        profile = state.profiles.get(body.phone)
        return {"exists": profile is not None, "profile": profile}

    @app.get("/v1/feed/page/", response_class=HTMLResponse)
    def feed_page():
        return "<html><head><title>Mandii Feed</title></head><body>Community feed</body></html>"

    @app.get("/v1/shop/{shop_id}/", response_class=HTMLResponse)
    def shop_page(shop_id: int):
        return f"<html><head><title>Shop {shop_id}</title></head><body>Shop {shop_id}</body></html>"

    return app


app = create_mandii_app()
