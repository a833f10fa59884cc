from __future__ import annotations

from pydantic import BaseModel


class GatewaySettingsRequest(BaseModel):
    base_url: str = ""
    api_key: str = ""
    session_id: str = ""


class GatewaySettingsResponse(BaseModel):
    base_url: str
    api_key: str
    session_id: str
    is_complete: bool
