"""Pydantic schemas for API responses."""

from pydantic import BaseModel, Field


class PutResponse(BaseModel):
    """Body of every POST /put response."""

    ok: bool = Field(..., description="Whether the URL was stored")
    msg: str = Field(..., description="The short code on success, otherwise the reason")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"ok": True, "msg": "q2Xp_A"},
                {"ok": False, "msg": "unsupported url scheme: ftp"},
            ]
        }
    }


STORE_FAILURE = PutResponse(ok=False, msg="problem with database")
