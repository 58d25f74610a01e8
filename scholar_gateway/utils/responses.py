from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import Config


def cached_json_response(model: BaseModel) -> JSONResponse:
    """Serialize a search envelope with camelCase keys, dropping unset optionals"""
    return JSONResponse(
        content=model.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers={"Cache-Control": f"max-age={Config.CACHE_MAX_AGE}"},
    )
