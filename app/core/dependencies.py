import logging

from fastapi import HTTPException, Request
from app.core.jwt_config import decode_token, get_token_from_request

logger = logging.getLogger(__name__)

async def get_current_user_id(request: Request) -> str:
    token = get_token_from_request(request=request)
    payload = decode_token(token)
    user_id = payload.get("sub")

    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    logger.debug("Authenticated participant %s", user_id)
    return str(user_id)
