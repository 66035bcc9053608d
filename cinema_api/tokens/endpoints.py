# cinema_api/tokens/endpoints.py
import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, status

from ..dependencies import get_user_service
from ..mailer import AbstractMailer, TOKEN_ACTIVATION_TEMPLATE, get_mailer
from ..users.models import ActivationTokenRequest, AuthenticationRequest, MessageEnvelope, TokenEnvelope
from ..users.service import UserService

logger = logging.getLogger(__name__)

tokens_router = APIRouter(prefix="/v1/tokens", tags=["Tokens"])


@tokens_router.post("/activation", response_model=MessageEnvelope, status_code=status.HTTP_202_ACCEPTED)
async def create_activation_token_endpoint(
    request_data: ActivationTokenRequest,
    background_tasks: BackgroundTasks,
    service: Annotated[UserService, Depends(get_user_service)],
    mailer: Annotated[AbstractMailer, Depends(get_mailer)]
):
    """Send a fresh activation token, invalidating any earlier one."""
    user, token = await service.issue_activation_token(request_data.email or "")

    # Mail the address stored for the account, not the one typed by the client
    background_tasks.add_task(
        mailer.send,
        user.email,
        TOKEN_ACTIVATION_TEMPLATE,
        {"activation_token": token.plaintext}
    )
    return MessageEnvelope(message="an email will be sent to you containing activation instructions")


@tokens_router.post("/authentication", response_model=TokenEnvelope, status_code=status.HTTP_201_CREATED)
async def create_authentication_token_endpoint(
    credentials: AuthenticationRequest,
    service: Annotated[UserService, Depends(get_user_service)]
):
    """Exchange email and password for a bearer token."""
    token = await service.create_authentication_token(credentials.email or "", credentials.password or "")
    return TokenEnvelope(authentication_token=token.to_response())
