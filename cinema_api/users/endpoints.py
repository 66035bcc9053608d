# cinema_api/users/endpoints.py
import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, status

from .models import ActivationRequest, UserEnvelope, UserRegistration
from .service import UserService
from ..dependencies import get_user_service
from ..mailer import AbstractMailer, USER_WELCOME_TEMPLATE, get_mailer

logger = logging.getLogger(__name__)

users_router = APIRouter(prefix="/v1/users", tags=["Users"])


@users_router.post("", response_model=UserEnvelope, status_code=status.HTTP_202_ACCEPTED)
async def register_user_endpoint(
    registration: UserRegistration,
    background_tasks: BackgroundTasks,
    service: Annotated[UserService, Depends(get_user_service)],
    mailer: Annotated[AbstractMailer, Depends(get_mailer)]
):
    """
    Register a new, not yet activated user.

    The activation token is only delivered by mail, after the response has
    been sent.
    """
    user, token = await service.register(registration)

    background_tasks.add_task(
        mailer.send,
        user.email,
        USER_WELCOME_TEMPLATE,
        {"activation_token": token.plaintext, "user_id": user.id}
    )
    return UserEnvelope(user=user)


@users_router.put("/activated", response_model=UserEnvelope)
async def activate_user_endpoint(
    activation: ActivationRequest,
    service: Annotated[UserService, Depends(get_user_service)]
):
    """Activate the account that owns the given activation token."""
    user = await service.activate(activation.token or "")
    return UserEnvelope(user=user)
