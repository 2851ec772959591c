# workforce/api/v1/endpoints/auth.py
from fastapi import Depends
from fastapi.security import OAuth2PasswordRequestForm

from workforce.api import deps
from workforce.core import security
from workforce.core.procedures import ProcedureRouter, Tier
from workforce.schemas import token as token_schema
from workforce.schemas import user as user_schema
from workforce.services.users import UserService

router = ProcedureRouter("auth")


@router.procedure("token", tier=Tier.PUBLIC, response_model=token_schema.Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    users: UserService = Depends(deps.get_user_service),
):
    user = users.authenticate(form_data.username, form_data.password)
    access_token = security.create_access_token(user)
    return {"access_token": access_token, "token_type": "bearer"}


@router.procedure("me", tier=Tier.AUTHENTICATED, response_model=user_schema.SessionOut)
def read_session(session: security.Session = Depends(security.get_session)):
    """
    Get the details for the currently logged-in user.
    """
    return session


@router.procedure("change_password", tier=Tier.AUTHENTICATED, response_model=user_schema.Ack)
def change_password(
    passwords: user_schema.PasswordUpdate,
    users: UserService = Depends(deps.get_user_service),
):
    """
    Allows a logged-in user to change their own password.
    """
    users.change_password(passwords)
    return user_schema.Ack()
