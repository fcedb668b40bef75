import structlog
from fastapi import APIRouter, Depends

from teamtasks.dependencies import get_store, get_verifier
from teamtasks.errors import AuthenticationError, ConflictError
from teamtasks.schemas.user import LoginIn, LoginOut, SignupIn, SignupOut
from teamtasks.store import EntityStore
from teamtasks.utils.auth import CredentialVerifier

router = APIRouter(prefix="/auth", tags=["auth"])
logger = structlog.get_logger(__name__)

USER_ROLE = "user"


@router.post("/signup", response_model=SignupOut, status_code=201)
def signup(
    user: SignupIn,
    store: EntityStore = Depends(get_store),
    verifier: CredentialVerifier = Depends(get_verifier),
):
    if store.users.find_one_by(email=user.email):
        raise ConflictError("This email is already registered")

    hashed = verifier.hash_password(user.password)
    saved = store.users.insert({"name": user.name, "email": user.email, "password": hashed})
    logger.info("auth.signup", user_id=saved.id)
    return {"message": "User has successfully registered", "name": saved.name, "email": saved.email}


@router.post("/login", response_model=LoginOut)
def login(
    user: LoginIn,
    store: EntityStore = Depends(get_store),
    verifier: CredentialVerifier = Depends(get_verifier),
):
    db_user = store.users.find_one_by(email=user.email)
    hashed = db_user.password if db_user else None
    if not verifier.verify_password(user.password, hashed):
        logger.info("auth.login.failed", known_email=db_user is not None)
        raise AuthenticationError("Invalid email or password")

    token = verifier.issue_token({"sub": str(db_user.id), "role": USER_ROLE})
    logger.info("auth.login", user_id=db_user.id)
    return {"message": "Logged in successfully", "token": token}
