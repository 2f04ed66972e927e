"""Dashboard session routes: signup, login, logout and the current session."""

from fastapi import APIRouter, Depends, status

from dashboard.deps import auth_service, unwrap
from dashboard.services.auth import AuthService
from shared.auth import Session, current_session
from shared.models import LoginRequest, SessionResponse, SignupRequest

router = APIRouter()


@router.post("/api/auth/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def signup(req: SignupRequest, auth: AuthService = Depends(auth_service)):
    return unwrap(auth.signup(req.email, req.password, req.name)).data


@router.post("/api/auth/login", response_model=SessionResponse)
def login(req: LoginRequest, auth: AuthService = Depends(auth_service)):
    return unwrap(auth.login(req.email, req.password)).data


@router.post("/api/auth/logout")
def logout(
    session: Session = Depends(current_session),
    auth: AuthService = Depends(auth_service),
):
    return {"message": unwrap(auth.logout(session)).message}


@router.get("/api/auth/session")
def get_session(session: Session = Depends(current_session)):
    return {"user_id": session.user_id, "email": session.email, "session_id": session.session_id}
