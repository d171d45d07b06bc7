from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

import os
from app.database import SessionLocal
from app.models.user import User
from app.services.auth_service import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])


class TokenRequest(BaseModel):
    user_id: int


@router.post("/token")
def issue_token(payload: TokenRequest):
    env = os.getenv("ENV", "dev").lower()
    if env not in {"dev", "local", "test"}:
        raise HTTPException(status_code=404, detail="Not Found")

    db = SessionLocal()
    try:
        user = db.query(User).filter(User.id == int(payload.user_id)).first()
        if user is None or not user.active:
            raise HTTPException(status_code=401, detail="Invalid credentials")
        role = user.role
    finally:
        db.close()

    try:
        token = create_access_token(user_id=int(payload.user_id), role=role)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {
        "access_token": token,
        "token_type": "bearer",
        "role": role,
    }
