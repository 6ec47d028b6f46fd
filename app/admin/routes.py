# app/admin/routes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.config import get_settings, Settings
from app.ticket.routes import raise_for_failure
from app.ticket.schemas import DeleteAllRequest, MessageOut
from app.ticket.services import AdminScreen, IncorrectPassword

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/delete-all", response_model=MessageOut)
def delete_all(
    payload: DeleteAllRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    screen = AdminScreen(db, settings)
    screen.request_delete()
    screen.type_password(payload.password)
    try:
        screen.delete_all()
    except IncorrectPassword as exc:
        raise HTTPException(status_code=403, detail=exc.message)
    message = screen.lifecycle.notification.description
    raise_for_failure(screen.lifecycle)
    return {"message": message}
