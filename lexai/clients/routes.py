from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging

from lexai.database import get_db
from lexai.models import User, ClientOrigin
from lexai.auth.dependencies import get_current_user
from lexai.clients.schemas import ClientCreate, ClientUpdate, ClientResponse, ClientListResponse
from lexai.services.client_service import ClientService
from lexai.services.settings_service import get_or_create_profile
from lexai.services import pdf_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])

# =====================================================
# CLIENT CRUD OPERATIONS
# =====================================================

@router.post("/", response_model=ClientResponse, status_code=201)
def create_client(
    client_data: ClientCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Register a client, optionally with its payment plan."""
    service = ClientService(db)
    try:
        client = service.create_client(client_data, current_user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Client creation failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

    db.refresh(client)
    return client


@router.get("/", response_model=List[ClientListResponse])
def list_clients(
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=500),
    search: Optional[str] = None,
    origin: Optional[ClientOrigin] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List clients with search and origin filtering."""
    return ClientService(db).get_clients_for_user(current_user, search, origin, skip, limit)


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    client = ClientService(db).get_client_for_user(client_id, current_user)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: str,
    client_update: ClientUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update client data. The payment plan is edited through /finances."""
    service = ClientService(db)
    client = service.get_client_for_user(client_id, current_user)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    try:
        service.update_client(client, client_update, current_user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Client update failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

    db.refresh(client)
    return client


@router.delete("/{client_id}")
def delete_client(
    client_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = ClientService(db)
    client = service.get_client_for_user(client_id, current_user)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    try:
        service.delete_client(client, current_user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Client deletion failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"message": "Client deleted successfully"}

# =====================================================
# DOCUMENTS
# =====================================================

@router.get("/{client_id}/documents/{kind}")
def generate_client_document(
    client_id: str,
    kind: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Render a procuration, contract or declaration PDF for the client."""
    if kind not in pdf_service.DOCUMENT_KINDS:
        raise HTTPException(status_code=400, detail=f"Unknown document kind: {kind}")

    client = ClientService(db).get_client_for_user(client_id, current_user)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    settings = get_or_create_profile(db, current_user)
    content, filename = pdf_service.generate_client_pdf(kind, client, settings)
    logger.info(f"Document {kind} generated for client {client.id}")

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
