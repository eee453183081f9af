from sqlalchemy.orm import Session
from sqlalchemy import or_, desc
from typing import List, Optional
from datetime import date
import logging

from lexai.models import Client, ClientOrigin, Movement, User, ActionType, EntityType
from lexai.clients.schemas import ClientCreate, ClientUpdate
from lexai.services.activity_service import record_activity
from lexai.services.plan_service import build_financials, rebuild_financials
from lexai.services.ledger_service import financials_of

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, db: Session):
        self.db = db

    def get_client_for_user(self, client_id: str, user: User) -> Optional[Client]:
        """Get a client owned by the user."""
        return self.db.query(Client).filter(
            Client.id == client_id,
            Client.user_id == user.id
        ).first()

    def get_clients_for_user(
        self,
        user: User,
        search: Optional[str] = None,
        origin: Optional[ClientOrigin] = None,
        skip: int = 0,
        limit: Optional[int] = None
    ) -> List[Client]:
        """List the user's clients, newest first."""
        query = self.db.query(Client).filter(Client.user_id == user.id)

        if origin:
            query = query.filter(Client.origin == origin)
        if search:
            search_filter = or_(
                Client.name.ilike(f"%{search}%"),
                Client.cpf_cnpj.ilike(f"%{search}%"),
                Client.case_number.ilike(f"%{search}%")
            )
            query = query.filter(search_filter)

        query = query.order_by(desc(Client.created_at)).offset(skip)
        if limit:
            query = query.limit(limit)
        return query.all()

    def find_by_case_number(self, user: User, case_number: str) -> List[Client]:
        if not case_number:
            return []
        return self.db.query(Client).filter(
            Client.user_id == user.id,
            Client.case_number == case_number
        ).all()

    def create_client(self, client_data: ClientCreate, user: User, today: Optional[date] = None) -> Client:
        """Create a client and stage its activity entry. Caller commits."""
        data = client_data.dict(exclude={"payment_plan"})
        db_client = Client(user_id=user.id, **data)

        if client_data.payment_plan is not None:
            financials = build_financials(
                client_data.origin, client_data.case_type, client_data.payment_plan, None, today
            )
            db_client.financials = financials.model_dump(mode="json")

        self.db.add(db_client)
        self.db.flush()
        record_activity(
            self.db, user, ActionType.CREATE, EntityType.CLIENT,
            f"Cliente {db_client.name} cadastrado",
            entity_id=db_client.id,
            details={"origin": db_client.origin.value, "case_number": db_client.case_number}
        )
        return db_client

    def update_client(self, client: Client, client_update: ClientUpdate, user: User) -> Client:
        update_data = client_update.dict(exclude_unset=True)
        origin_changed = "origin" in update_data and update_data["origin"] != client.origin
        case_type_changed = "case_type" in update_data and update_data["case_type"] != client.case_type
        for field, value in update_data.items():
            setattr(client, field, value)

        financials = financials_of(client)
        if financials is not None and (origin_changed or case_type_changed):
            rebuilt = rebuild_financials(financials, client.origin, client.case_type, origin_changed)
            client.financials = rebuilt.model_dump(mode="json")
            logger.info(f"Financial plan of client {client.id} rebuilt as {rebuilt.plan.value}")

        record_activity(
            self.db, user, ActionType.UPDATE, EntityType.CLIENT,
            f"Cliente {client.name} atualizado",
            entity_id=client.id,
            details={"fields": sorted(update_data.keys())}
        )
        return client

    def delete_client(self, client: Client, user: User) -> None:
        record_activity(
            self.db, user, ActionType.DELETE, EntityType.CLIENT,
            f"Cliente {client.name} removido",
            entity_id=client.id
        )
        self.db.query(Movement).filter(Movement.client_id == client.id).update(
            {Movement.client_id: None}, synchronize_session=False
        )
        self.db.delete(client)
