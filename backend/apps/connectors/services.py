"""
Connector service layer - owner-scoped connector management.
"""

from apps.core.logging import get_logger

from .models import Connector
from .schemas import ConnectorCreate, ConnectorUpdate, destinations_to_json

logger = get_logger(__name__)


class ConnectorService:
    """Create, read, update and delete connectors belonging to one owner."""

    def __init__(self, owner_id: str):
        self.owner_id = owner_id

    def list_connectors(self) -> list[Connector]:
        """List the owner's connectors, newest first."""
        return list(Connector.objects.filter(owner_id=self.owner_id).order_by("-created_at"))

    def get_connector(self, connector_id: str) -> Connector | None:
        """Get one of the owner's connectors."""
        return Connector.objects.filter(id=connector_id, owner_id=self.owner_id).first()

    def create_connector(self, data: ConnectorCreate) -> Connector:
        connector = Connector.objects.create(
            owner_id=self.owner_id,
            name=data.name,
            description=data.description,
            destinations=destinations_to_json(data.destinations),
            active=data.active,
        )
        logger.info(
            "connector_created",
            **{"connector.id": str(connector.id)},
            destination_count=len(data.destinations),
        )
        return connector

    def update_connector(self, connector_id: str, data: ConnectorUpdate) -> Connector | None:
        connector = self.get_connector(connector_id)
        if not connector:
            return None

        if data.name is not None:
            connector.name = data.name
        if data.description is not None:
            connector.description = data.description
        if data.destinations is not None:
            connector.destinations = destinations_to_json(data.destinations)
        if data.active is not None:
            connector.active = data.active

        connector.save()
        logger.info("connector_updated", **{"connector.id": str(connector.id)})
        return connector

    def delete_connector(self, connector_id: str) -> bool:
        """Delete a connector and, by cascade, its submissions."""
        connector = self.get_connector(connector_id)
        if not connector:
            return False
        connector.delete()
        logger.info("connector_deleted", **{"connector.id": connector_id})
        return True


async def aget_connector(connector_id: str) -> Connector | None:
    """Unscoped lookup used by public ingestion."""
    return await Connector.objects.filter(id=connector_id).afirst()
