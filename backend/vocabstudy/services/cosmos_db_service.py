"""
Azure Cosmos DB Service
Provides persistence for review states, attempts, daily stats and the
definition cache. Per-user containers use user_id as partition key; the
definition cache is partitioned by normalized term.
"""
import hashlib
import logging
from datetime import datetime, date
from typing import Optional
from azure.cosmos import CosmosClient, PartitionKey, exceptions

from vocabstudy.config import settings

logger = logging.getLogger(__name__)


class CosmosDBService:
    """Service for Azure Cosmos DB operations"""

    def __init__(self):
        self._client: Optional[CosmosClient] = None
        self.database_name = settings.COSMOS_DB_DATABASE_NAME
        self.database = None
        self.containers = {}

        # Container names from settings
        self.container_names = {
            "review_states": settings.COSMOS_DB_REVIEW_STATES_CONTAINER,
            "attempts": settings.COSMOS_DB_ATTEMPTS_CONTAINER,
            "daily_stats": settings.COSMOS_DB_DAILY_STATS_CONTAINER,
            "definitions": settings.COSMOS_DB_DEFINITIONS_CONTAINER
        }

    @property
    def client(self) -> CosmosClient:
        """Cosmos client, created on first use."""
        if self._client is None:
            if not settings.COSMOS_DB_ENDPOINT or not settings.COSMOS_DB_KEY:
                raise RuntimeError("COSMOS_DB_ENDPOINT and COSMOS_DB_KEY must be configured")
            self._client = CosmosClient(
                url=settings.COSMOS_DB_ENDPOINT,
                credential=settings.COSMOS_DB_KEY
            )
        return self._client

    async def initialize(self):
        """Initialize database and containers. Call on app startup."""
        try:
            self.database = self.client.create_database_if_not_exists(
                id=self.database_name
            )
            logger.info(f"Database '{self.database_name}' ready")

            for key, container_name in self.container_names.items():
                container = self.database.create_container_if_not_exists(
                    id=container_name,
                    partition_key=PartitionKey(path="/partitionKey"),
                    offer_throughput=400  # Minimum RU/s
                )
                self.containers[key] = container
                logger.info(f"Container '{container_name}' ready")

            return True
        except Exception as e:
            logger.error(f"Cosmos DB initialization error: {e}")
            raise

    def _get_container(self, container_key: str):
        """Get a container by key."""
        if container_key not in self.containers:
            # Lazy initialization
            container_name = self.container_names.get(container_key)
            if not container_name:
                raise ValueError(f"Unknown container key: {container_key}")
            if not self.database:
                self.database = self.client.get_database_client(self.database_name)
            self.containers[container_key] = self.database.get_container_client(container_name)
        return self.containers[container_key]

    # ==================== GENERIC CRUD OPERATIONS ====================

    @staticmethod
    def _stamp(item: dict, partition_key: str, created: bool) -> dict:
        now = datetime.utcnow().isoformat()
        item["partitionKey"] = partition_key
        item["updatedAt"] = now
        if created or "createdAt" not in item:
            item["createdAt"] = now
        return item

    async def create_item(self, container_key: str, item: dict, partition_key: str) -> dict:
        """Insert a document; fails if the id already exists."""
        container = self._get_container(container_key)
        try:
            result = container.create_item(body=self._stamp(item, partition_key, created=True))
        except exceptions.CosmosResourceExistsError:
            logger.warning(f"Item already exists in {container_key}: {item.get('id')}")
            raise
        except Exception as e:
            logger.error(f"Create item error in {container_key}: {e}")
            raise
        logger.debug(f"Created item in {container_key}: {item.get('id')}")
        return result

    async def get_item(self, container_key: str, item_id: str, partition_key: str) -> Optional[dict]:
        """Read a document by id, or None when it does not exist."""
        container = self._get_container(container_key)
        try:
            return container.read_item(item=item_id, partition_key=partition_key)
        except exceptions.CosmosResourceNotFoundError:
            return None
        except Exception as e:
            logger.error(f"Get item error in {container_key}: {e}")
            raise

    async def upsert_item(self, container_key: str, item: dict, partition_key: str) -> dict:
        """Create or overwrite a document, keeping its original createdAt."""
        container = self._get_container(container_key)
        try:
            result = container.upsert_item(body=self._stamp(item, partition_key, created=False))
        except Exception as e:
            logger.error(f"Upsert item error in {container_key}: {e}")
            raise
        logger.debug(f"Upserted item in {container_key}: {item.get('id')}")
        return result

    async def delete_item(self, container_key: str, item_id: str, partition_key: str) -> bool:
        """Delete a document; False when it was already gone."""
        container = self._get_container(container_key)
        try:
            container.delete_item(item=item_id, partition_key=partition_key)
        except exceptions.CosmosResourceNotFoundError:
            return False
        except Exception as e:
            logger.error(f"Delete item error in {container_key}: {e}")
            raise
        logger.debug(f"Deleted item in {container_key}: {item_id}")
        return True

    async def query_items(
        self,
        container_key: str,
        query: str,
        parameters: Optional[list] = None,
        partition_key: Optional[str] = None
    ) -> list:
        """Run a parameterized SQL query, within one partition when given."""
        container = self._get_container(container_key)
        try:
            return list(container.query_items(
                query=query,
                parameters=parameters or [],
                partition_key=partition_key,
                enable_cross_partition_query=partition_key is None
            ))
        except Exception as e:
            logger.error(f"Query error in {container_key}: {e}")
            raise

    # ==================== REVIEW STATES ====================

    async def get_review_state(self, user_id: str, item_id: str) -> Optional[dict]:
        """Get the review state of one item."""
        return await self.get_item("review_states", f"review_{user_id}_{item_id}", user_id)

    async def get_review_states(
        self,
        user_id: str,
        stack_id: Optional[str] = None
    ) -> list:
        """Get all review states of a user, optionally for one stack."""
        if stack_id:
            query = "SELECT * FROM c WHERE c.partitionKey = @user_id AND c.stackId = @stack_id"
            parameters = [
                {"name": "@user_id", "value": user_id},
                {"name": "@stack_id", "value": stack_id}
            ]
        else:
            query = "SELECT * FROM c WHERE c.partitionKey = @user_id"
            parameters = [{"name": "@user_id", "value": user_id}]
        return await self.query_items("review_states", query, parameters, user_id)

    async def save_review_state(self, user_id: str, item_id: str, state_data: dict) -> dict:
        """Create or overwrite the review state of one item."""
        state_data["id"] = f"review_{user_id}_{item_id}"
        state_data["userId"] = user_id
        state_data["itemId"] = item_id
        return await self.upsert_item("review_states", state_data, user_id)

    # ==================== ATTEMPTS ====================

    async def record_attempt(self, user_id: str, attempt_data: dict) -> dict:
        """Append an attempt to the attempt log."""
        attempt_data["id"] = f"attempt_{user_id}_{datetime.utcnow().timestamp()}"
        attempt_data["userId"] = user_id
        return await self.create_item("attempts", attempt_data, user_id)

    async def get_attempts(
        self,
        user_id: str,
        since: Optional[date] = None,
        until: Optional[date] = None
    ) -> list:
        """Get attempts of a user, optionally within [since, until] days."""
        query = "SELECT * FROM c WHERE c.partitionKey = @user_id"
        parameters = [{"name": "@user_id", "value": user_id}]
        if since:
            query += " AND c.day >= @since"
            parameters.append({"name": "@since", "value": since.isoformat()})
        if until:
            query += " AND c.day <= @until"
            parameters.append({"name": "@until", "value": until.isoformat()})
        query += " ORDER BY c.attemptedAt ASC"
        return await self.query_items("attempts", query, parameters, user_id)

    # ==================== DAILY STATS ====================

    async def save_daily_stats(self, user_id: str, stats_data: dict) -> dict:
        """Create or overwrite the stats row of one day (and stack)."""
        stack_part = stats_data.get("stackId") or "all"
        stats_data["id"] = f"daily_{user_id}_{stack_part}_{stats_data['day']}"
        stats_data["userId"] = user_id
        return await self.upsert_item("daily_stats", stats_data, user_id)

    # ==================== DEFINITION CACHE ====================

    @staticmethod
    def _definition_id(term: str) -> str:
        # Cosmos ids cannot contain '/', '\\', '?' or '#'
        return "def_" + hashlib.sha1(term.encode("utf-8")).hexdigest()

    async def get_cached_definition(self, term: str) -> Optional[dict]:
        """Get the cached definition document of a normalized term."""
        return await self.get_item("definitions", self._definition_id(term), term)

    async def save_cached_definition(self, term: str, document: dict) -> dict:
        """Overwrite the cached definition document of a normalized term."""
        document["id"] = self._definition_id(term)
        document["term"] = term
        return await self.upsert_item("definitions", document, term)

    async def delete_cached_definition(self, term: str) -> bool:
        """Remove the cached definition document of a normalized term."""
        return await self.delete_item("definitions", self._definition_id(term), term)


# Singleton instance
cosmos_db_service = CosmosDBService()
