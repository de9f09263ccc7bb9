"""
Managed database cluster workflows.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from digitalocean_client.clients.classifier import expect
from digitalocean_client.clients.http_client import DigitalOceanClient
from digitalocean_client.models import CreateResult, Database, DatabaseState
from digitalocean_client.services.creation import create_or_get_existing
from digitalocean_client.services.polling import PollTarget, StatePoller

# https://docs.digitalocean.com/reference/api/digitalocean/#tag/Databases
DATABASES_PATH = "v2/databases"


@dataclass(slots=True)
class DatabaseService:
    """High level orchestration for managed database clusters."""

    client: DigitalOceanClient
    sleep: Callable[[float], None] = field(default=time.sleep)
    clock: Callable[[], float] = field(default=time.monotonic)

    def create_database(
        self,
        name: str,
        engine: str,
        size: str,
        region: str,
        *,
        standby_nodes: int = 0,
        version: str | None = None,
        vpc_uuid: str | None = None,
        tags: Iterable[str] | None = None,
        project_id: str | None = None,
        storage_size_mib: int | None = None,
    ) -> CreateResult[Database]:
        """
        Create a database cluster, or return the existing cluster with the same name.

        Args:
            standby_nodes: the number of standby nodes in addition to the primary node

        Raises:
            AccessDeniedError: if the account may not create database clusters
            UnsupportedCombinationError: if the engine does not support the requested size
            PendingDeletionError: if a cluster with the same name is being deleted
        """

        if standby_nodes < 0:
            raise ValueError(f"standby_nodes may not be negative: {standby_nodes}")

        payload: dict[str, Any] = {
            "name": name,
            "engine": engine,
            "num_nodes": standby_nodes + 1,
            "size": size,
            "region": region,
        }
        if version:
            payload["version"] = version
        if vpc_uuid:
            payload["private_network_uuid"] = vpc_uuid
        if tags:
            payload["tags"] = list(tags)
        if project_id:
            payload["project_id"] = project_id
        if storage_size_mib:
            payload["storage_size_mib"] = storage_size_mib

        def create() -> Database:
            request = self.client.create_request(self.client.url(DATABASES_PATH), payload, method="POST")
            body = expect(self.client.send(request), 201)
            return Database.from_api(body["database"])

        return create_or_get_existing(
            create,
            lambda: self.find_database(lambda database: database.name == name),
            description=f"Database cluster {name!r}",
        )

    def get_database(self, database_id: str) -> Database:
        return self.client.get_resource(
            self._database_url(database_id),
            lambda body: Database.from_api(body["database"]),
            resource=f"Database: {database_id}",
        )

    def get_databases(self, predicate: Callable[[Database], bool] | None = None) -> list[Database]:
        return self.client.get_elements(self.client.url(DATABASES_PATH), "databases", Database.from_api, predicate)

    def find_database(self, predicate: Callable[[Database], bool]) -> Database | None:
        return self.client.get_element(self.client.url(DATABASES_PATH), "databases", Database.from_api, predicate)

    def wait_for(self, database: Database, state: DatabaseState, timeout: float) -> Database | None:
        poller: StatePoller[Database] = StatePoller(
            fetch=lambda: self.get_database(database.id),
            state_of=lambda current: current.status,
            sleep=self.sleep,
            clock=self.clock,
        )
        return poller.wait_for(PollTarget(state, database.id, database.name), timeout)

    def destroy_database(self, database_id: str) -> None:
        self.client.destroy_resource(self._database_url(database_id), resource=f"Database: {database_id}")

    def wait_for_destroy(self, database: Database, timeout: float) -> None:
        self.wait_for(database, DatabaseState.DELETED, timeout)

    def _database_url(self, database_id: str) -> str:
        return self.client.url(f"{DATABASES_PATH}/{database_id}")
