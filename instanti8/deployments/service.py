"""DeploymentService: persistent registry of deployment statuses."""

import logging
from datetime import UTC, datetime, timedelta

import aiosqlite

from instanti8.db.connection import Database
from instanti8.deployments.schemas import DeploymentRecord, DeploymentStats, DeploymentStatus

logger = logging.getLogger(__name__)

STUCK_AFTER = timedelta(minutes=5)
_IN_FLIGHT = ("uploading", "processing")


class DeploymentService:
    def __init__(self, db: Database) -> None:
        self._db = db

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def record_deployment(
        self,
        deployment_id: str,
        provider: str,
        status: DeploymentStatus = "processing",
        url: str | None = None,
        *,
        now: datetime | None = None,
    ) -> DeploymentRecord:
        """Insert a deployment, replacing any existing record with the same ID."""
        timestamp = (now or datetime.now(UTC)).isoformat()
        await self._db.execute(
            """INSERT OR REPLACE INTO deployments
               (deployment_id, provider, status, url, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (deployment_id, provider, status, url, timestamp, timestamp),
        )
        logger.info("Recorded deployment %s (%s, %s)", deployment_id, provider, status)
        return DeploymentRecord(
            id=deployment_id,
            provider=provider,
            status=status,
            url=url,
            created_at=timestamp,
            updated_at=timestamp,
        )

    async def update_status(
        self, deployment_id: str, status: DeploymentStatus, url: str | None = None
    ) -> DeploymentRecord:
        """Set a new status. The URL is only overwritten when one is given."""
        changed = await self._db.execute(
            """UPDATE deployments SET status = ?, url = COALESCE(?, url), updated_at = ?
               WHERE deployment_id = ?""",
            (status, url, datetime.now(UTC).isoformat(), deployment_id),
        )
        if not changed:
            raise DeploymentNotFoundError(deployment_id)
        updated = await self.get_deployment(deployment_id)
        assert updated is not None
        logger.info("Deployment %s is now %s", deployment_id, status)
        return updated

    async def get_deployment(self, deployment_id: str) -> DeploymentRecord | None:
        row = await self._db.fetchone(
            "SELECT * FROM deployments WHERE deployment_id = ?", (deployment_id,)
        )
        return _row_to_record(row) if row is not None else None

    async def list_deployments(self) -> list[DeploymentRecord]:
        rows = await self._db.fetchall("SELECT * FROM deployments ORDER BY created_at DESC")
        return [_row_to_record(row) for row in rows]

    async def resolve_stuck_deployments(
        self, older_than: timedelta = STUCK_AFTER, *, now: datetime | None = None
    ) -> int:
        """Mark uploading/processing deployments created before the cutoff as deployed."""
        current = now or datetime.now(UTC)
        cutoff = (current - older_than).isoformat()
        resolved = await self._db.execute(
            """UPDATE deployments SET status = 'deployed', updated_at = ?
               WHERE status IN (?, ?) AND created_at < ?""",
            (current.isoformat(), *_IN_FLIGHT, cutoff),
        )
        if resolved:
            logger.info("Resolved %d stuck deployments", resolved)
        return resolved

    async def get_stats(self) -> DeploymentStats:
        row = await self._db.fetchone(
            """SELECT
                   COUNT(*) AS total,
                   COALESCE(SUM(status IN ('ready', 'deployed')), 0) AS ready,
                   COALESCE(SUM(status IN ('uploading', 'processing')), 0) AS processing,
                   COALESCE(SUM(status = 'error'), 0) AS errors
               FROM deployments"""
        )
        return DeploymentStats(
            total=row["total"],
            ready=row["ready"],
            processing=row["processing"],
            errors=row["errors"],
        )


def _row_to_record(row: aiosqlite.Row) -> DeploymentRecord:
    return DeploymentRecord(
        id=row["deployment_id"],
        provider=row["provider"],
        status=row["status"],
        url=row["url"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class DeploymentNotFoundError(Exception):
    def __init__(self, deployment_id: str) -> None:
        self.deployment_id = deployment_id
        super().__init__(f"Deployment not found: {deployment_id}")
