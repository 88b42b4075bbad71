"""
pinecone_index resource: create, read, update, delete and import.

Each entry point takes the host's record plus a Diagnostics accumulator and returns the
new state (or None). Failures are recorded as error diagnostics, never raised; nothing is
rolled back when a step fails part way.
"""

from collections.abc import Callable
from datetime import datetime

from pinecone_provider.config.logging import get_logger
from pinecone_provider.models.resource import IndexResourceModel
from pinecone_provider.resources.controlplane.base import BaseControlPlaneClient, ControlPlaneError
from pinecone_provider.services.diagnostics import Diagnostics
from pinecone_provider.services.reconciler import IndexReconciler, ReconciliationError
from pinecone_provider.services.schema import INDEX_TYPE_NAME, replacement_attributes
from pinecone_provider.services.state_mapper import (
    to_configure_request,
    to_create_request,
    to_resource_state,
)
from pinecone_provider.utils.time import format_rfc850, utc_now

logger = get_logger(__name__)


_GERUNDS = {"create": "creating", "update": "updating", "delete": "deleting"}


def _add_failure(diagnostics: Diagnostics, action: str, error: Exception) -> None:
    """Record e.g. 'Error creating index' / 'Could not create index, unexpected error: ...'."""
    diagnostics.add_error(
        f"Error {_GERUNDS[action]} index",
        f"Could not {action} index, unexpected error: {error}",
    )


class IndexResource:
    """Lifecycle of one resource kind against a configured control-plane client."""

    type_name = INDEX_TYPE_NAME

    def __init__(
        self,
        client: BaseControlPlaneClient,
        reconciler: IndexReconciler | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._client = client
        self._reconciler = reconciler or IndexReconciler(client)
        self._clock = clock

    async def create(self, plan: IndexResourceModel, diagnostics: Diagnostics) -> IndexResourceModel | None:
        """Create the index, wait until ready, and return the described state."""
        try:
            request = to_create_request(plan)
        except ValueError as e:
            _add_failure(diagnostics, "create", e)
            return None

        logger.info("Creating index", extra={"index_name": request.name, "dimension": request.dimension})
        try:
            description = await self._reconciler.create(request)
        except (ControlPlaneError, ReconciliationError) as e:
            logger.warning("Index creation failed", extra={"index_name": request.name, "error": str(e)})
            _add_failure(diagnostics, "create", e)
            return None

        return to_resource_state(plan.name, description, last_updated=format_rfc850(self._clock()))

    async def read(self, state: IndexResourceModel, diagnostics: Diagnostics) -> IndexResourceModel | None:
        """
        Refresh state from the control plane. None with no diagnostics means the index is
        gone and should be removed from state.
        """
        try:
            description = await self._client.describe_index(state.name)
        except ControlPlaneError as e:
            diagnostics.add_error(
                "Error Reading Pinecone Index",
                f"Could not read Pinecone Index, unexpected error: {e}",
            )
            return None

        refreshed = to_resource_state(state.name, description, last_updated=state.last_updated)
        if refreshed is None:
            logger.info("Index no longer exists, dropping from state", extra={"index_name": state.name})
        return refreshed

    async def update(
        self,
        plan: IndexResourceModel,
        diagnostics: Diagnostics,
        prior: IndexResourceModel | None = None,
    ) -> IndexResourceModel | None:
        """Apply replicas and pod_type in place. Other changes need a replacement, not an update."""
        if prior is not None:
            changed = replacement_attributes(prior, plan)
            if changed:
                diagnostics.add_error(
                    "Error updating index",
                    f"Could not update index in place: changing {', '.join(changed)} requires replacing the index",
                    attribute=changed[0],
                )
                return None

        try:
            request = to_configure_request(plan)
        except ValueError as e:
            _add_failure(diagnostics, "update", e)
            return None

        logger.info(
            "Updating index",
            extra={"index_name": plan.name, "replicas": request.replicas, "pod_type": str(request.pod_type)},
        )
        try:
            description = await self._reconciler.configure(plan.name, request)
        except (ControlPlaneError, ReconciliationError) as e:
            logger.warning("Index update failed", extra={"index_name": plan.name, "error": str(e)})
            _add_failure(diagnostics, "update", e)
            return None

        return to_resource_state(plan.name, description, last_updated=format_rfc850(self._clock()))

    async def delete(self, state: IndexResourceModel, diagnostics: Diagnostics) -> None:
        """Delete the index and wait until describe no longer finds it."""
        logger.info("Deleting index", extra={"index_name": state.name})
        try:
            await self._reconciler.delete(state.name)
        except (ControlPlaneError, ReconciliationError) as e:
            logger.warning("Index deletion failed", extra={"index_name": state.name, "error": str(e)})
            _add_failure(diagnostics, "delete", e)

    def import_state(self, import_id: str, diagnostics: Diagnostics) -> IndexResourceModel | None:
        """Seed state from the index name alone; the host follows with read()."""
        if not import_id.strip():
            diagnostics.add_error(
                "Error importing index",
                "Expected the index name as import ID, got an empty string",
            )
            return None
        return IndexResourceModel(name=import_id)
