"""
Refresh lifecycle of the pod working set and the namespace catalog.

PodRefreshController owns the pods of one scope (a namespace, or every
namespace) and applies a stale-but-available policy: a failed refresh records
an error and keeps the last good pods. NamespaceCatalog loads the known
namespaces once, for scope selection.

Neither controller schedules itself. Periodic refresh is layered on top by
calling ``refresh`` repeatedly. Overlapping calls are not de-duplicated or
cancelled; the last one to finish wins.

Example:
    ```python
    controller = PodRefreshController(api, scope="prod")
    await controller.refresh()
    if controller.state.last_error:
        print(controller.state.last_error)
    for group in controller.groups():
        print(group.name, group.summary.total)
    ```
"""

import dataclasses
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .aggregation import aggregate_by_namespace
from .api_client import ApiClient
from .constants import ALL_NAMESPACES
from .exceptions import TransportError
from .models import NamespaceGroup, NamespaceInfo, RefreshState

log = logging.getLogger('kubeglance.refresh')


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PodRefreshController:
    """
    Fetch lifecycle of the pods of one scope.

    Attributes:
        scope: Namespace to fetch, or "all" for every namespace
    """

    def __init__(self, api: ApiClient, scope: str = ALL_NAMESPACES, clock: Callable[[], datetime] = _utcnow):
        self.api = api
        self.scope = scope or ALL_NAMESPACES
        self._clock = clock
        self._state = RefreshState()

    @property
    def state(self) -> RefreshState:
        """Snapshot of the current refresh state."""
        return dataclasses.replace(self._state)

    async def refresh(self, scope: Optional[str] = None) -> None:
        """
        Fetch the pods of the scope and replace the working set.

        A new ``scope`` is remembered but stale pods of the previous scope are
        kept until this fetch succeeds.

        Args:
            scope: Optional new scope; the current one is used when None
        """
        if scope is not None:
            self.scope = scope or ALL_NAMESPACES
        state = self._state
        state.is_loading = True
        state.last_error = None
        log.debug(f"[refresh] loading scope={self.scope}")
        try:
            pods = await self.api.list_pods(self.scope)
        except TransportError as e:
            state.last_error = str(e)
            log.warning(f"[refresh] scope={self.scope} failed, keeping {len(state.pods)} stale pods: {e}")
        else:
            state.pods = tuple(pods)
            state.last_success = self._clock()
            state.last_error = None
            log.debug(f"[refresh] scope={self.scope} loaded {len(pods)} pods")
        finally:
            state.is_loading = False

    def groups(self) -> List[NamespaceGroup]:
        return aggregate_by_namespace(self._state.pods)


class NamespaceCatalog:
    """
    Known namespaces, loaded once.

    ``is_loading`` is True from construction until ``load`` finishes. An empty
    catalog without error is still loading; an empty catalog with an error
    has failed.
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self.namespaces: List[NamespaceInfo] = []
        self.is_loading = True
        self.error: Optional[str] = None

    async def load(self) -> None:
        try:
            self.namespaces = await self.api.list_namespaces()
            log.debug(f"[catalog] loaded {len(self.namespaces)} namespaces")
        except TransportError as e:
            self.error = str(e)
            log.warning(f"[catalog] failed: {e}")
        finally:
            self.is_loading = False

    def names(self) -> List[str]:
        return [ns.name for ns in self.namespaces]
