"""BaseService — foundation for the CLI-facing services.

Every service receives a Persistence Gateway at construction time and,
optionally, the change notifier that fans events out to plugins.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from menuctl.domain.errors import MenuError
from menuctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from menuctl.infrastructure.gateway import PersistenceGateway
    from menuctl.plugins.notifier import ChangeNotifier

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class MenuService(BaseService):
            def delete_menu(self, menu_id: str) -> ServiceResult:
                try:
                    ...
                except MenuError as exc:
                    return self._fail("delete_menu", exc)
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        notifier: ChangeNotifier | None = None,
    ) -> None:
        self._gateway = gateway
        self._notifier = notifier

    @property
    def gateway(self) -> PersistenceGateway:
        return self._gateway

    @staticmethod
    def _fail(op: str, exc: MenuError, warnings: list[str] | None = None) -> ServiceResult:
        """Convert a domain exception into a failed ServiceResult."""
        logger.debug("%s failed: %s (%s)", op, exc.message, exc.code)
        return ServiceResult(
            ok=False,
            op=op,
            warnings=warnings or [],
            error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail),
        )
