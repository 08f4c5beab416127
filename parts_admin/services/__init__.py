"""Back-office services."""

from parts_admin.services.admin_views import AdminViewService
from parts_admin.services.lifecycle import OrderLifecycle
from parts_admin.services.sequencing import OrderListView, RequestSequencer

__all__ = [
    "AdminViewService",
    "OrderLifecycle",
    "OrderListView",
    "RequestSequencer",
]
