from .links import RequestLinkViewSet
from .requests import ServiceRequestViewSet
from .schedule import ScheduleViewSet
from .workflow import RequestActivityListAPIView, ServiceRequestWorkflowViewSet

__all__ = (
    "RequestActivityListAPIView",
    "RequestLinkViewSet",
    "ScheduleViewSet",
    "ServiceRequestViewSet",
    "ServiceRequestWorkflowViewSet",
)
