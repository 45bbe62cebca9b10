"""
Dashboard endpoint.

Counters shown on the landing page of every staff member. The payload is
cached and dropped whenever a mutation revalidates the dashboard.
"""
from __future__ import annotations

from rest_framework.decorators import api_view
from rest_framework.response import Response

from hms.services.dashboard import dashboard_stats


@api_view(['GET'])
def dashboard(request):
    return Response({'ok': True, 'data': dashboard_stats()})
