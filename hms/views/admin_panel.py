"""
Administrator endpoints: system overview and the activity log.

The ``/api/admin`` section is reserved for administrators by the route
guard; ``IsAdminRole`` is repeated here so the views stay closed even if
the route table is edited.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from hms.permissions import IsAdminRole, STAFF_PERMISSIONS
from hms.services.dashboard import recent_activity, settings_overview


@api_view(['GET'])
@permission_classes(STAFF_PERMISSIONS + [IsAdminRole])
def admin_overview(request):
    return Response({'ok': True, 'data': settings_overview()})


@api_view(['GET'])
@permission_classes(STAFF_PERMISSIONS + [IsAdminRole])
def admin_activity(request):
    module = (request.query_params.get('module') or '').strip() or None
    try:
        limit = max(1, min(int(request.query_params.get("limit") or 50), 200))
    except ValueError:
        limit = 50
    rows = recent_activity(module, limit=limit)
    return Response({'ok': True, 'data': [{
        'id': r.id,
        'user': r.user.display_name if r.user else None,
        'userId': r.user_id,
        'action': r.action,
        'module': r.module,
        'recordId': r.record_id,
        'description': r.description,
        'createdAt': r.created_at.isoformat(),
    } for r in rows]})
