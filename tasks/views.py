"""
Views for task search.
"""
import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from tasks.search.exceptions import SearchExecutionError, SearchValidationError
from tasks.search.filters import Principal
from tasks.search.service import get_task_search_service
from tasks.serializers import TaskSearchResultSerializer

logger = logging.getLogger(__name__)

# Parameters that may be repeated (?status=READY&status=ON_HOLD)
LIST_PARAMS = ('status', 'assigneeIds')


class TaskSearchView(APIView):
    """
    GET /api/v1/tasks/search/

    Query params: search, status, assigneeIds, customerId,
    scheduledFrom/To, createdFrom/To, completedFrom/To, sortBy, sortOrder,
    restrictToMine, cursor, pageSize.

    Workers only ever get their own tasks; admins get everything unless
    they pass restrictToMine=true.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        params = {}
        for key, values in request.query_params.lists():
            params[key] = values if key in LIST_PARAMS else values[-1]

        principal = Principal.from_user(request.user)
        try:
            result = get_task_search_service().search(principal, params)
        except SearchValidationError as e:
            return Response(e.errors, status=status.HTTP_400_BAD_REQUEST)
        except SearchExecutionError as e:
            return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(TaskSearchResultSerializer(result).data)
