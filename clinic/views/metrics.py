from rest_framework.decorators import api_view
from rest_framework.response import Response

from clinic.services.metrics import dashboard_metrics as compute_dashboard_metrics


@api_view(['GET'])
def dashboard_metrics(request):
    return Response(compute_dashboard_metrics())
