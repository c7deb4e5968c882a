from django.http import JsonResponse


def health(request):
    """
    Endpoint de sante tres simple (sonde de l'hebergeur).
    GET /api/common/health -> {"status":"ok","service":"dev4com-backend"}
    """
    return JsonResponse({"status": "ok", "service": "dev4com-backend"})
