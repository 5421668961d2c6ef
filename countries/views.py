import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.http import FileResponse

from .errors import DecodeFailed, NotFound, SourceUnavailable, StoreFailure
from .refresh import refresh_countries as run_refresh
from .serializers import CountryQuerySerializer, CountrySerializer
from .store import DjangoCountryStore
from . import services

logger = logging.getLogger(__name__)


def error_response(error, http_status, details=None):
    body = {"error": error}
    if details:
        body["details"] = details
    return Response(body, status=http_status)


def store_failure_response(exc):
    return error_response("Database error", status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


@api_view(['POST'])
def refresh_countries(request):
    """
    POST /countries/refresh
    Fetch countries and exchange rates, then update or create cached data.
    """
    try:
        result = run_refresh(DjangoCountryStore())
    except SourceUnavailable as exc:
        return error_response(
            "External data source unavailable",
            status.HTTP_503_SERVICE_UNAVAILABLE,
            f"Could not fetch data from {exc.source}",
        )
    except DecodeFailed as exc:
        return error_response(
            "Invalid response from external data source",
            status.HTTP_502_BAD_GATEWAY,
            f"Could not parse data from {exc.source}",
        )
    except StoreFailure as exc:
        return error_response(
            "Database error",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"applied": exc.applied, "reason": str(exc)},
        )

    return Response(
        {
            "message": "Refresh successful",
            "last_refreshed_at": result.refreshed_at.isoformat(),
            "valid_countries": result.applied,
            "duration_seconds": result.duration_seconds,
            "image_generated": result.image_generated,
            "errors": result.errors[:5],  # show only first few
        },
        status=status.HTTP_200_OK,
    )


@api_view(['GET'])
def list_countries(request):
    """
    GET /countries
    Filters:
      - region, currency (alias currency_code), exact match
    Sorting:
      - ?sort=gdp_desc (countries without a GDP estimate last)
    Default:
      - Ordered by id ascending.
    """
    query = CountryQuerySerializer(data=request.query_params)
    if not query.is_valid():
        return error_response("Validation failed", status.HTTP_400_BAD_REQUEST, query.errors)

    try:
        countries = services.list_countries(DjangoCountryStore(), **query.validated_data)
    except StoreFailure as exc:
        return store_failure_response(exc)
    return Response(CountrySerializer(countries, many=True).data)


@api_view(['GET', 'DELETE'])
def country_detail(request, name):
    """
    GET /countries/:name  -> return 404 JSON if not found
    DELETE /countries/:name -> delete, return 204 or 404
    """
    store = DjangoCountryStore()
    try:
        if request.method == 'GET':
            country = services.get_country(store, name)
            return Response(CountrySerializer(country).data)
        services.delete_country(store, name)
    except NotFound:
        return error_response("Country not found", status.HTTP_404_NOT_FOUND)
    except StoreFailure as exc:
        return store_failure_response(exc)
    logger.info("Deleted country %s", name)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
def get_status(request):
    """
    GET /status -> { total_countries, last_refreshed_at }
    last_refreshed_at is taken as the max(last_refreshed_at) across records (or null)
    """
    try:
        data = services.get_status(DjangoCountryStore())
    except StoreFailure as exc:
        return store_failure_response(exc)
    last = data["last_refreshed_at"]
    return Response({
        "total_countries": data["total_countries"],
        "last_refreshed_at": last.isoformat() if last else None,
    })


@api_view(['GET'])
def get_summary_image(request):
    """
    GET /countries/image
    Serve the summary image from the cache directory, or a JSON 404.
    """
    try:
        path = services.get_summary_image_path()
    except NotFound:
        return error_response("Summary image not found", status.HTTP_404_NOT_FOUND)
    return FileResponse(open(path, 'rb'), content_type='image/png')
