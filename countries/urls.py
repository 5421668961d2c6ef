from django.urls import path
from . import views


urlpatterns = [
    # GET /status → count and latest refresh time
    path('status', views.get_status, name='get_status'),
    # POST /countries/refresh → fetch both sources and upsert
    path('countries/refresh', views.refresh_countries, name='refresh_countries'),

    # GET /countries/image → rendered summary, must come before <name>
    path('countries/image', views.get_summary_image, name='get_summary_image'),
    # GET /countries → list with region/currency filters and gdp_desc sort
    path('countries', views.list_countries, name='list_countries'),

    # GET or DELETE /countries/<name> → case-insensitive detail or delete
    path('countries/<str:name>', views.country_detail, name='country_detail'),
]
