from django.contrib import admin
from django.urls import path, include
from drf_yasg.views import get_schema_view
from drf_yasg import openapi
from rest_framework import permissions
from core.views import health_check

schema_view = get_schema_view(
    openapi.Info(
        title="Matka Backend API",
        default_version='v1',
        description="Betting, wallet and result settlement API",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),

    path('api/health/', health_check, name='health-check'),

    # API routes
    path('api/auth/', include('apps.accounts.urls')),
    path('api/wallet/', include('apps.wallet.urls')),
    path('api/games/', include('apps.games.urls')),
    path('api/results/', include('apps.games.result_urls')),
]

# Admin site customization
admin.site.site_header = 'Matka Administration'
admin.site.site_title = 'Matka Admin'
admin.site.index_title = 'Games, results and wallets'
