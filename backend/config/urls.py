from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('learning_core.urls')),
    path('api/accounts/', include('accounts.urls')),
    path('api/progress/', include('progression.urls')),
    path('api/homework/', include('homework.urls')),
]
