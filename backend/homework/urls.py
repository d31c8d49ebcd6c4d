from django.urls import path
from . import views

urlpatterns = [
    path('lectures/<uuid:lecture_id>/', views.HomeworkView.as_view(), name='homework'),
    path('lectures/<uuid:lecture_id>/draft/', views.HomeworkDraftView.as_view(), name='homework-draft'),
    path('lectures/<uuid:lecture_id>/submit/', views.HomeworkSubmitView.as_view(), name='homework-submit'),
]
