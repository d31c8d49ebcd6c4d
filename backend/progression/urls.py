from django.urls import path
from . import views

urlpatterns = [
    path('courses/<uuid:course_id>/lectures/', views.CourseLecturesView.as_view(), name='course-lectures'),
    path('courses/<uuid:course_id>/summary/', views.CourseSummaryView.as_view(), name='course-summary'),
    path('lectures/<uuid:lecture_id>/', views.LectureProgressView.as_view(), name='lecture-progress'),
    path('lectures/<uuid:lecture_id>/quiz/start/', views.QuizStartView.as_view(), name='quiz-start'),
    path('lectures/<uuid:lecture_id>/quiz/submit/', views.QuizSubmitView.as_view(), name='quiz-submit'),
    path('redeem/', views.RedeemCodeView.as_view(), name='redeem-code'),

    # Super-admin review
    path('admin/lectures/<uuid:lecture_id>/students/',
         views.LectureStudentsReviewView.as_view(), name='lecture-students'),
    path('admin/lectures/<uuid:lecture_id>/students/<uuid:student_id>/toggle/',
         views.ProgressToggleView.as_view(), name='progress-toggle'),
    path('admin/lectures/<uuid:lecture_id>/students/<uuid:student_id>/reset-attempts/',
         views.ResetAttemptsView.as_view(), name='reset-attempts'),
]
