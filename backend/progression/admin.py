from django.contrib import admin
from .models import AccessCode, ProgressRecord, QuizAttemptTimer


@admin.register(ProgressRecord)
class ProgressRecordAdmin(admin.ModelAdmin):
    list_display = ['student', 'lecture', 'unlocked', 'quiz_completed', 'attempts', 'is_enabled', 'updated_at']
    list_filter = ['unlocked', 'quiz_completed', 'is_enabled', 'lecture__course']
    search_fields = ['student__username', 'student__student_code', 'lecture__title']
    readonly_fields = ['id', 'created_at', 'updated_at', 'answers']


@admin.register(QuizAttemptTimer)
class QuizAttemptTimerAdmin(admin.ModelAdmin):
    list_display = ['student', 'lecture', 'variant', 'start_time', 'duration_seconds']
    search_fields = ['student__username', 'lecture__title']
    readonly_fields = ['id', 'question_order']


@admin.register(AccessCode)
class AccessCodeAdmin(admin.ModelAdmin):
    list_display = ['code', 'is_used', 'used_by', 'lecture', 'used_at', 'created_at']
    list_filter = ['is_used']
    search_fields = ['code', 'used_by__username']
    readonly_fields = ['id', 'used_by', 'used_at', 'lecture', 'created_at']
    ordering = ['-created_at']
