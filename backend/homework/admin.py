from django.contrib import admin
from .models import HomeworkDraft, HomeworkSubmission


@admin.register(HomeworkSubmission)
class HomeworkSubmissionAdmin(admin.ModelAdmin):
    list_display = ['student', 'lecture', 'score', 'total', 'submitted_at']
    list_filter = ['lecture__course']
    search_fields = ['student__username', 'student__student_code', 'lecture__title']
    readonly_fields = ['id', 'answers', 'submitted_at']
    ordering = ['-submitted_at']


@admin.register(HomeworkDraft)
class HomeworkDraftAdmin(admin.ModelAdmin):
    list_display = ['student', 'lecture', 'last_saved']
    search_fields = ['student__username', 'lecture__title']
    readonly_fields = ['id', 'last_saved']
