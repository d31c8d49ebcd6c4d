from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import Attendance, Course, Lecture, Question, QuizSetting, User


@admin.register(User)
class StudentAdmin(UserAdmin):
    list_display = ['username', 'first_name', 'second_name', 'student_code', 'system', 'year', 'is_staff']
    list_filter = ['system', 'year', 'is_staff', 'is_superuser']
    search_fields = ['username', 'first_name', 'second_name', 'student_code', 'phone']
    fieldsets = UserAdmin.fieldsets + (
        ('Student profile', {
            'fields': ('second_name', 'third_name', 'fourth_name', 'phone', 'parent_phone',
                       'student_code', 'system', 'year', 'devices'),
        }),
    )


class LectureInline(admin.TabularInline):
    model = Lecture
    fields = ['order', 'title', 'is_hidden', 'is_enabled_center', 'is_enabled_online']
    extra = 0


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ['title', 'year', 'created_at']
    list_filter = ['year']
    search_fields = ['title']
    inlines = [LectureInline]


@admin.register(Lecture)
class LectureAdmin(admin.ModelAdmin):
    list_display = ['title', 'course', 'order', 'is_hidden', 'is_enabled_center', 'is_enabled_online']
    list_filter = ['course__year', 'is_hidden']
    search_fields = ['title', 'course__title']
    ordering = ['course', 'order']


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ['lecture', 'question_set', 'question_type', 'order_index', 'marks']
    list_filter = ['question_set', 'question_type']
    search_fields = ['text', 'lecture__title']


@admin.register(QuizSetting)
class QuizSettingAdmin(admin.ModelAdmin):
    list_display = ['lecture', 'duration_minutes', 'updated_at']
    readonly_fields = ['updated_at']


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ['student', 'lecture', 'marked_at', 'marked_by']
    list_filter = ['lecture__course']
    search_fields = ['student__student_code', 'student__first_name']
    readonly_fields = ['id', 'marked_at']
