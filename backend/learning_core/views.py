from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from accounts.permissions import IsContentAdmin, IsContentAdminOrReadOnly
from .models import Attendance, Course, Lecture, Question, QuizSetting
from .serializers import (
    AttendanceMarkSerializer, AttendanceSerializer, CourseSerializer, LectureSerializer,
    QuestionCreateSerializer, QuestionSerializer, QuizSettingSerializer
)
from .services import AttendanceService, ContentError, LectureContentService


class CourseViewSet(viewsets.ModelViewSet):
    """Courses for a year. Students read, content admins edit."""
    queryset = Course.objects.all()
    serializer_class = CourseSerializer
    permission_classes = [IsContentAdminOrReadOnly]

    def get_queryset(self):
        queryset = self.queryset
        year = self.request.query_params.get('year')
        if year:
            queryset = queryset.filter(year=year)
        return queryset


class LectureViewSet(viewsets.ModelViewSet):
    queryset = Lecture.objects.with_availability().select_related('course')
    serializer_class = LectureSerializer
    permission_classes = [IsContentAdminOrReadOnly]

    def get_queryset(self):
        queryset = self.queryset
        course_id = self.request.query_params.get('course_id')
        if course_id:
            queryset = queryset.filter(course_id=course_id)
        if not self.request.user.is_staff:
            queryset = queryset.visible()
        return queryset

    @action(detail=True, methods=['get', 'post'], permission_classes=[IsContentAdmin])
    def questions(self, request, pk=None):
        """List or add questions of a lecture's quiz variants, essay set and homework."""
        lecture = self.get_object()
        if request.method == 'GET':
            queryset = lecture.questions.all()
            question_set = request.query_params.get('set')
            if question_set:
                queryset = queryset.filter(question_set=question_set)
            return Response(QuestionSerializer(queryset, many=True).data)

        serializer = QuestionCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            question = LectureContentService(lecture).add_question(**serializer.validated_data)
        except ContentError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(QuestionSerializer(question).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get', 'put'], url_path='quiz-duration',
            permission_classes=[IsContentAdminOrReadOnly])
    def quiz_duration(self, request, pk=None):
        lecture = self.get_object()
        if request.method == 'GET':
            setting = QuizSetting.objects.filter(lecture=lecture).first()
            if setting is None:
                return Response({'lecture': lecture.pk, 'duration_minutes': None})
            return Response(QuizSettingSerializer(setting).data)

        try:
            setting = LectureContentService(lecture).set_quiz_duration(
                request.data.get('duration_minutes'))
        except ContentError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(QuizSettingSerializer(setting).data)

    @action(detail=True, methods=['get', 'post'], permission_classes=[IsContentAdmin])
    def attendance(self, request, pk=None):
        """List who attended, or mark a scanned student code present."""
        lecture = self.get_object()
        if request.method == 'GET':
            records = Attendance.objects.filter(lecture=lecture).select_related('student')
            return Response(AttendanceSerializer(records, many=True).data)

        serializer = AttendanceMarkSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        service = AttendanceService(lecture)
        try:
            record, created = service.mark(
                serializer.validated_data['student_code'], marked_by=request.user.email or request.user.username)
        except ContentError as e:
            return Response({'error': e.message}, status=status.HTTP_404_NOT_FOUND)

        data = AttendanceSerializer(record).data
        if not created:
            data['detail'] = f"{record.student.first_name} {record.student.second_name} is already marked present."
            return Response(data, status=status.HTTP_200_OK)
        return Response(data, status=status.HTTP_201_CREATED)


class QuestionViewSet(viewsets.ModelViewSet):
    """Edit or remove individual questions. New questions go through the lecture."""
    queryset = Question.objects.all()
    serializer_class = QuestionSerializer
    permission_classes = [IsContentAdmin]
    http_method_names = ['get', 'put', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = self.queryset
        lecture_id = self.request.query_params.get('lecture_id')
        if lecture_id:
            queryset = queryset.filter(lecture_id=lecture_id)
        return queryset
