from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from accounts.permissions import IsSuperAdmin
from learning_core.models import Course, Lecture
from learning_core.serializers import StudentQuestionSerializer
from .exceptions import InvalidCode, MaxAttemptsReached, ProgressionError, RedeemFailed
from .keys import ProgressKey
from .serializers import (
    LectureEntrySerializer, ProgressRecordSerializer, QuizSubmitSerializer,
    RedeemCodeSerializer, StudentProgressRowSerializer, ToggleSerializer
)
from .services import (
    AccessCodeService, LectureProgressService, LectureReviewService,
    ProgressStore, QuizSessionController
)


def _get_lecture(lecture_id):
    return get_object_or_404(Lecture.objects.select_related('course'), pk=lecture_id)


class CourseLecturesView(APIView):
    """A course's lectures with access resolved for the requesting student."""

    def get(self, request, course_id):
        course = get_object_or_404(Course, pk=course_id)
        entries = LectureProgressService(request.user).course_lectures(course)
        return Response(LectureEntrySerializer(entries, many=True).data)


class CourseSummaryView(APIView):
    def get(self, request, course_id):
        course = get_object_or_404(Course, pk=course_id)
        return Response(LectureProgressService(request.user).course_summary(course))


class LectureProgressView(APIView):
    def get(self, request, lecture_id):
        lecture = _get_lecture(lecture_id)
        record = ProgressStore().get_progress(request.user, ProgressKey.for_lecture(lecture))
        access = LectureProgressService(request.user).lecture_access(lecture)
        data = ProgressRecordSerializer(record).data
        data.update(access._asdict())
        return Response(data)


class QuizStartView(APIView):
    """Start a quiz attempt, or resume the one already running."""

    def post(self, request, lecture_id):
        lecture = _get_lecture(lecture_id)
        access = LectureProgressService(request.user).lecture_access(lecture)
        if access.locked:
            return Response({'error': access.lock_reason}, status=status.HTTP_403_FORBIDDEN)

        controller = QuizSessionController(request.user, lecture)
        try:
            controller.start()
        except MaxAttemptsReached as e:
            return Response({'error': e.message}, status=status.HTTP_403_FORBIDDEN)
        except ProgressionError as e:
            return Response({'error': e.message}, status=status.HTTP_409_CONFLICT)

        return Response({
            'state': controller.state,
            'questions': StudentQuestionSerializer(controller.questions, many=True).data,
            'duration_seconds': controller.timer.duration_seconds,
            'remaining_seconds': controller.remaining_seconds(),
            'notice': controller.notice,
        })


class QuizSubmitView(APIView):
    def post(self, request, lecture_id):
        lecture = _get_lecture(lecture_id)
        access = LectureProgressService(request.user).lecture_access(lecture)
        if access.locked:
            return Response({'error': access.lock_reason}, status=status.HTTP_403_FORBIDDEN)
        serializer = QuizSubmitSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        controller = QuizSessionController(request.user, lecture).resume()
        try:
            result = controller.submit(**serializer.validated_data)
        except ProgressionError as e:
            return Response({'error': e.message}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        if result is None:
            # Duplicate or late submission: report what is stored
            record = ProgressStore().get_progress(request.user, controller.key)
            return Response({'ignored': True, 'progress': ProgressRecordSerializer(record).data})
        return Response(result)


class RedeemCodeView(APIView):
    def post(self, request):
        serializer = RedeemCodeSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        lecture = _get_lecture(serializer.validated_data['lecture_id'])
        access = LectureProgressService(request.user).lecture_access(lecture)
        if not access.can_unlock_with_code:
            reason = access.lock_reason or "This lecture is already unlocked."
            return Response({'error': reason}, status=status.HTTP_403_FORBIDDEN)

        try:
            record = AccessCodeService().redeem_code(
                request.user, serializer.validated_data['code'], ProgressKey.for_lecture(lecture))
        except InvalidCode as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        except RedeemFailed as e:
            return Response({'error': e.message}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(ProgressRecordSerializer(record).data)


class LectureStudentsReviewView(APIView):
    permission_classes = [IsSuperAdmin]

    def get(self, request, lecture_id):
        service = LectureReviewService(_get_lecture(lecture_id))
        serializer = StudentProgressRowSerializer(
            service.records(), many=True, context={'homework': service.homework_by_student()})
        return Response(serializer.data)


class ProgressToggleView(APIView):
    """Revoke or restore a student's access to a lecture they unlocked."""
    permission_classes = [IsSuperAdmin]

    def post(self, request, lecture_id, student_id):
        lecture = _get_lecture(lecture_id)
        student = get_object_or_404(get_user_model(), pk=student_id)
        serializer = ToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = LectureReviewService(lecture).toggle(student, serializer.validated_data['is_enabled'])
        return Response(ProgressRecordSerializer(record).data)


class ResetAttemptsView(APIView):
    permission_classes = [IsSuperAdmin]

    def post(self, request, lecture_id, student_id):
        lecture = _get_lecture(lecture_id)
        student = get_object_or_404(get_user_model(), pk=student_id)
        record = LectureReviewService(lecture).reset_attempts(student)
        return Response(ProgressRecordSerializer(record).data)
