from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from django.shortcuts import get_object_or_404
from learning_core.models import Lecture
from learning_core.serializers import StudentQuestionSerializer
from progression.services import LectureProgressService
from .serializers import HomeworkAnswersSerializer, HomeworkSubmissionSerializer
from .services import HomeworkAlreadySubmitted, HomeworkError, HomeworkService, HomeworkSubmissionFailed


class LectureHomeworkView(APIView):
    """Base for homework endpoints; only lectures open to the student are served."""

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.lecture = get_object_or_404(
            Lecture.objects.select_related('course'), pk=kwargs['lecture_id'])
        self.access = LectureProgressService(request.user).lecture_access(self.lecture)
        self.service = HomeworkService(request.user, self.lecture)

    def locked_response(self):
        return Response({'error': self.access.lock_reason}, status=status.HTTP_403_FORBIDDEN)


class HomeworkView(LectureHomeworkView):
    """Form state: questions and the restored draft, or the stored result once submitted."""

    def get(self, request, lecture_id):
        if self.access.locked:
            return self.locked_response()

        submission = self.service.submission()
        if submission is not None:
            return Response({
                'submitted': True,
                'submission': HomeworkSubmissionSerializer(submission).data,
            })
        return Response({
            'submitted': False,
            'mcq_questions': StudentQuestionSerializer(self.service.mcq_questions(), many=True).data,
            'essay_questions': StudentQuestionSerializer(self.service.essay_questions(), many=True).data,
            'draft': self.service.restore_draft(),
        })


class HomeworkDraftView(LectureHomeworkView):
    def put(self, request, lecture_id):
        if self.access.locked:
            return self.locked_response()
        serializer = HomeworkAnswersSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            self.service.ensure_open()
        except HomeworkError as e:
            return Response({'error': e.message}, status=status.HTTP_409_CONFLICT)
        draft = self.service.save_draft(**serializer.validated_data)
        return Response({
            'saved': draft is not None,
            'last_saved': draft.last_saved if draft else None,
        })


class HomeworkSubmitView(LectureHomeworkView):
    def post(self, request, lecture_id):
        if self.access.locked:
            return self.locked_response()
        serializer = HomeworkAnswersSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            submission = self.service.submit(**serializer.validated_data)
        except HomeworkAlreadySubmitted as e:
            return Response({'error': e.message}, status=status.HTTP_409_CONFLICT)
        except HomeworkSubmissionFailed as e:
            return Response({'error': e.message}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        except HomeworkError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(HomeworkSubmissionSerializer(submission).data, status=status.HTTP_201_CREATED)
