from django.http import HttpResponse
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from reviews.serializers import (
    BatchStatusSerializer,
    BestProjectSerializer,
    ExtensionCreateSerializer,
    ExtensionRequestSerializer,
    HardLockSerializer,
    PptApprovalSerializer,
    ResolveRequestSerializer,
    StudentReviewSerializer,
    TeamReviewSerializer,
    record_payload,
)
from reviews.services import (
    access_control,
    aggregation,
    extension_workflow,
    marks_export,
    submission,
    team_annotations,
)
from reviews.services.lookups import get_project, get_student
from rubrics.services.resolver import normalize_faculty_type

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


class RequestStatusView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        params = request.query_params
        student = get_student(params.get('reg_no'))
        access_control.assert_can_view_student(request.user, student)
        result = extension_workflow.latest_request_status(student, params.get('review_name'), params.get('faculty_type'))
        return Response({'status': result})


class BatchRequestStatusView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, *args, **kwargs):
        serializer = BatchStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        statuses = extension_workflow.batch_request_status(serializer.validated_data['requests'], viewer=request.user)
        return Response({'statuses': statuses})


class ExtensionRequestCreateView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, *args, **kwargs):
        serializer = ExtensionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        student = get_student(data['reg_no'])
        req = extension_workflow.create_request(
            student, data['review_name'], request.user, data['faculty_type'], data['reason'],
        )
        return Response(
            {'request_id': req.pk, 'status': req.status, 'message': 'Request submitted successfully'},
            status=status.HTTP_201_CREATED,
        )


class ExtensionRequestListView(APIView):
    """Admin inbox of extension requests for one faculty type, grouped by faculty.

    ?status=pending limits the list to unresolved requests.
    """
    permission_classes = (IsAuthenticated,)

    def get(self, request, faculty_type, *args, **kwargs):
        school = request.query_params.get('school') or request.user.school or None
        department = request.query_params.get('department') or request.user.department or None
        access_control.assert_admin(request.user, school, department)

        if (request.query_params.get('status') or '').lower() == 'pending':
            groups = extension_workflow.pending_requests_by_faculty(faculty_type, school, department)
        else:
            groups = extension_workflow.requests_by_faculty(faculty_type, school, department)
        return Response({'faculty_type': normalize_faculty_type(faculty_type), 'results': groups})


class ResolveExtensionRequestView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, *args, **kwargs):
        access_control.assert_admin(request.user)
        serializer = ResolveRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        req = extension_workflow.resolve_request(
            data['request_id'], request.user, data['status'], data.get('new_deadline'),
        )
        return Response({'message': f'Request {req.status} successfully', 'request': ExtensionRequestSerializer(req).data})


class StudentReviewView(APIView):
    permission_classes = (IsAuthenticated,)

    def put(self, request, *args, **kwargs):
        serializer = StudentReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        student = get_student(data['reg_no'])
        payload = {k: data[k] for k in ('marks', 'comments', 'attendance') if k in data}
        result = submission.apply_submission(
            student, data['review_name'], request.user, data['faculty_type'], payload,
        )
        return Response(record_payload(result.record, result.reset_components))


class TeamReviewView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, project_id, *args, **kwargs):
        project = get_project(project_id)
        serializer = TeamReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        results = submission.apply_team_submission(
            project, data['review_name'], request.user, data['faculty_type'], data['students'],
        )
        return Response({
            'project_id': project.pk,
            'students': [record_payload(r.record, r.reset_components) for r in results.values()],
        })


class TeamSummaryView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, project_id, *args, **kwargs):
        project = get_project(project_id)
        role = normalize_faculty_type(request.query_params.get('faculty_type'))
        if access_control.is_admin(request.user):
            access_control.assert_admin(request.user, project.school, project.department)
        else:
            access_control.assert_project_role(request.user, project, role)
        return Response(aggregation.team_review_summary(project, role))


class PptApprovalView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, project_id, *args, **kwargs):
        project = get_project(project_id)
        serializer = PptApprovalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        gate = team_annotations.set_ppt_approval(project, request.user, serializer.validated_data['approvals'])
        project.refresh_from_db()
        return Response({'project_id': project.pk, 'ppt_status': gate, 'ppt_approved': project.ppt_approved})


class BestProjectView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, project_id, *args, **kwargs):
        project = get_project(project_id)
        serializer = BestProjectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = team_annotations.set_best_project(project, request.user, serializer.validated_data['best_project'])
        return Response({'project_id': project.pk, 'best_project': project.best_project})


class HardLockView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, *args, **kwargs):
        access_control.assert_admin(request.user)
        serializer = HardLockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        student = get_student(data['reg_no'])
        record = extension_workflow.set_hard_lock(student, data['review_name'], request.user, data['locked'])
        return Response(record_payload(record))


class MarksExportView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        school = request.query_params.get('school') or request.user.school
        department = request.query_params.get('department') or request.user.department
        access_control.assert_admin(request.user, school, department)

        wb = marks_export.build_marks_workbook(school, department)
        filename = f'marks_{school}_{department}.xlsx'.replace(' ', '_')
        response = HttpResponse(marks_export.workbook_bytes(wb), content_type=XLSX_CONTENT_TYPE)
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response
