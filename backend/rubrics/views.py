from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import ResolvedReviewSerializer
from .services import resolver


class RubricReviewsView(APIView):
    """GET /api/rubrics/reviews/?faculty_type=guide|panel[&school=&department=]

    Unit defaults to the requesting faculty's school and department. An
    unconfigured unit returns an empty review list.
    """
    permission_classes = (permissions.IsAuthenticated,)

    def get(self, request):
        school = request.query_params.get('school') or request.user.school
        department = request.query_params.get('department') or request.user.department
        role = resolver.normalize_faculty_type(request.query_params.get('faculty_type'))

        rubric = resolver.get_rubric(school, department)
        reviews = resolver.resolve_rubric_reviews(rubric, role)
        return Response({
            'school': school,
            'department': department,
            'faculty_type': role,
            'configured': rubric is not None,
            'reviews': ResolvedReviewSerializer(reviews, many=True).data,
        })
