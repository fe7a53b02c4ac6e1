"""Who may do what to a review.

All checks raise AuthorizationError and run before any business rule.
"""
from typing import Set

from reviews.exceptions import AuthorizationError
from rubrics.models import FacultyType


def is_admin(user) -> bool:
    if user is None or not getattr(user, 'is_authenticated', False):
        return False
    if getattr(user, 'is_superuser', False):
        return True
    return bool(getattr(user, 'is_portal_admin', False))


def assert_admin(user, school: str = None, department: str = None) -> None:
    """Require an admin; a unit-scoped admin must also match the unit when one is given."""
    if not is_admin(user):
        raise AuthorizationError('Only administrators can perform this action.')
    if getattr(user, 'is_superuser', False):
        return
    if school and user.school and user.school != school:
        raise AuthorizationError('Administrator is not assigned to this school.')
    if department and user.department and user.department != department:
        raise AuthorizationError('Administrator is not assigned to this department.')


def faculty_roles_for_project(user, project) -> Set[str]:
    """Roles `user` holds for `project`: 'guide' when guiding it, 'panel' when on its panel."""
    roles = set()
    if user is None or getattr(user, 'pk', None) is None:
        return roles
    if project.guide_faculty_id == user.pk:
        roles.add(FacultyType.GUIDE.value)
    panel = project.panel
    if panel is not None and panel.has_member(user):
        roles.add(FacultyType.PANEL.value)
    return roles


def assert_project_role(user, project, role: str) -> None:
    if role not in faculty_roles_for_project(user, project):
        raise AuthorizationError(f'You are not the {role} faculty for project {project.name}.')


def assert_can_act(user, project, review_spec, role: str) -> None:
    """Faculty must hold `role` on the project and `role` must be the one that scores the review."""
    assert_project_role(user, project, role)
    if review_spec.faculty_type != role:
        raise AuthorizationError(
            f'{review_spec.label} is a {review_spec.faculty_type} review and cannot be modified by {role} faculty.'
        )


def assert_can_view_student(user, student) -> None:
    """Admins of the student's unit, and the guide or panel members of the student's project."""
    if is_admin(user):
        assert_admin(user, student.school, student.department)
        return
    if not faculty_roles_for_project(user, student.project):
        raise AuthorizationError(f'You are not assigned to the project of student {student.reg_no}.')
