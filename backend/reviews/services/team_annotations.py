import logging
from typing import Mapping, Union

from django.db import transaction

from projects.models import Project, Student
from reviews.exceptions import NotFoundError, ReviewValidationError, StateConflictError
from reviews.services import access_control, lock_evaluator
from rubrics.models import FacultyType

logger = logging.getLogger(__name__)


@transaction.atomic
def set_ppt_approval(project: Project, faculty, approvals: Union[bool, Mapping[str, bool]]) -> str:
    """Guide-only write of per-student PPT approval; returns the team's gate status.

    `approvals` is one bool for the whole team or ``{reg_no: bool}``. The
    project flag mirrors "every student approved".
    """
    access_control.assert_project_role(faculty, project, FacultyType.GUIDE)

    students = {s.reg_no: s for s in Student.objects.select_for_update().filter(project=project)}
    if isinstance(approvals, bool):
        wanted = {reg_no: approvals for reg_no in students}
    elif isinstance(approvals, Mapping) and approvals:
        wanted = dict(approvals)
    else:
        raise ReviewValidationError('approvals must be true/false or an object of reg_no to true/false.')

    unknown = sorted(str(r) for r in wanted if r not in students)
    if unknown:
        raise NotFoundError(f"Students not in project {project.name}: {', '.join(unknown)}")
    for reg_no, value in wanted.items():
        if not isinstance(value, bool):
            raise ReviewValidationError(f'PPT approval for {reg_no} must be true or false.')
        student = students[reg_no]
        if student.ppt_locked and student.ppt_approved != value:
            raise StateConflictError(f'PPT approval for {reg_no} is locked.')

    for reg_no, value in wanted.items():
        student = students[reg_no]
        if student.ppt_approved != value:
            student.ppt_approved = value
            student.save(update_fields=['ppt_approved'])

    project.ppt_approved = all(s.ppt_approved for s in students.values()) if students else False
    project.save(update_fields=['ppt_approved', 'updated_at'])

    status = lock_evaluator.ppt_gate_status(project)
    logger.info('PPT approval for project %s updated by %s: %s', project.name, faculty.pk, status)
    return status


@transaction.atomic
def set_best_project(project: Project, faculty, value: bool) -> Project:
    access_control.assert_project_role(faculty, project, FacultyType.PANEL)
    if not isinstance(value, bool):
        raise ReviewValidationError('best_project must be true or false.')
    if project.best_project != value:
        project.best_project = value
        project.save(update_fields=['best_project', 'updated_at'])
        logger.info('Project %s best_project set to %s by %s', project.name, value, faculty.pk)
    return project
