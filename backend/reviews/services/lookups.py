from projects.models import Project, ReviewRecord, Student
from reviews.exceptions import NotFoundError
from rubrics.services.resolver import get_review_spec


def get_student(reg_no) -> Student:
    student = Student.objects.select_related('project').filter(reg_no=str(reg_no or '').strip()).first()
    if student is None:
        raise NotFoundError(f'Student {reg_no} not found.')
    return student


def get_project(project_id) -> Project:
    try:
        pk = int(project_id)
    except (TypeError, ValueError):
        raise NotFoundError(f'Project {project_id} not found.')
    project = Project.objects.select_related('panel', 'guide_faculty').filter(pk=pk).first()
    if project is None:
        raise NotFoundError(f'Project {project_id} not found.')
    return project


def get_review_record(student: Student, review_name: str, for_update: bool = False) -> ReviewRecord:
    """The student's record for `review_name`; NotFoundError when the review is not one of theirs."""
    spec = get_review_spec(student, review_name)
    qs = ReviewRecord.objects.select_related('review_spec', 'student', 'student__project')
    if for_update:
        qs = qs.select_for_update(of=('self',))
    record = qs.filter(student=student, review_spec=spec).first()
    if record is None:
        raise NotFoundError(f"Review '{review_name}' not found for student {student.reg_no}.")
    return record
