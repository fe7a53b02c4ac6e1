from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font

from projects.models import ReviewRecord, Student
from reviews.exceptions import NotFoundError
from rubrics.services.resolver import get_rubric

BASE_COLUMNS = ['Register No', 'Name', 'Email', 'Project', 'School', 'Department', 'PPT Approved']


def build_marks_workbook(school: str, department: str) -> Workbook:
    """One row per student of the unit: identity, then components, comments and attendance per review."""
    rubric = get_rubric(school, department)
    if rubric is None:
        raise NotFoundError(f'No marking schema configured for {school} / {department}.')

    specs = list(rubric.reviews.all().order_by('order', 'id'))
    header = list(BASE_COLUMNS)
    for spec in specs:
        header.extend(f'{spec.label} - {name}' for name in spec.component_names)
        header.append(f'{spec.label} - Total')
        header.append(f'{spec.label} - Comments')
        header.append(f'{spec.label} - Attendance')

    wb = Workbook()
    ws = wb.active
    ws.title = 'marks'
    ws.append(header)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    students = Student.objects.filter(school=school, department=department).select_related('project')
    records = {
        (r.student_id, r.review_spec_id): r
        for r in ReviewRecord.objects.filter(student__in=students, review_spec__rubric=rubric)
    }

    for student in students:
        row = [
            student.reg_no,
            student.name,
            student.email,
            student.project.name,
            student.school,
            student.department,
            'Yes' if student.ppt_approved else 'No',
        ]
        for spec in specs:
            record = records.get((student.pk, spec.pk))
            marks = record.marks if record else {}
            values = [marks.get(name, 0) for name in spec.component_names]
            row.extend(values)
            row.append(sum(values))
            row.append(record.comments if record else '')
            if record is None:
                row.append('')
            else:
                row.append('Present' if record.attendance_value else 'Absent')
        ws.append(row)

    ws.freeze_panes = 'C2'
    return wb


def workbook_bytes(wb: Workbook) -> bytes:
    buf = BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf.getvalue()
