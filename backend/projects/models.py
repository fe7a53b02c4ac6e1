from django.conf import settings
from django.db import models
from django.db.models import UniqueConstraint


class Panel(models.Model):
    faculty1 = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='panels_as_first')
    faculty2 = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='panels_as_second')
    school = models.CharField(max_length=100)
    department = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Panel {self.pk}: {self.faculty1} & {self.faculty2}"

    def has_member(self, user) -> bool:
        if user is None or user.pk is None:
            return False
        return user.pk in (self.faculty1_id, self.faculty2_id)


class Project(models.Model):
    name = models.CharField(max_length=200, unique=True)
    school = models.CharField(max_length=100)
    department = models.CharField(max_length=100)
    guide_faculty = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='guided_projects')
    panel = models.ForeignKey(Panel, null=True, blank=True, on_delete=models.SET_NULL, related_name='projects')
    # mirror of "every student's ppt_approved"; recomputed on each approval write
    ppt_approved = models.BooleanField(default=False)
    best_project = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('name',)
        indexes = [
            models.Index(fields=['school', 'department'], name='project_unit_idx'),
        ]

    def __str__(self):
        return self.name


class Student(models.Model):
    reg_no = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=150)
    email = models.EmailField(blank=True, default='')
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='students')
    school = models.CharField(max_length=100)
    department = models.CharField(max_length=100)
    ppt_approved = models.BooleanField(default=False)
    ppt_locked = models.BooleanField(default=False)

    class Meta:
        ordering = ('reg_no',)

    def __str__(self):
        return f"{self.reg_no} - {self.name}"


class ReviewRecord(models.Model):
    """Marks, comments and attendance a student holds for one review."""

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='review_records')
    review_spec = models.ForeignKey('rubrics.ReviewSpec', on_delete=models.PROTECT, related_name='records')
    marks = models.JSONField(default=dict, blank=True)
    comments = models.TextField(blank=True, default='')
    attendance_value = models.BooleanField(default=False)
    attendance_locked = models.BooleanField(default=False)
    # explicit hard lock; cleared only by an approved extension or an admin
    locked = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            UniqueConstraint(fields=['student', 'review_spec'], name='unique_review_record_per_student'),
        ]

    def __str__(self):
        return f"{self.student.reg_no}: {self.review_spec.review_name}"

    @property
    def has_marks(self) -> bool:
        return any(v for v in (self.marks or {}).values())


class DeadlineOverride(models.Model):
    """Per-student deadline granted by an approved extension. Only `to_at` ever moves, forward."""

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='deadline_overrides')
    review_spec = models.ForeignKey('rubrics.ReviewSpec', on_delete=models.PROTECT, related_name='deadline_overrides')
    from_at = models.DateTimeField()
    to_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            UniqueConstraint(fields=['student', 'review_spec'], name='unique_deadline_override_per_student'),
        ]

    def __str__(self):
        return f"{self.student.reg_no}: {self.review_spec.review_name} until {self.to_at}"
