from django.urls import path

from . import views

urlpatterns = [
    path('request-status/', views.RequestStatusView.as_view(), name='request-status'),
    path('request-status/batch/', views.BatchRequestStatusView.as_view(), name='request-status-batch'),
    path('extensions/', views.ExtensionRequestCreateView.as_view(), name='extension-create'),
    path('extensions/resolve/', views.ResolveExtensionRequestView.as_view(), name='extension-resolve'),
    path('extensions/<str:faculty_type>/', views.ExtensionRequestListView.as_view(), name='extension-list'),
    path('student-review/', views.StudentReviewView.as_view(), name='student-review'),
    path('projects/<int:project_id>/team-review/', views.TeamReviewView.as_view(), name='team-review'),
    path('projects/<int:project_id>/summary/', views.TeamSummaryView.as_view(), name='team-summary'),
    path('projects/<int:project_id>/ppt/', views.PptApprovalView.as_view(), name='team-ppt'),
    path('projects/<int:project_id>/best-project/', views.BestProjectView.as_view(), name='team-best-project'),
    path('hard-lock/', views.HardLockView.as_view(), name='hard-lock'),
    path('export/', views.MarksExportView.as_view(), name='marks-export'),
]
