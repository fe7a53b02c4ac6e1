from django.urls import path

from .views import RubricReviewsView

urlpatterns = [
    path('reviews/', RubricReviewsView.as_view(), name='rubric-reviews'),
]
