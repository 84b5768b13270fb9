from django.urls import path
from .views import ResultHistoryView, declare_result, schedule_result, correct_result

urlpatterns = [
    path('', ResultHistoryView.as_view(), name='result-history'),
    path('declare/', declare_result, name='declare-result'),
    path('schedule/', schedule_result, name='schedule-result'),
    path('correct/', correct_result, name='correct-result'),
]
