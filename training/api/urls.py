from django.urls import path
from training.api.views import (
    TrainingSessionListCreateView,
    TrainingSessionDetailView,
    SessionNotesView,
    SessionAttendanceView,
    RecurringScheduleListCreateView,
    RecurrencePatternDetailView,
    RecurrencePatternExtendView,
    AttendanceStatisticsView,
    PlayerAttendanceView,
    CalendarView,
)

app_name = 'training_api'

urlpatterns = [
    path('sessions/', TrainingSessionListCreateView.as_view(), name='session-list-create'),
    path('sessions/<int:pk>/', TrainingSessionDetailView.as_view(), name='session-detail'),
    path('sessions/<int:pk>/notes/', SessionNotesView.as_view(), name='session-notes'),
    path('sessions/<int:pk>/attendance/', SessionAttendanceView.as_view(), name='session-attendance'),

    path('recurring/', RecurringScheduleListCreateView.as_view(), name='recurring-list-create'),
    path('recurring/<int:pk>/', RecurrencePatternDetailView.as_view(), name='recurring-detail'),
    path('recurring/<int:pk>/extend/', RecurrencePatternExtendView.as_view(), name='recurring-extend'),

    path('attendance/statistics/', AttendanceStatisticsView.as_view(), name='attendance-statistics'),
    path('players/<int:pk>/attendance/', PlayerAttendanceView.as_view(), name='player-attendance'),

    path('calendar/', CalendarView.as_view(), name='calendar'),
]
