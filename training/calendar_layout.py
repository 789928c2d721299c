"""
Projection of training sessions onto day, week and month grids.

Vertical positions are in abstract units: a session starting ``m`` minutes
after midnight sits at ``(m - ANCHOR_HOUR * 60) / 60 * scale`` and is
``duration / 60 * scale`` tall. Overlapping sessions are positioned
independently and never re-flowed.
"""
import calendar
import zlib
from datetime import date, timedelta

ANCHOR_HOUR = 7
LAST_VISIBLE_HOUR = 21
VISIBLE_HOURS = list(range(ANCHOR_HOUR, LAST_VISIBLE_HOUR + 1))

DAY_SCALE = 6
WEEK_SCALE = 4
WEEK_COLUMN_PERCENT = 12.5
MONTH_CHIP_LIMIT = 3

VIEW_DAY = 'day'
VIEW_WEEK = 'week'
VIEW_MONTH = 'month'
VIEWS = (VIEW_DAY, VIEW_WEEK, VIEW_MONTH)

TEAM_PALETTE = ('blue', 'green', 'purple', 'orange', 'pink', 'yellow', 'indigo', 'teal')

# Sunday-first, matching the 0 = Sunday weekday numbering.
_month_calendar = calendar.Calendar(firstweekday=calendar.SUNDAY)


def block_position(start_time, duration_minutes: int, scale: float) -> tuple[float, float]:
    start_minutes = start_time.hour * 60 + start_time.minute
    offset = (start_minutes - ANCHOR_HOUR * 60) / 60 * scale
    height = duration_minutes / 60 * scale
    return offset, height


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def visible_range(view: str, anchor: date) -> tuple[date, date]:
    if view == VIEW_DAY:
        return anchor, anchor
    if view == VIEW_WEEK:
        start = week_start(anchor)
        return start, start + timedelta(days=6)
    weeks = _month_calendar.monthdatescalendar(anchor.year, anchor.month)
    return weeks[0][0], weeks[-1][-1]


def team_colors(sessions, stable: bool = False) -> dict:
    """
    Map team id to a palette color.

    By default teams are numbered in the order they first appear in
    ``sessions``, so the same team may change color between filtered views.
    With ``stable`` the color is keyed by a CRC32 of the team id instead.
    """
    colors = {}
    for session in sessions:
        team_id = session.team_id
        if team_id in colors:
            continue
        if stable:
            index = zlib.crc32(str(team_id).encode())
        else:
            index = len(colors)
        colors[team_id] = TEAM_PALETTE[index % len(TEAM_PALETTE)]
    return colors


def _time_label(value) -> str:
    return value.strftime('%H:%M') if value is not None else ''


def session_block(session, colors: dict, scale: float | None = None) -> dict:
    block = {
        'session_id': session.pk,
        'team_id': session.team_id,
        'team_name': session.team.name,
        'age_group': session.team.age_group,
        'date': session.session_date,
        'start_label': _time_label(session.start_time),
        'end_label': _time_label(session.end_time),
        'duration_minutes': session.duration_minutes,
        'location': session.location,
        'notes': session.notes,
        'kind': str(session.kind),
        'is_recurring': session.is_recurring,
        'is_cancelled': session.is_cancelled,
        'color': colors.get(session.team_id, TEAM_PALETTE[0]),
    }
    if scale is not None:
        block['offset'], block['height'] = block_position(session.start_time, session.duration_minutes, scale)
    return block


def _by_date(sessions) -> dict:
    buckets = {}
    for session in sessions:
        buckets.setdefault(session.session_date, []).append(session)
    for day_sessions in buckets.values():
        day_sessions.sort(key=lambda session: (session.start_time, session.pk))
    return buckets


def day_view(sessions, anchor: date, today: date, colors: dict) -> dict:
    day_sessions = _by_date(sessions).get(anchor, [])
    return {
        'view': VIEW_DAY,
        'date': anchor,
        'is_today': anchor == today,
        'anchor_hour': ANCHOR_HOUR,
        'hours': VISIBLE_HOURS,
        'scale': DAY_SCALE,
        'blocks': [session_block(session, colors, DAY_SCALE) for session in day_sessions],
    }


def week_view(sessions, anchor: date, today: date, colors: dict) -> dict:
    start = week_start(anchor)
    buckets = _by_date(sessions)
    days = []
    for index in range(7):
        day = start + timedelta(days=index)
        days.append({
            'date': day,
            'is_today': day == today,
            'left_percent': (index + 1) * WEEK_COLUMN_PERCENT,
            'blocks': [session_block(session, colors, WEEK_SCALE) for session in buckets.get(day, [])],
        })
    return {
        'view': VIEW_WEEK,
        'start_date': start,
        'end_date': start + timedelta(days=6),
        'anchor_hour': ANCHOR_HOUR,
        'hours': VISIBLE_HOURS,
        'scale': WEEK_SCALE,
        'days': days,
    }


def month_view(sessions, anchor: date, today: date, colors: dict) -> dict:
    buckets = _by_date(sessions)
    weeks = []
    for week in _month_calendar.monthdatescalendar(anchor.year, anchor.month):
        cells = []
        for day in week:
            day_sessions = buckets.get(day, [])
            cells.append({
                'date': day,
                'is_today': day == today,
                'is_current_month': day.month == anchor.month,
                'sessions': [session_block(session, colors) for session in day_sessions[:MONTH_CHIP_LIMIT]],
                'overflow': max(len(day_sessions) - MONTH_CHIP_LIMIT, 0),
            })
        weeks.append(cells)
    return {
        'view': VIEW_MONTH,
        'year': anchor.year,
        'month': anchor.month,
        'month_name': calendar.month_name[anchor.month],
        'weeks': weeks,
    }


def build_calendar(
    view: str,
    anchor: date,
    sessions,
    today: date,
    include_cancelled: bool = False,
    stable_colors: bool = False,
) -> dict:
    sessions = [session for session in sessions if include_cancelled or not session.is_cancelled]
    colors = team_colors(sessions, stable=stable_colors)
    builders = {VIEW_DAY: day_view, VIEW_WEEK: week_view, VIEW_MONTH: month_view}
    result = builders[view](sessions, anchor, today, colors)
    result['team_colors'] = [
        {'team_id': team_id, 'color': color} for team_id, color in colors.items()
    ]
    return result
