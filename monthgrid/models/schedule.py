# File: monthgrid/models/schedule.py

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from monthgrid.core.config_manager import Config
from .common import end_of_day, localize, next_stamp, parse_iso_datetime, start_of_day
from .enums import ScheduleCategory
from .errors import ScheduleValidationError, ValidationError

SCHEDULE_MIN_DURATION = timedelta(minutes=Config.SCHEDULE_MIN_DURATION_MINUTES)

# Input keys of the original JSON format mapped onto Schedule fields
CAMEL_CASE_KEYS = {
    'isAllDay': 'is_all_day',
    'isVisible': 'is_visible',
    'bgColor': 'bg_color',
    'dragBgColor': 'drag_bg_color',
    'borderColor': 'border_color',
    'calendarId': 'calendar_id',
    'dueDateClass': 'due_date_class',
    'customStyle': 'custom_style',
    'isPending': 'is_pending',
    'isFocused': 'is_focused',
    'isReadOnly': 'is_read_only',
    'isPrivate': 'is_private',
    'recurrenceRule': 'recurrence_rule',
    'goingDuration': 'going_duration',
    'comingDuration': 'coming_duration',
}


def collision_window(start: datetime, end: datetime,
                     going_minutes: float = 0, coming_minutes: float = 0) -> Tuple[datetime, datetime]:
    """
    Window used for collision tests.

    Spans shorter than SCHEDULE_MIN_DURATION are stretched to it, then the
    travel buffers are added on both sides.
    """
    if abs(end - start) < SCHEDULE_MIN_DURATION:
        end = start + SCHEDULE_MIN_DURATION
    return (start - timedelta(minutes=going_minutes or 0),
            end + timedelta(minutes=coming_minutes or 0))


def windows_collide(own: Tuple[datetime, datetime], other: Tuple[datetime, datetime]) -> bool:
    """Overlap rule: other's start or end strictly inside own, or other covers own."""
    own_start, own_end = own
    start, end = other
    return ((own_start < start < own_end) or
            (own_start < end < own_end) or
            (start <= own_start and end >= own_end))


def _coerce_datetime(value: Any, field_name: str) -> datetime:
    if isinstance(value, datetime):
        return localize(value)
    if isinstance(value, date):
        return localize(datetime.combine(value, datetime.min.time()))
    if isinstance(value, str):
        parsed = parse_iso_datetime(value)
        if parsed is None:
            raise ScheduleValidationError(f"Could not parse {field_name}: {value!r}")
        return localize(parsed)
    raise ScheduleValidationError(f"Unsupported {field_name} value: {value!r}")


def _now() -> datetime:
    return datetime.now(Config.get_timezone())


def all_day_span(start=None, end=None) -> Tuple[datetime, datetime]:
    """Midnight-aligned span covering the days of start and end."""
    # Only the date part of a string is used for all-day schedules.
    if isinstance(start, str):
        start = _coerce_datetime(start[:10], 'start')
    else:
        start = _coerce_datetime(start or _now(), 'start')

    if isinstance(end, str):
        end = _coerce_datetime(end[:10], 'end')
    else:
        end = _coerce_datetime(end or start, 'end')

    return start_of_day(start), end_of_day(end)


def time_span(start=None, end=None) -> Tuple[datetime, datetime]:
    """Exact span; a missing end defaults to DEFAULT_TIME_DURATION_MINUTES after start."""
    start = _coerce_datetime(start or _now(), 'start')
    if end:
        return start, _coerce_datetime(end, 'end')
    return start, start + timedelta(minutes=Config.DEFAULT_TIME_DURATION_MINUTES)


def normalize_category(category: str) -> str:
    """Check a category against ScheduleCategory; empty means uncategorized."""
    if not category:
        return ''
    try:
        return ScheduleCategory(category).value
    except ValueError:
        raise ScheduleValidationError(f"Unknown category: {category!r}")


@dataclass(eq=False)
class Schedule:
    """Represents one calendar item shown in the month grid."""
    id: str = ''
    title: str = ''
    body: str = ''
    is_all_day: bool = False
    start: Any = None
    end: Any = None
    color: str = '#000'
    is_visible: bool = True
    bg_color: str = '#a1b56c'
    drag_bg_color: str = '#a1b56c'
    border_color: str = '#000'
    calendar_id: str = ''
    category: str = ''
    due_date_class: str = ''
    custom_style: str = ''
    is_pending: bool = False
    is_focused: bool = False
    is_read_only: bool = False
    is_private: bool = False
    location: str = ''
    attendees: List[str] = field(default_factory=list)
    recurrence_rule: str = ''
    state: str = ''
    going_duration: float = 0   # travel time before, minutes
    coming_duration: float = 0  # travel time after, minutes
    raw: Optional[Dict[str, Any]] = None

    _cid: int = field(init=False, repr=False, default=0)

    def __post_init__(self):
        """Assign identity and normalize the time span."""
        self._cid = next_stamp()

        self.category = normalize_category(self.category)
        if self.category == ScheduleCategory.ALLDAY.value:
            self.is_all_day = True

        if self.is_all_day:
            self.set_all_day_period(self.start, self.end)
        else:
            self.set_time_period(self.start, self.end)

    @classmethod
    def create(cls, data: Dict[str, Any]) -> 'Schedule':
        """Create a schedule from a plain dict."""
        return schedule_from_dict(data)

    def set_all_day_period(self, start=None, end=None) -> None:
        self.start, self.end = all_day_span(start, end)

    def set_time_period(self, start=None, end=None) -> None:
        self.start, self.end = time_span(start, end)

    def get_starts(self) -> datetime:
        return self.start

    def get_ends(self) -> datetime:
        return self.end

    def cid(self) -> int:
        """Instance unique id."""
        return self._cid

    def equals(self, other: 'Schedule') -> bool:
        """Check two schedules describe the same item (content, span and colors)."""
        return (
            self.id == other.id and
            self.title == other.title and
            self.body == other.body and
            self.is_all_day == other.is_all_day and
            self.get_starts() == other.get_starts() and
            self.get_ends() == other.get_ends() and
            self.color == other.color and
            self.bg_color == other.bg_color and
            self.drag_bg_color == other.drag_bg_color and
            self.border_color == other.border_color
        )

    def duration(self) -> timedelta:
        """Duration between start and end."""
        if self.is_all_day:
            return end_of_day(self.get_ends()) - start_of_day(self.get_starts())
        return self.get_ends() - self.get_starts()

    def collides_with(self, other) -> bool:
        """
        Check whether another schedule occupies the same time.

        Both windows are clamped to the minimum duration and padded with
        their own travel buffers before comparing.
        """
        own = collision_window(self.get_starts(), self.get_ends(),
                               self.going_duration, self.coming_duration)
        model = getattr(other, 'model', other)
        theirs = collision_window(other.get_starts(), other.get_ends(),
                                  getattr(model, 'going_duration', 0),
                                  getattr(model, 'coming_duration', 0))
        return windows_collide(own, theirs)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            'cid': self.cid(),
            'id': self.id,
            'title': self.title,
            'calendar_id': self.calendar_id,
            'category': self.category,
            'is_all_day': self.is_all_day,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'going_duration': self.going_duration,
            'coming_duration': self.coming_duration,
        }


def schedule_from_dict(data: dict) -> Schedule:
    """Create Schedule from dictionary (snake_case or camelCase keys)."""
    options = {}
    for key, value in data.items():
        options[CAMEL_CASE_KEYS.get(key, key)] = value

    is_all_day = options.get('is_all_day')
    is_visible = options.get('is_visible')

    return Schedule(
        id=str(options.get('id') or ''),
        title=options.get('title') or '',
        body=options.get('body') or '',
        is_all_day=bool(is_all_day) if is_all_day is not None else False,
        start=options.get('start'),
        end=options.get('end'),
        color=options.get('color') or '#000',
        is_visible=bool(is_visible) if is_visible is not None else True,
        bg_color=options.get('bg_color') or '#a1b56c',
        drag_bg_color=options.get('drag_bg_color') or '#a1b56c',
        border_color=options.get('border_color') or '#000',
        calendar_id=options.get('calendar_id') or '',
        category=options.get('category') or '',
        due_date_class=options.get('due_date_class') or '',
        custom_style=options.get('custom_style') or '',
        is_pending=bool(options.get('is_pending', False)),
        is_focused=bool(options.get('is_focused', False)),
        is_read_only=bool(options.get('is_read_only', False)),
        is_private=bool(options.get('is_private', False)),
        location=options.get('location') or '',
        attendees=list(options.get('attendees') or []),
        recurrence_rule=options.get('recurrence_rule') or '',
        state=options.get('state') or '',
        going_duration=options.get('going_duration') or 0,
        coming_duration=options.get('coming_duration') or 0,
        raw=options.get('raw'),
    )


def validate_schedules(raw_entries: List[dict]) -> Tuple[List[Schedule], List[ValidationError]]:
    """
    Build schedules from raw dicts, collecting errors instead of raising.

    Returns:
        Tuple of (valid schedules, validation errors)
    """
    valid: List[Schedule] = []
    errors: List[ValidationError] = []

    for i, entry in enumerate(raw_entries):
        if not isinstance(entry, dict):
            errors.append(ValidationError('entry', f"expected an object, got {type(entry).__name__}", i))
            continue
        if not entry.get('start'):
            errors.append(ValidationError('start', "missing start", i))
            continue
        try:
            valid.append(schedule_from_dict(entry))
        except ScheduleValidationError as e:
            errors.append(ValidationError('schedule', str(e), i))

    return valid, errors
