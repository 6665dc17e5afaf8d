from typing import Dict, List, Optional
from datetime import date, time
from enum import Enum
from pydantic import BaseModel, Field, model_validator

from gymtrials.models.attendance import PersonType, AttendanceStatus


class AttendanceMark(BaseModel):
    person_id: int = Field(..., gt=0)
    person_type: PersonType
    date: date
    status: AttendanceStatus
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None

    @model_validator(mode="after")
    def check_times(self):
        if self.check_in_time and self.check_out_time and self.check_out_time < self.check_in_time:
            raise ValueError("check_out_time no puede ser anterior a check_in_time")
        return self


class AttendanceBulkMark(BaseModel):
    attendance_records: List[AttendanceMark] = Field(..., min_length=1)


class AttendanceRecord(BaseModel):
    id: int
    gym_id: int
    person_id: int
    person_type: PersonType
    date: date
    status: AttendanceStatus
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None

    class Config:
        from_attributes = True


class DayAttendance(BaseModel):
    status: AttendanceStatus
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None


class StatusCounter(BaseModel):
    present: int = 0
    absent: int = 0
    total: int = 0


class PersonAttendance(BaseModel):
    id: int
    name: str
    attendance: List[AttendanceRecord] = []


class DailyStats(BaseModel):
    members: StatusCounter = Field(default_factory=StatusCounter)
    trainers: StatusCounter = Field(default_factory=StatusCounter)


class AttendanceSummary(BaseModel):
    total_days: int
    member_attendance: Dict[str, PersonAttendance] = {}
    trainer_attendance: Dict[str, PersonAttendance] = {}
    daily_stats: Dict[str, DailyStats] = {}


class MonthlyAttendanceStats(BaseModel):
    month: int
    year: int
    total_records: int
    member_stats: StatusCounter
    trainer_stats: StatusCounter
    daily_trends: Dict[str, DailyStats] = {}


class DayClassification(str, Enum):
    """Clasificación de cada celda del calendario mensual."""
    PRESENT = "present"
    ABSENT = "absent"
    NOT_MARKED = "not-marked"
    WEEKEND = "weekend"
    OUTSIDE_MEMBERSHIP = "outside-membership"
    FUTURE = "future"
    OUTSIDE_MONTH = "outside-month"


class CalendarDay(BaseModel):
    date: date
    day: int
    in_month: bool
    is_today: bool = False
    status: DayClassification
    check_in_time: Optional[time] = None


class MonthAttendanceStats(BaseModel):
    present_count: int = 0
    absent_count: int = 0
    not_marked_count: int = 0
    total_working_days: int = 0
    attendance_rate: float = 0.0
    attendance_percentage: int = 0


class MonthCalendar(BaseModel):
    year: int
    month: int
    person_id: Optional[int] = None
    person_type: Optional[PersonType] = None
    membership_start: Optional[date] = None
    membership_end: Optional[date] = None
    days: List[CalendarDay]
    stats: MonthAttendanceStats
