from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import require_company, require_worker
from .models import TimesheetStatus
from .schema import TimesheetSchema, WorkerTimesheetSchema, TimesheetUpdate, ApprovalResponse
from .earnings import worked_hours, total_pay
from . import service

timesheet_router = APIRouter(prefix="/timesheets", tags=["Timesheets"])


def _with_earnings(ts) -> WorkerTimesheetSchema:
    shift = ts.shift
    return WorkerTimesheetSchema(
        **TimesheetSchema.model_validate(ts).model_dump(),
        shift_title=shift.title,
        shift_start_time=shift.start_time,
        hourly_rate=shift.hourly_rate,
        hours_worked=worked_hours(ts, shift),
        total_pay=total_pay(ts, shift),
    )


# Company view
@timesheet_router.get("", response_model=list[TimesheetSchema])
def list_timesheets(
    shift_id: Optional[int] = None,
    status: Optional[TimesheetStatus] = None,
    db: Session = Depends(get_db),
    user=Depends(require_company),
):
    return service.get_company_timesheets(db, company_id=user.id, shift_id=shift_id, status=status)


# Worker view with derived earnings
@timesheet_router.get("/mine", response_model=list[WorkerTimesheetSchema])
def list_my_timesheets(db: Session = Depends(get_db), user=Depends(require_worker)):
    return [_with_earnings(ts) for ts in service.get_worker_timesheets(db, worker_id=user.id)]


@timesheet_router.post("/shifts/{shift_id}/clock-in", response_model=TimesheetSchema)
def clock_in(shift_id: int, db: Session = Depends(get_db), user=Depends(require_worker)):
    return service.clock_in(db, worker_id=user.id, shift_id=shift_id)


@timesheet_router.post("/shifts/{shift_id}/clock-out", response_model=TimesheetSchema)
def clock_out(shift_id: int, db: Session = Depends(get_db), user=Depends(require_worker)):
    return service.clock_out(db, worker_id=user.id, shift_id=shift_id)


@timesheet_router.patch("/{timesheet_id}", response_model=TimesheetSchema)
def patch_timesheet(timesheet_id: int, payload: TimesheetUpdate, db: Session = Depends(get_db), user=Depends(require_company)):
    if not service.get_timesheet_for_company(db, timesheet_id, user.id):
        raise HTTPException(status_code=404, detail="Timesheet not found")
    return service.update_timesheet(db, timesheet_id, payload, company_id=user.id)


@timesheet_router.post("/{timesheet_id}/approve", response_model=ApprovalResponse)
def approve_timesheet(timesheet_id: int, db: Session = Depends(get_db), user=Depends(require_company)):
    result = service.approve_timesheet(db, timesheet_id, company_id=user.id)
    return ApprovalResponse(
        timesheet=TimesheetSchema.model_validate(result.timesheet),
        payment_created=result.payment_created,
        message=result.message,
    )
