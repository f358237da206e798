from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from io import BytesIO

from interest_ledger.schemas.accrual import AccrualRequest
from interest_ledger.schemas.records import OutputRecord
from interest_ledger.services.accrual import compute_interest
from interest_ledger.services.rates import sort_schedule
from interest_ledger.services.reports import build_results_workbook
from interest_ledger.utils.clock import now_local

router = APIRouter(prefix="/accrual", tags=["accrual"])


def _compute(body: AccrualRequest) -> list[OutputRecord]:
    schedule = None
    if body.rates is not None:
        schedule = sort_schedule(r.to_entry() for r in body.rates)

    return compute_interest(
        body.entries,
        body.annual_interest_rate / 100,
        schedule,
        now=body.now or now_local(),
    )


@router.post("", response_model=list[OutputRecord])
def accrual(body: AccrualRequest):
    return _compute(body)


@router.post("/report")
def accrual_report(body: AccrualRequest):
    results = _compute(body)

    buf = BytesIO()
    build_results_workbook(results, buf)
    buf.seek(0)

    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": 'attachment; filename="interest_ledger.xlsx"'},
    )
