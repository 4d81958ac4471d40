"""
API Endpoints for the Report Read Path

Used by clients with no in-memory result (reload, shared link). Returns
{audit, aiReport, reportStatus}; 404 for an unknown id is distinct from a
pending report.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from bizaudit.persistence import ReportStore

from .deps import get_report_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["Reports"])


class FetchReportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    audit_id: Optional[str] = Field(default=None, alias="auditId")


async def _fetch(audit_id: Optional[str], store: ReportStore):
    if not audit_id or not audit_id.strip():
        raise HTTPException(status_code=400, detail="auditId is required")
    record = await store.fetch(audit_id.strip())
    return record.to_dict()


@router.post("/fetch")
async def fetch_report(body: FetchReportRequest, store: ReportStore = Depends(get_report_store)):
    return await _fetch(body.audit_id, store)


@router.get("/{audit_id}")
async def get_report(audit_id: str, store: ReportStore = Depends(get_report_store)):
    return await _fetch(audit_id, store)
