from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response, StreamingResponse
from sqlalchemy.orm import Session
from datetime import datetime
from typing import List, Optional
import logging

from database import get_db
from models.inventory_items import OwnerRole
from models.profiles import Profile
from schemas.reports import IssuanceSlipRequest, LowStockItem
from crud import activity_log as crud_activity_log
from crud import inventory_items as crud_inventory_items
from utils.auth_utils import get_current_profile, require_roles
from utils.report_utils import (
    SOURCE_LABELS,
    XLSX_MEDIA_TYPE,
    build_activity_log_workbook,
    build_inventory_workbook,
    generate_issuance_slip,
)

router = APIRouter(prefix="/reports", tags=["Reports"])
logger = logging.getLogger("reports")


@router.get("/inventory/export")
def export_inventory(
    owner_role: Optional[OwnerRole] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """Download the inventory as an Excel workbook with colour-coded stock status."""
    if category == "All":
        category = None
    items = crud_inventory_items.get_inventory_items(db, owner_role=owner_role, category=category, search=search)
    excel_file = build_inventory_workbook(items)

    suffix = owner_role.value.lower() if owner_role else "all"
    filename = f"inventory_{suffix}_{datetime.now().strftime('%Y-%m-%d')}.xlsx"
    headers = {
        'Content-Disposition': f'attachment; filename="{filename}"'
    }
    logger.info(f"Inventory export ({len(items)} rows) requested by user {profile.id}")
    return StreamingResponse(excel_file, media_type=XLSX_MEDIA_TYPE, headers=headers)


@router.get("/activity-log/export")
def export_activity_log(
    start_date: str,
    end_date: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_roles(["Admin", "Midwife"])),
):
    try:
        requested_start_date = datetime.strptime(start_date, "%Y-%m-%d").date()
        requested_end_date = datetime.strptime(end_date, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Dates must be in YYYY-MM-DD format."
        )

    if requested_end_date < requested_start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date cannot be before start date."
        )

    entries = crud_activity_log.get_activity_logs_between(db, requested_start_date, requested_end_date)
    user_ids = {entry.user_id for entry in entries if entry.user_id}
    user_names = {}
    if user_ids:
        user_names = {p.id: p.full_name or p.id for p in db.query(Profile).filter(Profile.id.in_(user_ids))}

    excel_file = build_activity_log_workbook(entries, user_names)
    headers = {
        'Content-Disposition': f'attachment; filename="activity_log_{start_date}_to_{end_date}.xlsx"'
    }
    return StreamingResponse(excel_file, media_type=XLSX_MEDIA_TYPE, headers=headers)


@router.get("/low-stock", response_model=List[LowStockItem])
def read_low_stock_items(db: Session = Depends(get_db), profile: Profile = Depends(get_current_profile)):
    """Low and Critical rows of both inventories, as last persisted."""
    return [
        LowStockItem(
            id=item.id,
            item_name=item.item_name,
            category=item.category,
            quantity=item.quantity,
            unit=item.unit,
            status=item.status,
            owner_role=item.owner_role,
            source_label=SOURCE_LABELS[item.owner_role],
        )
        for item in crud_inventory_items.get_low_stock_items(db)
    ]


@router.post("/issuance-slip")
def create_issuance_slip(
    request: IssuanceSlipRequest,
    db: Session = Depends(get_db),
    profile: Profile = Depends(require_roles(["Midwife", "Admin"])),
):
    """Generate a Request and Issuance Slip (RIS) PDF for the selected items."""
    items = crud_inventory_items.get_items_by_ids(db, request.item_ids)
    if not items:
        raise HTTPException(status_code=404, detail="None of the selected inventory items were found")

    missing = set(request.item_ids) - {item.id for item in items}
    if missing:
        logger.warning(f"Issuance slip skipped unknown item ids: {sorted(missing)}")

    try:
        pdf_bytes = generate_issuance_slip(
            items,
            requested_by=profile.full_name or profile.id,
            requester_role=profile.role.value,
            requesting_entity=request.requesting_entity,
            purpose=request.purpose,
        )
    except Exception as e:
        logger.error(f"Error generating issuance slip for user {profile.id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not generate the issuance slip")

    crud_activity_log.log_activity(
        db,
        "Issuance Slip Generated",
        f"RIS for {', '.join(item.item_name for item in items)} requested by {request.requesting_entity}.",
        profile.id,
    )
    filename = f"RIS_{datetime.now().strftime('%Y-%m-%d')}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )
