from datetime import date
from io import BytesIO
import logging

import pandas as pd
from fpdf import FPDF
from fpdf.enums import XPos, YPos
from openpyxl import load_workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from models.inventory_items import OwnerRole, StockStatus

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SOURCE_LABELS = {
    OwnerRole.BHW: "BHW (Maternity)",
    OwnerRole.BNS: "BNS (Child)",
}

STATUS_FILLS = {
    StockStatus.NORMAL.value: PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid"),
    StockStatus.LOW.value: PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid"),
    StockStatus.CRITICAL.value: PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid"),
}

INVENTORY_COLUMNS = ["Item Name", "Category", "Quantity", "Unit", "Status", "Inventory Source", "Batch No", "Expiry Date", "Supplier", "Supply Source"]
ACTIVITY_COLUMNS = ["Date", "Action", "Details", "User"]


def _latin1(text) -> str:
    # Core PDF fonts only cover latin-1
    return str(text if text is not None else "").encode("latin-1", "replace").decode("latin-1")


def _style_sheet(buffer: BytesIO, sheet_name: str, status_column: str = None) -> BytesIO:
    """Bold coloured header, sensible widths and status colours on a pandas-written sheet."""
    wb = load_workbook(buffer)
    ws = wb[sheet_name]

    header_fill = PatternFill(start_color="FF6600", end_color="FF6600", fill_type="solid")
    bold_font_white = Font(bold=True, color="FFFFFF")

    status_idx = None
    for col_idx, cell in enumerate(ws[1], start=1):
        cell.fill = header_fill
        cell.font = bold_font_white
        cell.alignment = Alignment(horizontal='center', vertical='center')
        if status_column and cell.value == status_column:
            status_idx = col_idx
        width = max(len(str(c.value)) if c.value is not None else 0 for c in ws[get_column_letter(col_idx)])
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max(width + 2, 10), 60)

    if status_idx:
        for row in ws.iter_rows(min_row=2, min_col=status_idx, max_col=status_idx):
            for cell in row:
                fill = STATUS_FILLS.get(cell.value)
                if fill:
                    cell.fill = fill

    styled = BytesIO()
    wb.save(styled)
    styled.seek(0)
    return styled


def build_inventory_workbook(items) -> BytesIO:
    records = [
        {
            "Item Name": item.item_name,
            "Category": item.category,
            "Quantity": item.quantity,
            "Unit": item.unit,
            "Status": item.status.value,
            "Inventory Source": SOURCE_LABELS[item.owner_role],
            "Batch No": item.batch_no,
            "Expiry Date": item.expiry_date,
            "Supplier": item.supplier,
            "Supply Source": item.supply_source,
        }
        for item in items
    ]
    df = pd.DataFrame(records, columns=INVENTORY_COLUMNS)

    excel_file = BytesIO()
    df.to_excel(excel_file, index=False, sheet_name="Inventory Report", engine="openpyxl")
    excel_file.seek(0)
    return _style_sheet(excel_file, "Inventory Report", status_column="Status")


def build_activity_log_workbook(entries, user_names: dict) -> BytesIO:
    records = [
        {
            "Date": entry.created_at.strftime("%Y-%m-%d %H:%M") if entry.created_at else None,
            "Action": entry.action,
            "Details": entry.details,
            "User": user_names.get(entry.user_id, entry.user_id),
        }
        for entry in entries
    ]
    df = pd.DataFrame(records, columns=ACTIVITY_COLUMNS)

    excel_file = BytesIO()
    df.to_excel(excel_file, index=False, sheet_name="Activity Log", engine="openpyxl")
    excel_file.seek(0)
    return _style_sheet(excel_file, "Activity Log")


class PDF(FPDF):
    def header(self):
        self.set_font('Helvetica', 'B', 12)
        self.cell(0, 8, 'Barangay Health Center', new_x=XPos.LMARGIN, new_y=YPos.NEXT, align='C')
        self.ln(4)

    def footer(self):
        self.set_y(-15)
        self.set_font('Helvetica', 'I', 8)
        self.cell(0, 10, f'Page {self.page_no()}', align='C')


def generate_issuance_slip(items, requested_by: str, requester_role: str, requesting_entity: str, purpose: str = None, issued_on: date = None) -> bytes:
    """
    Generates a Request and Issuance Slip (RIS) PDF for low-stock items.

    Args:
        items: Inventory rows to request replenishment for.
        requested_by: Full name of the requesting user.
        requester_role: Role shown next to the requester's name.
        requesting_entity: Facility asking for the supplies.
        purpose: Free-text purpose or remarks.
        issued_on: Date printed on the slip, today by default.

    Returns:
        The PDF document as bytes.
    """
    issued_on = issued_on or date.today()

    pdf = PDF()
    pdf.add_page()

    pdf.set_font('Helvetica', 'B', 14)
    pdf.cell(0, 10, 'REQUEST FOR SUPPLIES ISSUANCE', new_x=XPos.LMARGIN, new_y=YPos.NEXT, align='C')
    pdf.ln(4)

    pdf.set_font('Helvetica', '', 10)
    pdf.cell(0, 7, f'Date: {issued_on.strftime("%Y-%m-%d")}', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.cell(0, 7, _latin1(f'Requesting Entity: {requesting_entity}'), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.cell(0, 7, _latin1(f'Requested By: {requested_by} ({requester_role})'), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.multi_cell(0, 7, _latin1(f'Purpose: {purpose or ""}'), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)

    # Items Table Header
    widths = [60, 35, 35, 25, 35]
    headers = ['Item Name', 'Category', 'Current Stock', 'Status', 'Inventory Source']
    pdf.set_font('Helvetica', 'B', 10)
    pdf.set_fill_color(200, 0, 0)
    pdf.set_text_color(255, 255, 255)
    for width, title in zip(widths, headers):
        pdf.cell(width, 8, title, border=1, align='C', fill=True)
    pdf.ln(8)

    # Items Table Rows
    pdf.set_font('Helvetica', '', 10)
    pdf.set_text_color(0, 0, 0)
    for item in items:
        pdf.cell(widths[0], 8, _latin1(item.item_name)[:32], border=1)
        pdf.cell(widths[1], 8, _latin1(item.category or '')[:18], border=1)
        pdf.cell(widths[2], 8, _latin1(f'{item.quantity} {item.unit or "units"}'), border=1, align='R')
        pdf.cell(widths[3], 8, item.status.value, border=1, align='C')
        pdf.cell(widths[4], 8, SOURCE_LABELS[item.owner_role], border=1)
        pdf.ln(8)

    # Signature blocks
    y = pdf.get_y() + 15
    pdf.set_xy(15, y)
    pdf.cell(80, 7, 'Prepared by:')
    pdf.set_xy(120, y)
    pdf.cell(80, 7, 'Approved by:')
    pdf.set_xy(15, y + 15)
    pdf.cell(80, 7, '__________________________')
    pdf.set_xy(120, y + 15)
    pdf.cell(80, 7, '__________________________')
    pdf.set_xy(15, y + 22)
    pdf.cell(80, 7, _latin1(requested_by))
    pdf.set_xy(120, y + 22)
    pdf.cell(80, 7, 'City Health Officer / Admin')
    pdf.set_xy(15, y + 27)
    pdf.cell(80, 7, _latin1(requester_role))

    logger.debug(f"Generated issuance slip with {len(items)} item(s) for {requested_by}")
    return bytes(pdf.output())
