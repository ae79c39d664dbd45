"""
Router de exportação de relatórios
Projeto: LocDecor (Gestão de Locação de Decorações)
"""

import datetime

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from locdecor.api.responses import CSV, PDF, XLSX, attachment
from locdecor.api.v1.dashboard import resolve_period
from locdecor.core.database import get_db
from locdecor.core.dates import local_today
from locdecor.core.deps import CurrentUser
from locdecor.schemas.dashboard import ReportFormat
from locdecor.services.dashboard_service import DashboardService, get_dashboard_service
from locdecor.services.export_service import ExportService, get_export_service, report_file_name

router = APIRouter(
    prefix="/reports",
    tags=["Relatórios"],
)


@router.get(
    "/export",
    name="relatorio_exporta",
    summary="Exporta o relatório de desempenho",
    description="Métricas do período e receitas por mês em PDF, XLSX ou CSV.",
)
async def export_report(
    current_user: CurrentUser,
    format: ReportFormat = Query(ReportFormat.PDF, description="pdf, excel ou csv"),
    period: tuple[datetime.date, datetime.date] = Depends(resolve_period),
    db: AsyncSession = Depends(get_db),
    service: DashboardService = Depends(get_dashboard_service),
    exporter: ExportService = Depends(get_export_service),
):
    start, end = period
    data = await service.report_data(db, start, end)
    today = local_today()

    if format == ReportFormat.PDF:
        content = await run_in_threadpool(exporter.report_pdf, data)
        return attachment(content, report_file_name("pdf", today), PDF)
    if format == ReportFormat.EXCEL:
        content = await run_in_threadpool(exporter.report_xlsx, data)
        return attachment(content, report_file_name("xlsx", today), XLSX)
    return attachment(exporter.report_csv(data), report_file_name("csv", today), CSV)
