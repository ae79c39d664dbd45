"""
Exportação de documentos
Projeto: LocDecor (Gestão de Locação de Decorações)

PDF (contrato, ordem de retirada e relatório) com WeasyPrint + Jinja2,
planilha XLSX com openpyxl e CSV com o módulo csv.
"""

import csv
import datetime
import io
import logging
import os

from jinja2 import Environment, FileSystemLoader, select_autoescape
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from locdecor.core.config import settings
from locdecor.core.dates import local_today
from locdecor.models import Order
from locdecor.schemas.dashboard import ReportData
from locdecor.services.contract import build_contract, format_date, format_money, format_time

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")

REPORT_TITLE = "Relatório de Desempenho"
REVENUE_HEADERS = ("Mês", "Receita", "Receita Anterior")


def _get_weasyprint():
    """Import tardio do WeasyPrint: as bibliotecas nativas podem faltar no ambiente."""
    try:
        from weasyprint import CSS, HTML
        return HTML, CSS
    except OSError as e:
        raise RuntimeError(
            "Dependências nativas do WeasyPrint não encontradas (Pango/GTK)."
        ) from e


def metric_rows(data: ReportData, formatted: bool = False) -> list[tuple[str, object]]:
    """
    Linhas (métrica, valor) do relatório.

    Com formatted=True os valores saem prontos para leitura (R$ e %).
    """
    m = data.metrics
    if formatted:
        return [
            ("Total de Pedidos", m.total_orders),
            ("Pedidos Concluídos", m.completed_orders),
            ("Receita Total", f"R$ {format_money(m.revenue)}"),
            ("Despesas", f"R$ {format_money(m.expenses)}"),
            ("Saldo", f"R$ {format_money(m.balance)}"),
            ("Taxa de Ocupação", f"{m.occupation_rate:.1f}%"),
            ("Clientes Recorrentes", m.returning_customers),
            ("Crescimento Mensal", f"{m.monthly_growth:.1f}%"),
        ]
    return [
        ("Total de Pedidos", m.total_orders),
        ("Pedidos Concluídos", m.completed_orders),
        ("Receita Total", float(m.revenue)),
        ("Despesas", float(m.expenses)),
        ("Saldo", float(m.balance)),
        ("Taxa de Ocupação", m.occupation_rate),
        ("Clientes Recorrentes", m.returning_customers),
        ("Crescimento Mensal", m.monthly_growth),
    ]


def period_label(data: ReportData) -> str:
    m = data.metrics
    return f"Período: {format_date(m.period_start)} a {format_date(m.period_end)}"


def report_file_name(extension: str, today: datetime.date) -> str:
    return f"relatorio-{today.isoformat()}.{extension}"


class ExportService:
    """
    Gera os arquivos para download.

    Os pedidos recebidos devem vir com cliente e itens carregados
    (OrderService.get_by_id).
    """

    def __init__(self):
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["money"] = format_money
        self.env.filters["date_br"] = format_date
        self.env.filters["time_br"] = format_time

    def _render_pdf(self, template_name: str, context: dict) -> bytes:
        HTML, CSS = _get_weasyprint()
        html_out = self.env.get_template(template_name).render(context)
        css = CSS(filename=os.path.join(TEMPLATES_DIR, "style.css"))
        return HTML(string=html_out, base_url=TEMPLATES_DIR).write_pdf(stylesheets=[css])

    def _company(self) -> dict:
        return {
            "company_name": settings.company_name,
            "company_tagline": settings.company_tagline,
            "company_phone": settings.company_phone,
            "company_email": settings.company_email,
        }

    def contract_pdf(self, order: Order, today: datetime.date | None = None) -> tuple[bytes, str]:
        """
        PDF do contrato de locação.

        Returns:
            Tupla (bytes do PDF, nome do arquivo)
        """
        document = build_contract(order, settings, today or local_today())
        pdf = self._render_pdf("contract.html", {"doc": document, **self._company()})
        logger.info("Contrato gerado para o pedido %s", order.order_number)
        return pdf, document.file_name

    def pickup_receipt_pdf(self, order: Order) -> tuple[bytes, str]:
        """PDF da ordem de retirada, com a tabela de itens e o total."""
        pdf = self._render_pdf("pickup_receipt.html", {"order": order, **self._company()})
        logger.info("Ordem de retirada gerada para o pedido %s", order.order_number)
        return pdf, f"ordem-retirada-{order.order_number}.pdf"

    def report_pdf(self, data: ReportData) -> bytes:
        return self._render_pdf(
            "report.html",
            {
                "title": REPORT_TITLE,
                "period": period_label(data),
                "metrics": metric_rows(data, formatted=True),
                "revenue_chart": data.revenue_chart,
                "revenue_headers": REVENUE_HEADERS,
                **self._company(),
            },
        )

    def report_xlsx(self, data: ReportData) -> bytes:
        """Planilha com as abas Métricas e Receitas."""
        wb = Workbook()
        ws = wb.active
        ws.title = "Métricas"
        self._write_sheet(ws, ("Métrica", "Valor"), metric_rows(data))

        revenue_ws = wb.create_sheet("Receitas")
        self._write_sheet(
            revenue_ws,
            REVENUE_HEADERS,
            [(p.date, p.value, p.previous_value) for p in data.revenue_chart],
        )

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    @staticmethod
    def _write_sheet(ws, headers, rows) -> None:
        for c, header in enumerate(headers, start=1):
            ws.cell(row=1, column=c, value=header).font = Font(bold=True)
        for r, row in enumerate(rows, start=2):
            for c, value in enumerate(row, start=1):
                ws.cell(row=r, column=c, value=value)
        for c in range(1, len(headers) + 1):
            col_letter = get_column_letter(c)
            max_length = max(len(str(cell.value or "")) for cell in ws[col_letter])
            ws.column_dimensions[col_letter].width = min(max_length + 2, 50)

    def report_csv(self, data: ReportData) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow([REPORT_TITLE])
        writer.writerow([period_label(data)])
        writer.writerow([])
        writer.writerow(["Métricas"])
        writer.writerow(["Métrica", "Valor"])
        writer.writerows(metric_rows(data))
        writer.writerow([])
        writer.writerow(["Receitas por Mês"])
        writer.writerow(REVENUE_HEADERS)
        writer.writerows((p.date, p.value, p.previous_value) for p in data.revenue_chart)
        return buffer.getvalue()


def get_export_service() -> ExportService:
    return ExportService()


__all__ = [
    "ExportService",
    "get_export_service",
    "metric_rows",
    "report_file_name",
]
