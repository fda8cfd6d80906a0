"""Generate dashboard report PDFs from the derived view models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from io import BytesIO

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen.canvas import Canvas
from reportlab.platypus import Image, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from shared.models import BudgetOverview, BudgetStatus, CategoryExpense, DashboardSummary, MonthlyExpense, TransactionType


_BAR_COLOR = "#3b82f6"
_BUDGET_BAR_COLOR = "#e5e7eb"
_TOP_CATEGORIES = 8


@dataclass(slots=True)
class DashboardReportData:
    """Input payload for dashboard report rendering."""

    summary: DashboardSummary
    budget_overview: BudgetOverview
    currency: str = "USD"
    generated_on: date | None = None


def _format_amount(value: Decimal, currency: str) -> str:
    return f"{value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):,.2f} {currency}"


def _autopct_threshold(pct: float) -> str:
    return f"{pct:.1f}%" if pct >= 3 else ""


def _summarize_categories(categories: list[CategoryExpense]) -> list[CategoryExpense]:
    top_rows = list(categories[:_TOP_CATEGORIES])
    other_total = sum((row.amount for row in categories[_TOP_CATEGORIES:]), Decimal("0"))
    if other_total > 0:
        top_rows.append(CategoryExpense(category="Remaining categories", amount=other_total, color="#B0B7C3"))
    return top_rows


def _figure_bytes(fig) -> bytes:
    image_buffer = BytesIO()
    fig.savefig(image_buffer, format="png", bbox_inches="tight")
    plt.close(fig)
    image_buffer.seek(0)
    return image_buffer.read()


def _build_monthly_chart(monthly: list[MonthlyExpense]) -> bytes:
    fig, ax = plt.subplots(figsize=(6.2, 3.0), dpi=140)
    ax.bar(
        [row.month for row in monthly],
        [float(row.amount) for row in monthly],
        color=_BAR_COLOR,
    )
    ax.set_title("Monthly expenses")
    ax.grid(axis="y", linestyle="--", alpha=0.4)
    ax.set_axisbelow(True)
    ax.tick_params(axis="x", labelsize=8)
    return _figure_bytes(fig)


def _build_pie_chart(categories: list[CategoryExpense]) -> bytes:
    rows = _summarize_categories(categories)

    fig, ax = plt.subplots(figsize=(6.2, 3.6), dpi=140)
    wedges, _, _ = ax.pie(
        [float(row.amount) for row in rows],
        labels=None,
        colors=[row.color for row in rows],
        autopct=_autopct_threshold,
        startangle=90,
        wedgeprops={"width": 0.45, "edgecolor": "white"},
        pctdistance=0.78,
    )
    ax.legend(
        wedges,
        [row.category for row in rows],
        title="Categories",
        loc="center left",
        bbox_to_anchor=(1.0, 0.5),
        fontsize=8,
        frameon=False,
    )
    ax.set_title("Expenses by category")
    ax.axis("equal")
    return _figure_bytes(fig)


def _build_budget_chart(overview: BudgetOverview) -> bytes:
    labels = [item.category for item in overview.items]
    positions = range(len(labels))
    width = 0.38

    fig, ax = plt.subplots(figsize=(6.2, 3.2), dpi=140)
    ax.bar([p - width / 2 for p in positions], [float(item.budgeted) for item in overview.items], width, label="Budget", color=_BUDGET_BAR_COLOR)
    ax.bar([p + width / 2 for p in positions], [float(item.spent) for item in overview.items], width, label="Spent", color=_BAR_COLOR)
    ax.set_xticks(list(positions))
    ax.set_xticklabels(labels, rotation=45, ha="right", fontsize=8)
    ax.set_title("Budget vs actual spending")
    ax.legend(fontsize=8, frameon=False)
    return _figure_bytes(fig)


class _NumberedCanvas(Canvas):
    """Canvas that defers page output so every footer can show the page total."""

    def __init__(self, *args, footer_label: str, **kwargs):
        super().__init__(*args, **kwargs)
        self._footer_label = footer_label
        self._pending_pages: list[dict] = []

    def showPage(self) -> None:  # noqa: N802 (ReportLab API)
        self._pending_pages.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        total = len(self._pending_pages)
        for page_state in self._pending_pages:
            self.__dict__.update(page_state)
            self._draw_page_footer(total)
            super().showPage()
        super().save()

    def _draw_page_footer(self, total: int) -> None:
        width, _ = self._pagesize
        self.setStrokeColor(colors.HexColor("#E5E7EB"))
        self.setLineWidth(0.5)
        self.line(16 * mm, 13 * mm, width - 16 * mm, 13 * mm)
        self.setFont("Helvetica", 7.5)
        self.setFillColor(colors.HexColor("#6B7280"))
        self.drawString(16 * mm, 9 * mm, self._footer_label)
        self.drawRightString(width - 16 * mm, 9 * mm, f"{self._pageNumber} of {total}")


def _grid_table(
    rows: list[list[str]],
    col_widths: list[float],
    *,
    amount_columns: int,
    highlighted_rows: tuple[int, ...] = (),
) -> Table:
    """Header row, zebra body, right-aligned trailing amount columns; highlighted rows tinted red."""

    first_amount_column = len(rows[0]) - amount_columns
    commands: list[tuple] = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1F2937")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8.5),
        ("LINEBELOW", (0, 1), (-1, -1), 0.25, colors.HexColor("#E5E7EB")),
        ("ALIGN", (first_amount_column, 0), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]
    commands.extend(
        ("BACKGROUND", (0, row), (-1, row), colors.HexColor("#F9FAFB")) for row in range(2, len(rows), 2)
    )
    commands.extend(
        ("BACKGROUND", (0, row), (-1, row), colors.HexColor("#FDECEC")) for row in highlighted_rows
    )
    table = Table(rows, colWidths=col_widths, repeatRows=1)
    table.setStyle(TableStyle(commands))
    return table


def _build_kpi_cards(data: DashboardReportData) -> Table:
    styles = getSampleStyleSheet()
    card_style = ParagraphStyle(
        name="KpiCard",
        parent=styles["BodyText"],
        fontSize=10,
        leading=14,
        textColor=colors.HexColor("#1F2937"),
    )
    summary = data.summary
    cells = [
        [
            Paragraph("<b>Total income</b><br/>" + _format_amount(summary.total_income, data.currency), card_style),
            Paragraph("<b>Total expenses</b><br/>" + _format_amount(summary.total_expenses, data.currency), card_style),
            Paragraph("<b>Balance</b><br/>" + _format_amount(summary.balance, data.currency), card_style),
        ]
    ]
    table = Table(cells, colWidths=[58 * mm, 58 * mm, 58 * mm])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor("#F4F6F8")),
                ("BOX", (0, 0), (-1, -1), 0.6, colors.HexColor("#DDE2E8")),
                ("INNERGRID", (0, 0), (-1, -1), 0.4, colors.HexColor("#DDE2E8")),
                ("LEFTPADDING", (0, 0), (-1, -1), 8),
                ("RIGHTPADDING", (0, 0), (-1, -1), 8),
                ("TOPPADDING", (0, 0), (-1, -1), 8),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    return table


def _build_budget_table(data: DashboardReportData) -> Table:
    table_data = [["Category", "Budget", "Spent", "Remaining", "Used"]]
    over_rows: list[int] = []
    for row, item in enumerate(data.budget_overview.items, start=1):
        if item.status == BudgetStatus.OVER:
            over_rows.append(row)
        table_data.append(
            [
                item.category,
                _format_amount(item.budgeted, data.currency),
                _format_amount(item.spent, data.currency),
                _format_amount(item.remaining, data.currency),
                f"{item.percent_used}%",
            ]
        )
    return _grid_table(
        table_data,
        [56 * mm, 32 * mm, 32 * mm, 32 * mm, 20 * mm],
        amount_columns=4,
        highlighted_rows=tuple(over_rows),
    )


def _build_recent_table(data: DashboardReportData) -> Table:
    def _truncate_text(value: str, max_length: int = 36) -> str:
        if len(value) <= max_length:
            return value
        return value[: max_length - 1].rstrip() + "…"

    table_data = [["Date", "Description", "Category", "Amount"]]
    if not data.summary.recent_transactions:
        table_data.append(["-", "No transactions yet", "-", "-"])
    for transaction in data.summary.recent_transactions:
        sign = "+" if transaction.type == TransactionType.INCOME else "-"
        table_data.append(
            [
                transaction.date.isoformat(),
                _truncate_text(transaction.description),
                transaction.category,
                sign + _format_amount(transaction.amount, data.currency),
            ]
        )
    return _grid_table(table_data, [28 * mm, 62 * mm, 50 * mm, 38 * mm], amount_columns=1)


def generate_dashboard_report_pdf(data: DashboardReportData) -> bytes:
    """Render a 2-page dashboard report: overview charts, then budgets and recent activity."""

    generated_on = (data.generated_on or date.today()).isoformat()
    footer_label = f"Expense tracker | {data.budget_overview.month} | amounts in {data.currency} | generated {generated_on}"
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=16 * mm,
        leftMargin=16 * mm,
        topMargin=16 * mm,
        bottomMargin=14 * mm,
    )
    styles = getSampleStyleSheet()
    section_title_style = ParagraphStyle(name="SectionTitle", parent=styles["Heading2"], spaceAfter=4, fontSize=12)
    subtitle_style = ParagraphStyle(name="Subtitle", parent=styles["BodyText"], fontSize=9, textColor=colors.HexColor("#6B7280"))

    story = [
        Paragraph("Expense tracker report", styles["Title"]),
        Spacer(1, 1 * mm),
        Paragraph(f"Generated on {generated_on}", subtitle_style),
        Spacer(1, 5 * mm),
        _build_kpi_cards(data),
        Spacer(1, 6 * mm),
        Paragraph("Monthly trend", section_title_style),
        Image(BytesIO(_build_monthly_chart(data.summary.monthly_expenses)), width=166 * mm, height=80 * mm),
        Spacer(1, 4 * mm),
        Paragraph("Category breakdown", section_title_style),
    ]
    if not data.summary.category_breakdown:
        story.append(Paragraph("No expenses recorded yet.", styles["BodyText"]))
    else:
        story.append(Image(BytesIO(_build_pie_chart(data.summary.category_breakdown)), width=166 * mm, height=92 * mm))

    story.append(PageBreak())
    story.append(Paragraph(f"Budgets for {data.budget_overview.month}", section_title_style))
    story.append(Spacer(1, 2 * mm))
    if not data.budget_overview.items:
        story.append(Paragraph("No budgets set for this month.", styles["BodyText"]))
    else:
        story.append(Image(BytesIO(_build_budget_chart(data.budget_overview)), width=166 * mm, height=86 * mm))
        story.append(Spacer(1, 3 * mm))
        story.append(_build_budget_table(data))
    story.append(Spacer(1, 6 * mm))
    story.append(Paragraph("Recent transactions", section_title_style))
    story.append(Spacer(1, 2 * mm))
    story.append(_build_recent_table(data))

    doc.build(
        story,
        canvasmaker=lambda *args, **kwargs: _NumberedCanvas(*args, footer_label=footer_label, **kwargs),
    )
    buffer.seek(0)
    return buffer.read()
