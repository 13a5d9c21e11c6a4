import io
import logging
import os
import threading

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import matplotlib.ticker as mtick
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from benchmarks import compare_to_benchmarks
from calculator import analyze_submission, as_record, format_currency
from knowledge_base import PERFORMANCE_LABELS
from priorities import calculate_executive_summary, urgency_config
from validation import validate_results

logger = logging.getLogger(__name__)

REPORT_BRAND = os.getenv("REPORT_BRAND", "REVENUE LEAK ANALYSIS")

# pyplot keeps global state; gthread workers share it
plot_lock = threading.Lock()

NEXT_LINE = dict(new_x=XPos.LMARGIN, new_y=YPos.NEXT)

# table column widths in mm (label, figure, detail)
BREAKDOWN_COLUMNS = (95, 30, 50)
BENCHMARK_COLUMNS = (65, 30, 80)


# --- UTILS ---
def sanitize_text(text):
    """Core PDF fonts are latin-1 only."""
    if not isinstance(text, str): return str(text)
    replacements = {'\u2013': '-', '\u2014': '--', '\u2018': "'", '\u2019': "'", '\u201c': '"', '\u201d': '"', '\u2026': '...', '\u00a0': ' ', '\u2022': '+'}
    for char, rep in replacements.items(): text = text.replace(char, rep)
    return text.encode('latin-1', 'replace').decode('latin-1')


def hex_to_rgb(color):
    color = color.lstrip('#')
    return tuple(int(color[i:i + 2], 16) for i in (0, 2, 4))


def _fmt_metric(value, unit):
    if unit == "%":
        return f"{value:g}%"
    return f"{value:g} {unit}"


# --- PDF GENERATOR ---
class LeakReportPDF(FPDF):
    def header(self):
        self.set_fill_color(15, 23, 42)
        self.rect(0, 0, 210, 25, 'F')
        self.set_y(8)
        self.set_font('Helvetica', 'B', 14)
        self.set_text_color(255, 255, 255)
        self.cell(10)
        self.cell(0, 10, sanitize_text(REPORT_BRAND))
        self.set_font('Helvetica', '', 10)
        self.set_text_color(200, 200, 200)
        self.set_x(10)
        self.cell(0, 10, 'CONFIDENTIAL ESTIMATE', align='R', **NEXT_LINE)
        self.ln(15)

    def footer(self):
        self.set_y(-15)
        self.set_draw_color(226, 232, 240)
        self.set_line_width(0.3)
        self.line(10, self.get_y(), 200, self.get_y())
        self.set_font('Helvetica', 'I', 8)
        self.set_text_color(128, 128, 128)
        self.cell(95, 8, 'Estimates from submitted figures and benchmarks')
        self.cell(95, 8, f'Page {self.page_no()} of {{nb}}', align='R')

    def chapter_title(self, title, subtitle=None):
        self.set_font('Helvetica', 'B', 16)
        self.set_text_color(15, 23, 42)
        self.cell(0, 8, sanitize_text(title), **NEXT_LINE)
        if subtitle:
            self.set_font('Helvetica', '', 9)
            self.set_text_color(100, 116, 139)
            self.cell(0, 5, sanitize_text(subtitle), **NEXT_LINE)
        self.set_draw_color(37, 99, 235)
        self.set_line_width(0.8)
        self.line(10, self.get_y() + 2, 200, self.get_y() + 2)
        self.ln(8)

    def table_row(self, cells, widths=BREAKDOWN_COLUMNS, colors=None):
        """One row of left / centre / right aligned cells; the tallest wrapped cell sets the row height."""
        colors = colors or [(0, 0, 0)] * len(cells)
        aligns = ['L'] + ['C'] * (len(cells) - 2) + ['R']
        x = 15
        y_start = self.get_y()
        y_end = y_start

        for idx, (text, width, color, align) in enumerate(zip(cells, widths, colors, aligns)):
            self.set_xy(x, y_start)
            self.set_font('Helvetica', '' if 0 < idx < len(cells) - 1 else 'B', 10)
            self.set_text_color(*color)
            self.multi_cell(width, 6, sanitize_text(text), align=align)
            y_end = max(y_end, self.get_y())
            x += width

        self.set_y(y_end + 4)

    def card_box(self, label, value, subtext, x, y, w, h, value_color=(15, 23, 42)):
        self.set_xy(x, y)
        self.set_fill_color(255, 255, 255)
        self.set_draw_color(226, 232, 240)
        self.set_line_width(0.5)
        self.rect(x, y, w, h, 'DF')

        self.set_xy(x, y + 6)
        self.set_font('Helvetica', 'B', 14)
        self.set_text_color(*value_color)
        self.cell(w, 8, sanitize_text(value), align='C')

        self.set_xy(x, y + 16)
        self.set_font('Helvetica', 'B', 8)
        self.set_text_color(100, 116, 139)
        self.cell(w, 5, sanitize_text(label), align='C')

        self.set_xy(x, y + 21)
        self.set_font('Helvetica', 'I', 7)
        self.set_text_color(148, 163, 184)
        self.cell(w, 4, sanitize_text(subtext), align='C')

    def bullet(self, text):
        self.set_x(15)
        self.cell(5, 6, "+")
        self.multi_cell(170, 6, sanitize_text(text), **NEXT_LINE)


def create_breakdown_chart(results):
    """Horizontal bar chart of the capped losses, largest on top. Returns a PNG buffer."""
    items = list(reversed(results["lossBreakdown"]))
    with plot_lock:
        plt.style.use('seaborn-v0_8-whitegrid')
        fig, ax = plt.subplots(figsize=(8, 4))

        ax.barh(
            [i["title"] for i in items],
            [i["amount"] for i in items],
            color=[i["color"] for i in items],
        )
        for idx, i in enumerate(items):
            ax.text(i["amount"], idx, f"  {format_currency(i['amount'])}", va='center', fontsize=9)

        ax.set_title("Annual Revenue Leak by Category", fontsize=12, fontweight='bold', pad=15)
        ax.set_xlabel("Estimated annual loss ($)", fontsize=9)
        ax.xaxis.set_major_formatter(mtick.StrMethodFormatter('${x:,.0f}'))
        ax.margins(x=0.2)

        plt.tight_layout()

        buf = io.BytesIO()
        fig.savefig(buf, format='png', bbox_inches='tight', dpi=200)
        plt.close(fig)
        buf.seek(0)
        return buf


def build_report_pdf(record):
    """Renders the full leak report for one submission and returns the PDF bytes."""
    record = as_record(record)
    inputs, profile, results = analyze_submission(record)
    benchmark_rows = compare_to_benchmarks(inputs, results, profile)
    summary = calculate_executive_summary(record, results)
    warnings = validate_results(results, record)["overall"]["warnings"]
    company = sanitize_text(record.company_name or "Your Company")

    pdf = LeakReportPDF()
    pdf.set_auto_page_break(True, 15)

    # Page 1: headline numbers + chart
    pdf.add_page()
    pdf.ln(5)
    pdf.set_font('Helvetica', 'B', 24)
    pdf.set_text_color(15, 23, 42)
    pdf.cell(0, 10, "Revenue Leak Analysis", **NEXT_LINE)
    pdf.set_font('Helvetica', '', 14)
    pdf.set_text_color(100, 116, 139)
    pdf.cell(0, 8, f"Prepared for: {company}", **NEXT_LINE)
    pdf.cell(0, 8, f"Industry benchmark: {sanitize_text(profile.name)}", **NEXT_LINE)
    pdf.ln(8)

    y = pdf.get_y()
    w, h = 60, 28
    pdf.card_box("ANNUAL REVENUE LEAK", format_currency(results["totalLoss"]), "Capped estimate", 10, y, w, h,
                 value_color=(185, 28, 28))
    pdf.card_box("RECOVERABLE", format_currency(results["conservativeRecovery"]),
                 f"Up to {format_currency(results['optimisticRecovery'])}", 75, y, w, h, value_color=(22, 163, 74))
    pdf.card_box("LEAK % OF ARR", f"{results['lossPercentageOfARR']:.1f}%",
                 f"ARR {format_currency(results['performanceMetrics']['currentARR'])}", 140, y, w, h)

    pdf.set_y(y + h + 12)
    pdf.image(create_breakdown_chart(results), x=10, w=190)

    # Page 2: breakdown + benchmarks
    pdf.add_page()
    pdf.chapter_title("Where Revenue Is Leaking", "Annual losses after ARR caps, largest first")
    for item in results["lossBreakdown"]:
        pdf.table_row(
            [item["title"], f"{item['percentage']:.0f}%", format_currency(item["amount"])],
            colors=[hex_to_rgb(item["color"]), (0, 0, 0), (0, 0, 0)],
        )
    pdf.table_row(
        ["Secure revenue", "", format_currency(results["performanceMetrics"]["secureRevenue"])],
        colors=[(0, 0, 0), (0, 0, 0), (22, 163, 74)],
    )
    pdf.ln(6)

    pdf.chapter_title(f"Benchmarks: {profile.name}", "Your figures against the industry average and top performers")
    for row in benchmark_rows:
        perf = row["performance"]
        color = (22, 163, 74) if row["strategicAdvantage"] else (185, 28, 28) if perf == "below-average" else (202, 138, 4)
        pdf.table_row(
            [
                f"{row['title']}\n{PERFORMANCE_LABELS[perf]}",
                _fmt_metric(row["userValue"], row["unit"]),
                f"Avg {_fmt_metric(row['industryAvg'], row['unit'])} / Best {_fmt_metric(row['bestInClass'], row['unit'])}",
            ],
            widths=BENCHMARK_COLUMNS,
            colors=[color, (0, 0, 0), (71, 85, 105)],
        )

    # Page 3: what to do about it
    pdf.add_page()
    pdf.chapter_title("Priority Actions")
    pdf.set_font('Helvetica', 'I', 11)
    pdf.set_text_color(51, 65, 85)
    pdf.multi_cell(0, 6, sanitize_text(
        f"{summary['businessImpact']}. Urgency: {urgency_config(summary['urgencyLevel'])['label']}. "
        f"First results in {summary['timeToValue']}."), **NEXT_LINE)
    pdf.ln(6)

    for action in summary["priorityActions"]:
        style = urgency_config(action["urgency"])
        pdf.set_font('Helvetica', 'B', 12)
        pdf.set_text_color(*style["color"])
        pdf.cell(0, 7, sanitize_text(f"{action['title']}  ({format_currency(action['recoveryAmount'])} recoverable)"),
                 **NEXT_LINE)
        pdf.set_font('Helvetica', 'I', 9)
        pdf.set_text_color(100, 116, 139)
        pdf.cell(0, 5, sanitize_text(
            f"{style['label']} | Effort {action['effort']} | {action['timeframe']} | Payback {action['paybackPeriod']}"),
            **NEXT_LINE)
        pdf.set_font('Helvetica', '', 10)
        pdf.set_text_color(15, 23, 42)
        pdf.multi_cell(0, 6, sanitize_text(action["whyItMatters"]), **NEXT_LINE)
        for step in action["implementationSteps"]:
            pdf.bullet(step)
        pdf.ln(4)

    if warnings:
        pdf.set_font('Helvetica', 'B', 10)
        pdf.set_text_color(185, 28, 28)
        pdf.cell(0, 6, "Data checks", **NEXT_LINE)
        pdf.set_font('Helvetica', '', 9)
        pdf.set_text_color(71, 85, 105)
        for warning in warnings:
            pdf.bullet(warning)

    logger.info("Rendered report for %s (%s, total leak %s)", company, profile.key, format_currency(results["totalLoss"]))
    return bytes(pdf.output())
