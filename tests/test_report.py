import pytest

from calculator import calculate_results
from report import (
    BENCHMARK_COLUMNS,
    LeakReportPDF,
    build_report_pdf,
    create_breakdown_chart,
    hex_to_rgb,
    sanitize_text,
)


def test_sanitize_text():
    assert sanitize_text("Lead – “fast”…") == 'Lead - "fast"...'
    assert sanitize_text(42) == "42"
    # anything outside latin-1 degrades instead of crashing the renderer
    assert sanitize_text("中") == "?"


def test_hex_to_rgb():
    assert hex_to_rgb("#DC2626") == (220, 38, 38)
    assert hex_to_rgb("64748B") == (100, 116, 139)


def test_breakdown_chart_is_png(worked_example):
    buf = create_breakdown_chart(calculate_results(worked_example))
    assert buf.read(8) == b"\x89PNG\r\n\x1a\n"


def test_build_report_pdf(worked_example):
    pdf = build_report_pdf(worked_example)
    assert isinstance(pdf, bytes)
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 10_000


def test_build_report_for_empty_submission():
    pdf = build_report_pdf({"company_name": "Café — Ltd"})
    assert pdf.startswith(b"%PDF")


def test_table_row_height_follows_tallest_cell():
    pdf = LeakReportPDF()
    pdf.add_page()

    y0 = pdf.get_y()
    pdf.table_row(["Failed Payment Loss", "6%", "$21,000"])
    single_line = pdf.get_y() - y0
    assert single_line == pytest.approx(10)

    y1 = pdf.get_y()
    pdf.table_row(["Manual Hours per Week " * 6, "20 hours", "Avg 32 hours / Best 8 hours"], widths=BENCHMARK_COLUMNS)
    assert pdf.get_y() - y1 > single_line
