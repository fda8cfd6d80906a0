"""Reporting utilities for backend-generated documents."""

from backend.reporting.dashboard_report import DashboardReportData, generate_dashboard_report_pdf

__all__ = ["DashboardReportData", "generate_dashboard_report_pdf"]
