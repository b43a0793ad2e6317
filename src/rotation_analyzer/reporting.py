"""
Reporting and Export Module for Rotation Analysis

Turns analysis results into comparison tables and exports them to PDF,
Excel and CSV.
"""

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, PageBreak
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence
import logging
import re

from .analyzer import AnalysisResult, find_best_rotation
from .staffing_solver import StaffingResult

NOT_AVAILABLE = "N/A"


def format_headcount(staffing: StaffingResult) -> str:
    """Headcount for display; an unachievable rotation is never shown as zero staff"""
    if not staffing.is_achievable:
        return NOT_AVAILABLE
    return str(staffing.required_headcount)


class ReportGenerator:
    """Builds tables and documents from analysis results"""

    def __init__(self, year: Optional[int] = None):
        self.year = year
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Title, per-rotation heading and the best rotation callout"""
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Title'],
            fontSize=18,
            spaceAfter=24
        ))
        self.styles.add(ParagraphStyle(
            name='RotationHeading',
            parent=self.styles['Heading2'],
            fontSize=13,
            spaceAfter=10
        ))
        self.styles.add(ParagraphStyle(
            name='BestRotation',
            parent=self.styles['Normal'],
            fontSize=11,
            textColor=colors.darkgreen
        ))

    def create_comparison_dataframe(self, results: Sequence[AnalysisResult]) -> pd.DataFrame:
        """One row per rotation"""
        data = []
        for result in results:
            staffing = result.staffing
            data.append({
                'Rotation': result.rotation_name,
                'Pattern': result.pattern,
                'Cycle_Length': result.cycle_length,
                'Work_Days': result.work_days,
                'Transitional_Days': result.transitional_days,
                'Rest_Days': result.rest_days,
                'Total_Rest_Days': result.total_rest_days,
                'Total_Nights': result.total_nights,
                'Weekends': result.weekend_stats.total_weekends,
                'Full_Weekends': result.weekend_stats.full_weekends,
                'Clean_Weekends': result.weekend_stats.clean_weekends,
                'Transitional_Weekends': result.weekend_stats.transitional_weekends,
                'Vacation_Days_Off': result.vacation.total,
                'Vacation_Factor': round(result.vacation.factor, 2),
                'Required_Headcount': format_headcount(staffing),
                'Limiting_Factor': staffing.limiting_factor.value,
                'Staff_For_Volume': round(staffing.min_staff_for_volume, 2),
                'Staff_For_Nights': round(staffing.min_staff_for_nights, 2),
                'Effective_Work_Days': int(staffing.effective_work_days),
                'Effective_Nights': int(staffing.effective_nights),
            })

        columns = [
            'Rotation', 'Pattern', 'Cycle_Length', 'Work_Days', 'Transitional_Days',
            'Rest_Days', 'Total_Rest_Days', 'Total_Nights', 'Weekends', 'Full_Weekends',
            'Clean_Weekends', 'Transitional_Weekends', 'Vacation_Days_Off', 'Vacation_Factor',
            'Required_Headcount', 'Limiting_Factor', 'Staff_For_Volume', 'Staff_For_Nights',
            'Effective_Work_Days', 'Effective_Nights',
        ]
        return pd.DataFrame(data, columns=columns)

    def create_weekend_dataframe(self, result: AnalysisResult) -> pd.DataFrame:
        """Weekend detail of a single rotation"""
        data = []
        for weekend in result.weekend_stats.details:
            data.append({
                'Date': weekend.saturday.strftime("%d/%m/%Y"),
                'Saturday': weekend.saturday_status.code,
                'Sunday': weekend.sunday_status.code,
                'Type': weekend.weekend_type.value if weekend.weekend_type else '',
                'Full_Weekend': weekend.is_full,
            })
        return pd.DataFrame(data, columns=['Date', 'Saturday', 'Sunday', 'Type', 'Full_Weekend'])

    def compare_to_baseline(self, results: Sequence[AnalysisResult]) -> pd.DataFrame:
        """Difference of every rotation against the first one"""
        columns = ['Rotation', 'Work_Days', 'Transitional_Days', 'Rest_Days',
                   'Total_Rest_Days', 'Full_Weekends']
        if not results:
            return pd.DataFrame(columns=columns)

        baseline = results[0]
        data = []
        for result in results:
            data.append({
                'Rotation': result.rotation_name,
                'Work_Days': result.work_days - baseline.work_days,
                'Transitional_Days': result.transitional_days - baseline.transitional_days,
                'Rest_Days': result.rest_days - baseline.rest_days,
                'Total_Rest_Days': result.total_rest_days - baseline.total_rest_days,
                'Full_Weekends': (result.weekend_stats.full_weekends
                                  - baseline.weekend_stats.full_weekends),
            })
        return pd.DataFrame(data, columns=columns)

    def create_dashboard_summary(self, results: Sequence[AnalysisResult]) -> str:
        """Create text summary of all rotations"""
        year_text = f" - {self.year}" if self.year is not None else ""
        if not results:
            return f"ROTATION SUMMARY{year_text}\n\nNo rotations to analyze."

        best = find_best_rotation(results)
        summary = f"""
ROTATION SUMMARY{year_text}

Best Rotation: {best.rotation_name} ({best.pattern})
• Full Weekends Off: {best.weekend_stats.full_weekends}
• Clean Weekends: {best.weekend_stats.clean_weekends}
• Work Days: {best.work_days}
• Transitional Days: {best.transitional_days}
• Rest Days: {best.rest_days}
        """.strip()

        for result in results:
            staffing = result.staffing
            summary += f"""

{result.rotation_name} ({result.pattern}, cycle {result.cycle_length})
• Days: {result.work_days} work / {result.transitional_days} transitional / {result.rest_days} rest
• Weekends: {result.weekend_stats.full_weekends} of {result.weekend_stats.total_weekends} full
• Vacation: {result.vacation.vac} days of leave -> {result.vacation.total} days off (x{result.vacation.factor:.2f})
• Headcount: {format_headcount(staffing)} ({staffing.limiting_factor.value})"""

        return summary

    def export_results_pdf(self, results: Sequence[AnalysisResult], output_path: str) -> bool:
        """Export the comparison and weekend details to PDF"""
        try:
            doc = SimpleDocTemplate(
                output_path,
                pagesize=landscape(A4),
                rightMargin=0.5*inch,
                leftMargin=0.5*inch,
                topMargin=0.5*inch,
                bottomMargin=0.5*inch
            )

            story = []
            title_text = "Rotation Comparison"
            if self.year is not None:
                title_text += f" - {self.year}"
            story.append(Paragraph(title_text, self.styles['ReportTitle']))
            story.append(Spacer(1, 20))

            story.append(self._create_comparison_table(results))

            best = find_best_rotation(results)
            if best is not None:
                story.append(Spacer(1, 20))
                story.append(Paragraph(
                    f"Best rotation: <b>{best.rotation_name}</b> with "
                    f"{best.weekend_stats.full_weekends} full weekends off",
                    self.styles['BestRotation']
                ))

            for result in results:
                story.append(PageBreak())
                story.extend(self._create_weekend_content(result))

            doc.build(story)
            return True

        except Exception as e:
            logging.error(f"Error creating PDF: {e}", exc_info=True)
            return False

    def _create_comparison_table(self, results: Sequence[AnalysisResult]) -> Table:
        """Create comparison table for PDF"""
        data = [['Rotation', 'Pattern', 'Work', 'Trans.', 'Rest', 'Full WE',
                 'Clean WE', 'Vacation', 'Headcount', 'Limit']]
        for result in results:
            data.append([
                result.rotation_name,
                result.pattern,
                str(result.work_days),
                str(result.transitional_days),
                str(result.rest_days),
                f"{result.weekend_stats.full_weekends}/{result.weekend_stats.total_weekends}",
                str(result.weekend_stats.clean_weekends),
                f"{result.vacation.total} (x{result.vacation.factor:.2f})",
                format_headcount(result.staffing),
                result.staffing.limiting_factor.value,
            ])

        table = Table(data, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('GRID', (0, 0), (-1, -1), 1, colors.black),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))

        # Highlight rotations that cannot cover the night posts
        for i, result in enumerate(results, 1):
            if not result.staffing.is_achievable:
                table.setStyle(TableStyle([
                    ('BACKGROUND', (0, i), (-1, i), colors.lightcoral)
                ]))

        return table

    def _create_weekend_content(self, result: AnalysisResult) -> List:
        """Weekend detail section for one rotation"""
        content = [
            Paragraph(f"{result.rotation_name} - Weekends", self.styles['RotationHeading'])
        ]

        data = [['Saturday', 'Sat', 'Sun', 'Type']]
        full_rows = []
        for i, weekend in enumerate(result.weekend_stats.details, 1):
            data.append([
                weekend.saturday.strftime("%d/%m/%Y"),
                weekend.saturday_status.code,
                weekend.sunday_status.code,
                weekend.weekend_type.value if weekend.weekend_type else '---',
            ])
            if weekend.is_full:
                full_rows.append(i)

        table = Table(data, colWidths=[1.2*inch, 0.5*inch, 0.5*inch, 2*inch], repeatRows=1)
        style = [
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
            ('FONTSIZE', (0, 0), (-1, -1), 8),
        ]
        style.extend(('BACKGROUND', (0, row), (-1, row), colors.lightgreen) for row in full_rows)
        table.setStyle(TableStyle(style))

        content.append(table)
        return content

    def export_results_excel(self, results: Sequence[AnalysisResult], output_path: str) -> bool:
        """Export comparison, baseline differences and weekend details to Excel"""
        try:
            with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
                self.create_comparison_dataframe(results).to_excel(
                    writer, sheet_name='Comparison', index=False)
                self.compare_to_baseline(results).to_excel(
                    writer, sheet_name='Baseline', index=False)

                for index, result in enumerate(results, 1):
                    # Sheet names: max 31 characters, none of []:*?/\
                    sheet_name = re.sub(r"[\[\]:*?/\\]", "-", f"{index} {result.rotation_name}")[:31]
                    self.create_weekend_dataframe(result).to_excel(
                        writer, sheet_name=sheet_name, index=False)

                self._format_excel_worksheets(writer)

            return True

        except Exception as e:
            logging.error(f"Error exporting to Excel: {e}", exc_info=True)
            return False

    def _format_excel_worksheets(self, writer):
        """Header colours and column widths on every sheet"""
        from openpyxl.styles import PatternFill, Font

        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        header_font = Font(color="FFFFFF", bold=True)

        for worksheet in writer.sheets.values():
            for cell in worksheet[1]:
                cell.fill = header_fill
                cell.font = header_font

            for column in worksheet.columns:
                column_letter = column[0].column_letter
                max_length = max((len(str(cell.value)) for cell in column if cell.value is not None),
                                 default=0)
                worksheet.column_dimensions[column_letter].width = min(max_length + 2, 50)

    def export_results_csv(self, results: Sequence[AnalysisResult], output_path: str) -> bool:
        """Export the comparison table to CSV format"""
        try:
            self.create_comparison_dataframe(results).to_csv(output_path, index=False)
            return True

        except Exception as e:
            logging.error(f"Error exporting to CSV: {e}", exc_info=True)
            return False


class ExportManager:
    """Manager class for handling all export operations"""

    def __init__(self, year: Optional[int] = None):
        self.year = year
        self.report_generator = ReportGenerator(year)

    def export_results(self, results: Sequence[AnalysisResult], format_type: str,
                       output_path: str) -> bool:
        """Export results in specified format"""
        if format_type.lower() == 'pdf':
            return self.report_generator.export_results_pdf(results, output_path)
        elif format_type.lower() == 'excel':
            return self.report_generator.export_results_excel(results, output_path)
        elif format_type.lower() == 'csv':
            return self.report_generator.export_results_csv(results, output_path)
        else:
            raise ValueError(f"Unsupported format: {format_type}")

    def get_default_filename(self, format_type: str) -> str:
        """Generate default filename for export"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        extension = 'xlsx' if format_type.lower() == 'excel' else format_type.lower()
        year_part = f"_{self.year}" if self.year is not None else ""

        return f"rotation_analysis{year_part}_{timestamp}.{extension}"

    def batch_export(self, results: Sequence[AnalysisResult], output_dir: str,
                     formats: List[str] = None) -> Dict[str, bool]:
        """Export results in multiple formats"""
        if formats is None:
            formats = ['pdf', 'excel', 'csv']

        export_results = {}
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        for format_type in formats:
            file_path = output_path / self.get_default_filename(format_type)

            try:
                export_results[format_type] = self.export_results(
                    results, format_type, str(file_path)
                )
            except Exception as e:
                logging.error(f"Error exporting {format_type}: {e}", exc_info=True)
                export_results[format_type] = False

        return export_results
