"""
PDF Report Generator for the Renovation Estimator

Renders a CalculationResult as a printable estimate: project summary, rooms,
itemized costs by category and the quality level comparison.
"""

from io import BytesIO
from datetime import datetime
from typing import Dict, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, HRFlowable
)
from reportlab.lib.enums import TA_CENTER, TA_LEFT

from calculator import CalculationResult, QualityLevel, Room, calculate_total_area


CATEGORY_LABELS = {
    'flooring': 'Flooring',
    'walls': 'Walls',
    'ceiling': 'Ceiling',
    'demolition': 'Demolition',
    'electrical': 'Electrical',
    'plumbing': 'Plumbing',
    'heating': 'Heating',
    'doors_windows': 'Doors & Windows',
}

QUALITY_INFO = {
    'economy': ('Economy', 'Basic finishes, lower labor rates'),
    'standard': ('Standard', 'Mid-range finishes'),
    'premium': ('Premium', 'High-end finishes and craftsmanship'),
}


def format_money(amount: float, currency: str = '€') -> str:
    return f"{currency}{amount:,.2f}"


class PDFReportGenerator:
    """Generates PDF reports for renovation estimates."""

    PRIMARY_COLOR = colors.HexColor('#10B981')
    SECONDARY_COLOR = colors.HexColor('#1F2937')
    LIGHT_GRAY = colors.HexColor('#F3F4F6')
    BORDER_COLOR = colors.HexColor('#E5E7EB')
    HIGHLIGHT_COLOR = colors.HexColor('#D1FAE5')

    def __init__(self, currency: str = '€'):
        self.currency = currency
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles."""
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=22,
            textColor=self.SECONDARY_COLOR,
            spaceAfter=16,
            alignment=TA_LEFT
        ))
        self.styles.add(ParagraphStyle(
            name='ReportSection',
            parent=self.styles['Heading2'],
            fontSize=14,
            textColor=self.SECONDARY_COLOR,
            spaceBefore=18,
            spaceAfter=10
        ))
        self.styles.add(ParagraphStyle(
            name='ReportBody',
            parent=self.styles['Normal'],
            fontSize=10,
            textColor=self.SECONDARY_COLOR,
            spaceAfter=6
        ))
        self.styles.add(ParagraphStyle(
            name='ReportSmall',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.gray,
            spaceAfter=4
        ))
        self.styles.add(ParagraphStyle(
            name='ReportFooter',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.gray,
            alignment=TA_CENTER
        ))

    def _money(self, amount: float) -> str:
        return format_money(amount, self.currency)

    def generate_report(
        self,
        project_name: str,
        rooms: List[Room],
        result: CalculationResult,
        quality_level: QualityLevel = QualityLevel.STANDARD,
        level_totals: Optional[Dict[str, float]] = None,
        include_materials: bool = True
    ) -> BytesIO:
        """
        Generate a PDF report for a renovation estimate.

        Returns: BytesIO buffer containing the PDF
        """
        buffer = BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=0.75*inch,
            leftMargin=0.75*inch,
            topMargin=0.75*inch,
            bottomMargin=0.75*inch,
            title=project_name
        )

        story = []
        story.extend(self._build_header(project_name))
        story.extend(self._build_summary(rooms, result, QualityLevel(quality_level), include_materials))
        story.extend(self._build_room_breakdown(rooms, result))
        story.extend(self._build_cost_table(result))
        if level_totals:
            story.extend(self._build_level_comparison(level_totals, QualityLevel(quality_level)))
        story.extend(self._build_footer())

        doc.build(story)
        buffer.seek(0)
        return buffer

    def _build_header(self, project_name: str) -> List:
        elements = [
            Paragraph('<b>Renovation Cost Estimate</b>', self.styles['ReportTitle']),
            Paragraph(f'<b>Project:</b> {escape(project_name)}', self.styles['ReportBody']),
            Paragraph(
                f'<b>Generated:</b> {datetime.now().strftime("%B %d, %Y at %H:%M")}',
                self.styles['ReportBody']
            ),
            Spacer(1, 10),
            HRFlowable(width="100%", thickness=1, color=self.BORDER_COLOR, spaceAfter=16),
        ]
        return elements

    def _build_summary(
        self,
        rooms: List[Room],
        result: CalculationResult,
        quality_level: QualityLevel,
        include_materials: bool
    ) -> List:
        """Build the project summary section."""
        elements = [Paragraph('Project Summary', self.styles['ReportSection'])]

        summary_data = [
            ['Total Floor Area', f'{calculate_total_area(rooms):,.1f} m²'],
            ['Rooms', str(len(rooms))],
            ['Quality Level', QUALITY_INFO[quality_level.value][0]],
            ['Materials', 'Included' if include_materials else 'Labor only'],
            ['Expected Range', f'{self._money(result.low_estimate)} - {self._money(result.high_estimate)}'],
            ['Estimated Total', self._money(result.grand_total)],
        ]

        table = Table(summary_data, colWidths=[2*inch, 2.5*inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (0, -1), self.LIGHT_GRAY),
            ('TEXTCOLOR', (0, 0), (-1, -1), self.SECONDARY_COLOR),
            ('ALIGN', (0, 0), (0, -1), 'LEFT'),
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTNAME', (1, -1), (1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('FONTSIZE', (1, -1), (1, -1), 14),
            ('TEXTCOLOR', (1, -1), (1, -1), self.PRIMARY_COLOR),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('GRID', (0, 0), (-1, -1), 0.5, self.BORDER_COLOR),
        ]))

        elements.append(table)
        elements.append(Spacer(1, 16))
        return elements

    def _build_room_breakdown(self, rooms: List[Room], result: CalculationResult) -> List:
        """Rooms with their dimensions, surfaces and allocated subtotal."""
        elements = [Paragraph('Rooms', self.styles['ReportSection'])]

        subtotals = {breakdown.room_id: breakdown.subtotal for breakdown in result.by_room}

        data = [['Room', 'Dimensions', 'Floor', 'Walls', 'Subtotal']]
        for room in rooms:
            dims = room.dimensions
            data.append([
                room.display_name.title(),
                f"{dims.length:g} × {dims.width:g} × {dims.height:g} m",
                f"{room.computed.floor_area:,.1f} m²",
                f"{room.computed.wall_area:,.1f} m²",
                self._money(subtotals.get(room.id, 0.0)),
            ])

        table = Table(data, colWidths=[1.8*inch, 1.6*inch, 0.9*inch, 0.9*inch, 1.2*inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), self.PRIMARY_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 10),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
            ('TOPPADDING', (0, 0), (-1, 0), 8),
            ('TEXTCOLOR', (0, 1), (-1, -1), self.SECONDARY_COLOR),
            ('FONTSIZE', (0, 1), (-1, -1), 9),
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('ALIGN', (0, 0), (0, -1), 'LEFT'),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, self.LIGHT_GRAY]),
            ('GRID', (0, 0), (-1, -1), 0.5, self.BORDER_COLOR),
        ]))

        elements.append(table)
        elements.append(Spacer(1, 16))
        return elements

    def _build_cost_table(self, result: CalculationResult) -> List:
        """Itemized costs grouped by category, followed by the totals."""
        elements = [Paragraph('Cost Estimate', self.styles['ReportSection'])]

        data = [['Item', 'Qty', 'Unit Price', 'Total']]
        category_rows = []
        for breakdown in result.by_category:
            category = breakdown.category.value
            category_rows.append(len(data))
            data.append([CATEGORY_LABELS.get(category, category).upper(), '', '', self._money(breakdown.subtotal)])
            for item in breakdown.items:
                data.append([
                    f"  {item.name}",
                    f"{item.quantity:,.1f} {item.unit}",
                    self._money(item.unit_price),
                    self._money(item.total),
                ])

        table = Table(data, colWidths=[3.1*inch, 1.2*inch, 1.1*inch, 1.2*inch])
        style_commands = [
            ('BACKGROUND', (0, 0), (-1, 0), self.PRIMARY_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 9),
            ('TEXTCOLOR', (0, 1), (-1, -1), self.SECONDARY_COLOR),
            ('FONTSIZE', (0, 1), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('ALIGN', (0, 0), (0, -1), 'LEFT'),
            ('GRID', (0, 0), (-1, -1), 0.5, self.BORDER_COLOR),
        ]
        for row_idx in category_rows:
            style_commands.extend([
                ('BACKGROUND', (0, row_idx), (-1, row_idx), self.LIGHT_GRAY),
                ('FONTNAME', (0, row_idx), (-1, row_idx), 'Helvetica-Bold'),
            ])
        table.setStyle(TableStyle(style_commands))
        elements.append(table)
        elements.append(Spacer(1, 10))

        summary_data = [
            ['Labor', self._money(result.total_labor)],
            ['Materials', self._money(result.total_materials)],
            ['Grand Total', self._money(result.grand_total)],
        ]
        summary_table = Table(summary_data, colWidths=[2*inch, 1.5*inch])
        summary_table.setStyle(TableStyle([
            ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('TEXTCOLOR', (0, 0), (-1, -1), self.SECONDARY_COLOR),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, -1), (-1, -1), 12),
            ('TEXTCOLOR', (1, -1), (1, -1), self.PRIMARY_COLOR),
            ('LINEABOVE', (0, -1), (-1, -1), 1, self.BORDER_COLOR),
        ]))

        summary_wrapper = Table([[summary_table]], colWidths=[6.6*inch])
        summary_wrapper.setStyle(TableStyle([('ALIGN', (0, 0), (0, 0), 'RIGHT')]))

        elements.append(summary_wrapper)
        elements.append(Spacer(1, 16))
        return elements

    def _build_level_comparison(self, level_totals: Dict[str, float], selected: QualityLevel) -> List:
        """Grand total at each quality level, selected level highlighted."""
        elements = [Paragraph('Quality Level Comparison', self.styles['ReportSection'])]

        data = [['Level', 'Description', 'Estimated Total']]
        selected_row = None
        for level in QualityLevel:
            if level.value not in level_totals:
                continue
            label, description = QUALITY_INFO[level.value]
            if level == selected:
                selected_row = len(data)
                label = f"{label} (selected)"
            data.append([label, description, self._money(level_totals[level.value])])

        table = Table(data, colWidths=[1.4*inch, 3*inch, 1.5*inch])
        style_commands = [
            ('BACKGROUND', (0, 0), (-1, 0), self.PRIMARY_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('TEXTCOLOR', (0, 1), (-1, -1), self.SECONDARY_COLOR),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ('TOPPADDING', (0, 0), (-1, -1), 8),
            ('ALIGN', (2, 0), (2, -1), 'RIGHT'),
            ('GRID', (0, 0), (-1, -1), 0.5, self.BORDER_COLOR),
        ]
        if selected_row:
            style_commands.extend([
                ('BACKGROUND', (0, selected_row), (-1, selected_row), self.HIGHLIGHT_COLOR),
                ('FONTNAME', (0, selected_row), (-1, selected_row), 'Helvetica-Bold'),
            ])
        table.setStyle(TableStyle(style_commands))

        elements.append(table)
        elements.append(Spacer(1, 24))
        return elements

    def _build_footer(self) -> List:
        elements = [HRFlowable(
            width="100%",
            thickness=1,
            color=self.BORDER_COLOR,
            spaceBefore=16,
            spaceAfter=12
        )]

        disclaimer = """
        <b>Disclaimer:</b> This estimate is calculated from standard unit prices and is intended for
        planning purposes only. Actual costs depend on site conditions, local labor rates and
        material availability. The expected range reflects typical deviation from the estimate.
        Permits, design fees and structural work are not included.
        """
        elements.append(Paragraph(disclaimer.strip(), self.styles['ReportSmall']))
        elements.append(Spacer(1, 12))
        elements.append(Paragraph('Generated by Renovation Estimator', self.styles['ReportFooter']))
        return elements
