from reportlab.lib.pagesizes import letter
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.lib.colors import HexColor
from xml.sax.saxutils import escape
from typing import List
import io
import logging
from datetime import datetime

from .schemas import ComparisonData, InterviewReport, OverallRating

logger = logging.getLogger(__name__)

RATING_COLORS = {
    OverallRating.EXCELLENT: '#4caf50',
    OverallRating.GOOD: '#2196f3',
    OverallRating.FAIR: '#ff9800',
    OverallRating.POOR: '#f44336',
}

class ReportGenerator:
    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Setup custom paragraph styles for the report"""
        self.styles.add(ParagraphStyle(
            name='CustomTitle',
            parent=self.styles['Heading1'],
            fontSize=24,
            spaceAfter=20,
            textColor=HexColor('#1a237e'),
            alignment=1,  # Center alignment
            leading=28
        ))

        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=self.styles['Heading2'],
            fontSize=16,
            spaceAfter=12,
            spaceBefore=16,
            textColor=HexColor('#0d47a1'),
            leading=20
        ))

        self.styles.add(ParagraphStyle(
            name='ListItem',
            parent=self.styles['Normal'],
            fontSize=11,
            leftIndent=20,
            spaceAfter=8,
            bulletIndent=10,
            textColor=HexColor('#37474f'),
            leading=15
        ))

    def _create_rating_table(self, report: InterviewReport) -> Table:
        """Headline table with the rating and the main averages"""
        metrics = report.metrics
        color = HexColor(RATING_COLORS.get(metrics.overall_rating, '#ff9800'))

        data = [
            ['Overall Rating', metrics.overall_rating.value],
            ['Average Answer Score', f'{report.average_score:.0f}%'],
            ['Technical Depth', f'{metrics.technical_depth:.1f}%'],
            ['Communication', f'{metrics.communication_score:.1f}%'],
            ['Skill Level', f'{report.skill_assessment.level.value} ({report.skill_assessment.years_estimate})'],
        ]
        table = Table(data, colWidths=[3*inch, 3*inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HexColor('#f5f5f5')),
            ('TEXTCOLOR', (0, 0), (-1, 0), color),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 14),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('PADDING', (0, 0), (-1, -1), 8),
            ('GRID', (0, 0), (-1, -1), 1, HexColor('#e0e0e0')),
            ('BOX', (0, 0), (-1, -1), 2, color)
        ]))
        return table

    def _create_comparison_table(self, comparison: List[ComparisonData]) -> Table:
        data = [['Category', 'You', 'Industry Average', 'Top Performers']]
        for row in comparison:
            data.append([
                row.category,
                f'{row.user_score:.0f}',
                f'{row.industry_average:.0f}',
                f'{row.top_performers:.0f}'
            ])
        table = Table(data, colWidths=[2.4*inch, 1.2*inch, 1.4*inch, 1.4*inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HexColor('#f5f5f5')),
            ('TEXTCOLOR', (0, 0), (-1, 0), HexColor('#1a237e')),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('ALIGN', (1, 0), (-1, -1), 'CENTER'),
            ('GRID', (0, 0), (-1, -1), 1, HexColor('#e0e0e0')),
            ('PADDING', (0, 0), (-1, -1), 8)
        ]))
        return table

    def _bullet_list(self, items: List[str]) -> List[Paragraph]:
        return [
            Paragraph(f"<bullet>•</bullet> {escape(item)}", self.styles['ListItem'])
            for item in items
        ]

    def generate_report(self, report: InterviewReport) -> bytes:
        """Render an interview report to PDF bytes"""
        buffer = io.BytesIO()

        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=letter,
                rightMargin=50,
                leftMargin=50,
                topMargin=50,
                bottomMargin=50
            )

            story = [
                Paragraph("Interview Summary Report", self.styles['CustomTitle']),
                Spacer(1, 12),
                self._create_rating_table(report),
                Spacer(1, 16)
            ]

            if report.skill_assessment.strengths:
                story.append(Paragraph("Key Strengths", self.styles['SectionHeader']))
                story.extend(self._bullet_list(report.skill_assessment.strengths))

            if report.skill_assessment.recommendations:
                story.append(Paragraph("Recommendations for Growth", self.styles['SectionHeader']))
                story.extend(self._bullet_list(report.skill_assessment.recommendations))

            if report.comparison:
                story.append(Paragraph("Industry Comparison", self.styles['SectionHeader']))
                story.append(self._create_comparison_table(report.comparison))

            footer_style = ParagraphStyle(
                'Footer',
                parent=self.styles['Normal'],
                fontSize=8,
                textColor=HexColor('#666666'),
                alignment=1
            )
            story.append(Spacer(1, 30))
            story.append(Paragraph(
                f"Generated on {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
                footer_style
            ))

            doc.build(story)
            return buffer.getvalue()

        except Exception as e:
            logger.error(f"Error generating PDF report: {str(e)}", exc_info=True)
            raise
        finally:
            buffer.close()
