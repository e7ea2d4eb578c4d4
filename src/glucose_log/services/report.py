"""
PDF report generation.

The report is laid out as a list of pages of simple draw commands
(filled rectangles and text runs, positioned in millimetres from the top-left
corner of an A4 page). The commands are then painted with reportlab. Keeping
layout separate from painting means pagination can be checked without the
drawing library installed.
"""

import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

from glucose_log.domain.reading import Reading, ReadingType, ReportColor
from glucose_log.services.statistics import ReadingStats, format_number, report_color
from glucose_log.utils.exceptions import ReportUnavailable, StorageWriteError, ValidationError
from glucose_log.utils.parameters import ReportConfig
from glucose_log.utils.timezone_utils import from_epoch_ms

logger = logging.getLogger(__name__)

PAGE_WIDTH_MM = 210.0
PAGE_HEIGHT_MM = 297.0

TABLE_LEFT = 20.0
TABLE_WIDTH = 170.0
ROW_HEIGHT = 8.0
TABLE_TOP = 80.0
CONTENT_TOP = 20.0
PAGE_BOTTOM = 270.0

COLUMN_X = {"date": 25.0, "time": 60.0, "reading_header": 90.0, "reading": 100.0, "type": 140.0}

BLUE = (0, 102, 204)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

VALUE_COLORS: dict[str, tuple[int, int, int]] = {
    ReportColor.RED.value: (220, 38, 38),
    ReportColor.GREEN.value: (34, 197, 94),
    ReportColor.YELLOW.value: (234, 179, 8),
}


@dataclass(frozen=True)
class FillRect:
    """Filled rectangle; ``y`` is the top edge."""

    x: float
    y: float
    width: float
    height: float
    color: tuple[int, int, int]


@dataclass(frozen=True)
class DrawText:
    """Text run; ``y`` is the baseline."""

    x: float
    y: float
    text: str
    size: float = 10
    color: tuple[int, int, int] = BLACK
    centered: bool = False
    bold: bool = False


@dataclass
class ReportPage:
    """Draw commands for a single page, in painting order."""

    commands: list[FillRect | DrawText] = field(default_factory=list)

    def texts(self) -> list[str]:
        """Return every text run on the page."""
        return [c.text for c in self.commands if isinstance(c, DrawText)]


def report_filename(today: date | None = None) -> str:
    """Name of the exported file for the given day."""
    day = today or date.today()
    return f"blood-sugar-report-{day.isoformat()}.pdf"


def _display_date(dt: datetime) -> str:
    return f"{dt.month}/{dt.day}/{dt.year}"


def _type_label(reading_type: str) -> str:
    return "Fasting" if reading_type == ReadingType.FASTING.value else "Normal"


class ReportGenerator:
    """
    Builds the printable blood sugar report.

    Page one carries the title, generation date, period and a statistics box,
    followed by the readings table which continues over as many pages as
    needed. Every page gets a page counter and the disclaimer.
    """

    def __init__(self, config: ReportConfig, timezone_str: str = "UTC") -> None:
        """
        Initialize report generator.

        Args:
            config: Report configuration.
            timezone_str: Timezone used to display reading dates.
        """
        self.config = config
        self.timezone_str = timezone_str

    def _header_commands(
        self, readings: list[Reading], stats: ReadingStats, label: str, generated_at: datetime
    ) -> list[FillRect | DrawText]:
        return [
            DrawText(105, 20, self.config.title, size=20, color=BLUE, centered=True, bold=True),
            DrawText(
                105, 28, f"Generated: {_display_date(generated_at)}",
                size=10, color=(100, 100, 100), centered=True,
            ),
            DrawText(20, 40, f"Period: {label}", size=12),
            FillRect(20, 45, 170, 25, (240, 248, 255)),
            DrawText(25, 53, f"Total Readings: {len(readings)}", size=11),
            DrawText(25, 60, f"Average: {stats.avg:.1f} mg/dL", size=11),
            DrawText(80, 60, f"Min: {format_number(stats.min)} mg/dL", size=11),
            DrawText(130, 60, f"Max: {format_number(stats.max)} mg/dL", size=11),
        ]

    def _table_header_commands(self, y: float) -> list[FillRect | DrawText]:
        return [
            FillRect(TABLE_LEFT, y, TABLE_WIDTH, ROW_HEIGHT, BLUE),
            DrawText(COLUMN_X["date"], y + 5, "Date", color=WHITE, bold=True),
            DrawText(COLUMN_X["time"], y + 5, "Time", color=WHITE, bold=True),
            DrawText(COLUMN_X["reading_header"], y + 5, "Reading (mg/dL)", color=WHITE, bold=True),
            DrawText(COLUMN_X["type"], y + 5, "Type", color=WHITE, bold=True),
        ]

    def _row_commands(self, reading: Reading, index: int, y: float) -> list[FillRect | DrawText]:
        shade = 250 if index % 2 == 0 else 255
        measured_at = from_epoch_ms(reading.timestamp, self.timezone_str)
        color = VALUE_COLORS[report_color(reading.numeric_value).value]
        return [
            FillRect(TABLE_LEFT, y, TABLE_WIDTH, ROW_HEIGHT, (shade, shade, shade)),
            DrawText(COLUMN_X["date"], y + 5, _display_date(measured_at)),
            DrawText(COLUMN_X["time"], y + 5, reading.time),
            DrawText(COLUMN_X["reading"], y + 5, reading.value, color=color),
            DrawText(COLUMN_X["type"], y + 5, _type_label(reading.type)),
        ]

    def _footer_commands(self, page_number: int, page_count: int) -> list[FillRect | DrawText]:
        gray = (150, 150, 150)
        return [
            DrawText(105, 290, f"Page {page_number} of {page_count}", size=8, color=gray, centered=True),
            DrawText(105, 285, self.config.disclaimer, size=8, color=gray, centered=True),
        ]

    def build_layout(
        self,
        readings: list[Reading],
        stats: ReadingStats,
        label: str,
        generated_at: datetime | None = None,
    ) -> list[ReportPage]:
        """
        Lay out the report as pages of draw commands.

        Args:
            readings: Readings to list, in display order.
            stats: Statistics for the same readings.
            label: Period description.
            generated_at: Generation instant printed in the header.

        Returns:
            Pages with header, table rows and footers.
        """
        generated = generated_at or datetime.now()

        page = ReportPage(self._header_commands(readings, stats, label, generated))
        page.commands.extend(self._table_header_commands(TABLE_TOP))
        pages = [page]

        y = TABLE_TOP + 10
        for index, reading in enumerate(readings):
            if y > PAGE_BOTTOM:
                page = ReportPage()
                pages.append(page)
                y = CONTENT_TOP
            page.commands.extend(self._row_commands(reading, index, y))
            y += ROW_HEIGHT

        for number, p in enumerate(pages, start=1):
            p.commands.extend(self._footer_commands(number, len(pages)))

        return pages

    def render(self, pages: list[ReportPage]) -> bytes:
        """
        Paint laid-out pages into a PDF document.

        Raises:
            ReportUnavailable: If reportlab cannot be imported.
        """
        try:
            from reportlab.lib.pagesizes import A4
            from reportlab.lib.units import mm
            from reportlab.pdfgen import canvas
        except ImportError as e:
            raise ReportUnavailable(f"PDF drawing library is not available: {e}") from e

        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=A4)
        _, height = A4

        for page in pages:
            for cmd in page.commands:
                r, g, b = (channel / 255 for channel in cmd.color)
                c.setFillColorRGB(r, g, b)
                if isinstance(cmd, FillRect):
                    c.rect(
                        cmd.x * mm,
                        height - (cmd.y + cmd.height) * mm,
                        cmd.width * mm,
                        cmd.height * mm,
                        stroke=0,
                        fill=1,
                    )
                else:
                    c.setFont("Helvetica-Bold" if cmd.bold else "Helvetica", cmd.size)
                    if cmd.centered:
                        c.drawCentredString(cmd.x * mm, height - cmd.y * mm, cmd.text)
                    else:
                        c.drawString(cmd.x * mm, height - cmd.y * mm, cmd.text)
            c.showPage()

        c.save()
        return buffer.getvalue()

    def generate(
        self,
        readings: list[Reading],
        stats: ReadingStats,
        label: str,
        generated_at: datetime | None = None,
    ) -> bytes:
        """
        Produce the PDF report as bytes.

        Raises:
            ReportUnavailable: If reportlab cannot be imported.
        """
        pages = self.build_layout(readings, stats, label, generated_at)
        pdf = self.render(pages)
        logger.info(f"Rendered report with {len(readings)} readings on {len(pages)} pages")
        return pdf

    def export(
        self,
        readings: list[Reading],
        stats: ReadingStats,
        label: str,
        output_dir: Path | None = None,
        generated_at: datetime | None = None,
    ) -> Path:
        """
        Render the report and write it to ``blood-sugar-report-<date>.pdf``.

        The file is only written once rendering has succeeded.

        Args:
            readings: Readings to include.
            stats: Statistics for the same readings.
            label: Period description.
            output_dir: Destination directory. Defaults to the configured one.
            generated_at: Generation instant. Defaults to now.

        Returns:
            Path of the written file.

        Raises:
            ValidationError: If there are no readings to export.
            ReportUnavailable: If reportlab cannot be imported.
            StorageWriteError: If the file cannot be written.
        """
        if not readings:
            raise ValidationError("No readings to export for the selected period")

        generated = generated_at or datetime.now()
        pdf = self.generate(readings, stats, label, generated)

        out_dir = Path(output_dir) if output_dir else Path(self.config.output_dir)
        out_path = out_dir / report_filename(generated.date())
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
            out_path.write_bytes(pdf)
        except OSError as e:
            raise StorageWriteError(f"Failed to write report {out_path}: {e}") from e

        logger.info(f"Wrote report to {out_path}")
        return out_path
