"""
Fixed-layout PDF reports for recommendation, yield prediction and profile
exports.

Layout coordinates are given from the top-left corner of the page, in points,
and converted to reportlab's bottom-left origin by ``ReportCanvas``. Text
positions are baselines.
"""

import base64
import binascii
import io
import json
import logging
import os
from datetime import date
from functools import lru_cache
from typing import Any, Optional, Sequence

from reportlab.lib.colors import Color
from reportlab.lib.pagesizes import A4, landscape as landscape_pagesize
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from app.core.config import settings
from app.models.crop_recommendation import CropRecommendationForm, CropRecommendationResult
from app.models.profile import Profile
from app.models.yield_prediction import YieldPrediction, YieldPredictionForm

logger = logging.getLogger(__name__)

FONT = "Helvetica"
MARGIN = 40
BOX_PADDING = 12
LINE_HEIGHT_FACTOR = 1.15

# Fonts for the scripts of the supported UI languages, looked up in
# settings.PDF_FONT_DIR. Name -> (file, first code point, last code point).
SCRIPT_FONTS = {
    "NotoSansKannada": ("NotoSansKannada-Regular.ttf", 0x0C80, 0x0CFF),
    "NotoSansDevanagari": ("NotoSansDevanagari-Regular.ttf", 0x0900, 0x097F),
}


def rgb(r: int, g: int, b: int) -> Color:
    return Color(r / 255, g / 255, b / 255)


WHITE = rgb(255, 255, 255)
DARK_GREEN = rgb(18, 97, 49)
FOREST = rgb(30, 100, 60)
CARD_FILL = rgb(249, 250, 249)
CARD_BORDER = rgb(220, 225, 220)
HEADING = rgb(34, 49, 32)
BODY = rgb(80, 80, 80)
MUTED = rgb(120, 120, 120)

RISK_COLORS = {
    "low": rgb(30, 130, 60),
    "medium": rgb(200, 150, 30),
}
HIGH_RISK_COLOR = rgb(200, 50, 50)


def _s(value: Any) -> str:
    """Printable report text; None renders empty."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).replace("₹", "Rs.")


def _or_dash(value: Any) -> str:
    return _s(value) or "-"


def _today() -> str:
    return date.today().strftime("%d/%m/%Y")


def load_logo(logo_data_url: Optional[str]) -> Optional[ImageReader]:
    """Decodes a ``data:image/...;base64,`` URL; anything else is ignored."""
    if not logo_data_url or not logo_data_url.startswith("data:"):
        return None
    try:
        _, encoded = logo_data_url.split(",", 1)
        return ImageReader(io.BytesIO(base64.b64decode(encoded)))
    except (ValueError, binascii.Error, OSError):
        logger.warning("Ignoring unreadable report logo")
        return None


@lru_cache(maxsize=None)
def _script_font_available(font_name: str) -> bool:
    """Registers a script font on first use; False when its file is missing."""
    filename = SCRIPT_FONTS[font_name][0]
    path = os.path.join(settings.PDF_FONT_DIR, filename)
    try:
        pdfmetrics.registerFont(TTFont(font_name, path))
    except (TTFError, OSError):
        logger.warning("Font %s not found at %s, falling back to %s", font_name, path, FONT)
        return False
    return True


def font_for_char(char: str) -> str:
    code = ord(char)
    for font_name, (_, first, last) in SCRIPT_FONTS.items():
        if first <= code <= last and _script_font_available(font_name):
            return font_name
    return FONT


def text_runs(value: str) -> list[tuple[str, str]]:
    """Splits text into (font, chunk) runs. Spaces stay in the current run."""
    runs: list[tuple[str, str]] = []
    for char in value:
        font = font_for_char(char)
        if runs and (runs[-1][0] == font or char.isspace()):
            runs[-1] = (runs[-1][0], runs[-1][1] + char)
        else:
            runs.append((font, char))
    return runs


def _wrap_font(value: str) -> str:
    """The script font if the text uses one, for measuring wrapped lines."""
    return next((font for font, _ in text_runs(value) if font != FONT), FONT)


class ReportCanvas:
    """A reportlab canvas addressed from the top-left corner of the page."""

    def __init__(self, buffer: io.BytesIO, landscape: bool = False, title: str = ""):
        pagesize = landscape_pagesize(A4) if landscape else A4
        self.canvas = canvas.Canvas(buffer, pagesize=pagesize)
        self.width, self.height = pagesize
        self.pages = 1
        if title:
            self.canvas.setTitle(title)
        self.canvas.setAuthor("AgriTrust System")

    def new_page(self) -> None:
        self.canvas.showPage()
        self.pages += 1

    def save(self) -> None:
        self.canvas.save()

    def fill_rect(self, x: float, top: float, w: float, h: float, fill: Color) -> None:
        self.canvas.saveState()
        self.canvas.setFillColor(fill)
        self.canvas.rect(x, self.height - top - h, w, h, fill=1, stroke=0)
        self.canvas.restoreState()

    def round_rect(
        self,
        x: float,
        top: float,
        w: float,
        h: float,
        radius: float,
        fill: Optional[Color] = None,
        stroke: Optional[Color] = None,
    ) -> None:
        self.canvas.saveState()
        if fill:
            self.canvas.setFillColor(fill)
        if stroke:
            self.canvas.setStrokeColor(stroke)
        self.canvas.roundRect(
            x,
            self.height - top - h,
            w,
            h,
            radius,
            fill=1 if fill else 0,
            stroke=1 if stroke else 0,
        )
        self.canvas.restoreState()

    def line(self, x1: float, top1: float, x2: float, top2: float, color: Color) -> None:
        self.canvas.saveState()
        self.canvas.setStrokeColor(color)
        self.canvas.line(x1, self.height - top1, x2, self.height - top2)
        self.canvas.restoreState()

    def text(
        self,
        value: str,
        x: float,
        top: float,
        size: float = 10,
        color: Color = BODY,
        align: str = "left",
    ) -> None:
        if align == "right":
            x -= self.string_width(value, size)
        self.canvas.saveState()
        self.canvas.setFillColor(color)
        for font, chunk in text_runs(value):
            self.canvas.setFont(font, size)
            self.canvas.drawString(x, self.height - top, chunk)
            x += pdfmetrics.stringWidth(chunk, font, size)
        self.canvas.restoreState()

    def string_width(self, value: str, size: float) -> float:
        return sum(pdfmetrics.stringWidth(chunk, font, size) for font, chunk in text_runs(value))

    def fit_font_size(self, value: str, max_width: float, size: float, min_size: float = 12) -> float:
        while size > min_size and self.string_width(value, size) > max_width:
            size -= 1
        return size

    def wrapped_text(
        self,
        value: str,
        x: float,
        top: float,
        max_width: float,
        size: float = 10,
        color: Color = BODY,
        bottom_limit: Optional[float] = None,
    ) -> float:
        """Draws word-wrapped text, continuing on a new page past
        ``bottom_limit``. Returns the baseline below the last line."""
        leading = size * LINE_HEIGHT_FACTOR
        for line in simpleSplit(value, _wrap_font(value), size, max_width):
            if bottom_limit is not None and top > bottom_limit:
                self.new_page()
                top = MARGIN
            self.text(line, x, top, size=size, color=color)
            top += leading
        return top

    def image(self, image: ImageReader, x: float, top: float, w: float, h: float) -> None:
        self.canvas.drawImage(
            image, x, self.height - top - h, width=w, height=h, mask="auto"
        )


def _label_value_rows(
    report: ReportCanvas,
    rows: Sequence[tuple[str, str]],
    left: float,
    right: float,
    top: float,
    row_height: float,
    size: float = 10,
) -> float:
    for label, value in rows:
        report.text(label, left, top, size=size)
        report.text(value, right, top, size=size, align="right")
        top += row_height
    return top


def draw_yield_prediction_report(
    report: ReportCanvas,
    form: YieldPredictionForm,
    result: YieldPrediction,
    logo: Optional[ImageReader] = None,
) -> None:
    page_width = report.width

    # Header
    report.fill_rect(0, 0, page_width, 72, DARK_GREEN)
    if logo is not None:
        report.image(logo, MARGIN, 12, 48, 48)
    report.text(
        "Crop Yield Prediction Report",
        MARGIN + (60 if logo is not None else 0),
        40,
        size=20,
        color=WHITE,
    )
    report.text(
        f"Generated: {_today()}",
        page_width - MARGIN - 160,
        40,
        size=10,
        color=WHITE,
        align="right",
    )

    y = 90

    # Farm details card
    left_x = MARGIN
    left_w = page_width * 0.46 - MARGIN
    right_x = page_width * 0.52
    report.round_rect(left_x, y, left_w, 220, 6, fill=CARD_FILL, stroke=CARD_BORDER)
    report.text("Farm & Crop Details", left_x + BOX_PADDING, y + 20, size=12, color=HEADING)
    _label_value_rows(
        report,
        [
            ("Crop Type:", _s(form.seed_type)),
            ("Plot Size (acres):", _s(form.plot_size)),
            ("Season:", _s(form.season)),
            ("Location:", _s(form.location)),
            ("Soil Type:", _s(form.soil_type)),
            ("Fertilizer Plan:", _or_dash(form.fertilizer_plan)),
            ("Irrigation Plan:", _or_dash(form.irrigation_plan)),
            ("Previous Yield (q/acre):", _or_dash(form.previous_yield)),
            ("Planting Date:", _or_dash(form.planting_date)),
        ],
        left=left_x + BOX_PADDING,
        right=left_x + left_w - BOX_PADDING,
        top=y + 40,
        row_height=16,
    )

    # Prediction summary
    right_w = page_width - right_x - MARGIN
    summary_top = y
    summary_h = 86
    report.round_rect(
        right_x, summary_top, right_w, summary_h, 6, fill=rgb(245, 247, 244), stroke=CARD_BORDER
    )
    report.text(
        "Predicted Yield", right_x + BOX_PADDING, summary_top + 22, color=rgb(100, 120, 110)
    )

    mini_w, mini_h, mini_gap = 120, 40, 10
    mini_x = right_x + right_w - BOX_PADDING - mini_w
    mini_y = summary_top + 10

    predicted_yield = _s(result.predicted_yield)
    yield_size = report.fit_font_size(
        predicted_yield, mini_x - right_x - 2 * BOX_PADDING, 28
    )
    report.text(
        predicted_yield, right_x + BOX_PADDING, summary_top + 55, size=yield_size, color=DARK_GREEN
    )

    report.round_rect(mini_x, mini_y, mini_w, mini_h, 6, fill=rgb(232, 249, 238))
    report.text("Estimated Revenue", mini_x + 8, mini_y + 14, size=9, color=rgb(30, 120, 50))
    report.text(
        _s(result.estimated_revenue), mini_x + 8, mini_y + 30, size=12, color=rgb(20, 100, 45)
    )

    mini2_y = mini_y + mini_h + mini_gap
    report.round_rect(mini_x, mini2_y, mini_w, mini_h, 6, fill=rgb(255, 247, 230))
    report.text("Profit Estimate", mini_x + 8, mini2_y + 14, size=9, color=rgb(160, 120, 30))
    report.text(
        _s(result.profit_estimate), mini_x + 8, mini2_y + 30, size=12, color=rgb(140, 90, 20)
    )

    y = summary_top + summary_h + 20

    # Cost breakdown
    table_left = right_x + BOX_PADDING
    table_right = right_x + right_w - BOX_PADDING
    report.text("Cost Breakdown", table_left, y, color=HEADING)

    costs = result.cost_breakdown
    ty = _label_value_rows(
        report,
        [
            ("Seeds:", _or_dash(costs.seeds)),
            ("Fertilizer:", _or_dash(costs.fertilizer)),
            ("Irrigation:", _or_dash(costs.irrigation)),
            ("Labor:", _or_dash(costs.labor)),
        ],
        left=table_left,
        right=table_right,
        top=y + 18,
        row_height=16,
    )
    report.line(table_left, ty + 4, table_right, ty + 4, rgb(230, 230, 230))
    ty += 12
    report.text("Total Cost:", table_left, ty, color=HEADING)
    report.text(_or_dash(costs.total), table_right, ty, color=HEADING, align="right")

    y = ty + 30
    report.text("Market Price (per q):", table_left, y)
    report.text(_or_dash(result.market_price), table_right, y, color=HEADING, align="right")
    y += 30

    # Analysis
    full_x = MARGIN
    full_w = page_width - MARGIN * 2
    footer_y = report.height - 80
    report.text("Analysis", full_x + BOX_PADDING, y, size=12, color=HEADING)
    report.wrapped_text(
        _s(result.reasoning) or "No analysis provided.",
        full_x + BOX_PADDING,
        y + 16,
        full_w - BOX_PADDING * 2,
        color=rgb(70, 70, 70),
        bottom_limit=footer_y - 12,
    )

    # Footer
    report.line(full_x + BOX_PADDING, footer_y, full_x + full_w - BOX_PADDING, footer_y, CARD_BORDER)
    report.text("Prepared by: AgriTrust System", full_x + BOX_PADDING, footer_y + 18, color=MUTED)
    report.text(
        f"Date: {_today()}", full_x + full_w - BOX_PADDING - 120, footer_y + 18, color=MUTED
    )


def draw_crop_recommendation_report(
    report: ReportCanvas,
    form: CropRecommendationForm,
    result: CropRecommendationResult,
    logo: Optional[ImageReader] = None,
) -> None:
    page_width = report.width
    footer_y = report.height - 60

    report.fill_rect(0, 0, page_width, 70, FOREST)
    if logo is not None:
        report.image(logo, MARGIN, 11, 48, 48)
    report.text(
        "Smart Crop Recommendation Report",
        MARGIN + (60 if logo is not None else 0),
        40,
        size=22,
        color=WHITE,
    )
    report.text(
        f"Generated: {_today()}", page_width - MARGIN, 40, size=11, color=WHITE, align="right"
    )

    y = 90
    card_w = page_width - MARGIN * 2
    details = [
        ("Soil Type:", _s(form.soil_type)),
        ("Soil pH:", _or_dash(form.soil_ph)),
        ("Farm Area (acres):", _s(form.area)),
        ("Water Access:", _s(form.water_access)),
        ("Season:", _s(form.season)),
        ("Budget (Rs.):", _s(form.budget)),
        ("Market Preference:", _s(form.market_preference)),
        ("Location:", _s(form.location)),
        ("Previous Crops:", _or_dash(form.previous_crops)),
    ]
    report.round_rect(
        MARGIN, y, card_w, 40 + len(details) * 18, 8, fill=rgb(249, 250, 248), stroke=CARD_BORDER
    )
    report.text("Farm Details", MARGIN + 16, y + 26, size=14, color=rgb(30, 50, 40))
    dy = _label_value_rows(
        report,
        details,
        left=MARGIN + 16,
        right=page_width - MARGIN - 16,
        top=y + 50,
        row_height=18,
        size=11,
    )

    y = dy + 15
    report.text("Recommended Crops", MARGIN, y, size=16, color=rgb(30, 60, 40))
    y += 20

    for index, rec in enumerate(result.recommendations, start=1):
        if y + 120 > footer_y - 20:
            report.new_page()
            y = MARGIN
        report.round_rect(MARGIN, y, card_w, 120, 8, fill=rgb(240, 245, 240))
        report.text(f"{index}. {_s(rec.crop_name)}", MARGIN + 16, y + 24, size=14, color=DARK_GREEN)

        body = rgb(70, 70, 70)
        report.text(f"Confidence: {_s(rec.confidence)}%", MARGIN + 16, y + 44, size=11, color=body)
        report.text(f"Expected Yield: {_s(rec.expected_yield)}", MARGIN + 16, y + 62, size=11, color=body)
        report.text(f"Market Demand: {_s(rec.market_demand)}", MARGIN + 16, y + 80, size=11, color=body)

        risk_color = RISK_COLORS.get(rec.risk_level.strip().lower(), HIGH_RISK_COLOR)
        report.text(f"Risk Level: {_s(rec.risk_level)}", MARGIN + 16, y + 98, size=11, color=risk_color)
        y += 140

    if y + 40 > footer_y - 20:
        report.new_page()
        y = MARGIN
    report.text("Summary", MARGIN, y + 20, size=14, color=rgb(30, 60, 40))
    report.wrapped_text(
        _s(result.summary),
        MARGIN,
        y + 40,
        card_w,
        size=11,
        color=rgb(70, 70, 70),
        bottom_limit=footer_y - 20,
    )

    report.text(
        "AgriTrust - Smart Agriculture Intelligence", MARGIN, footer_y, color=MUTED
    )


def draw_profile_report(report: ReportCanvas, profile: Profile) -> None:
    black = rgb(0, 0, 0)
    size = 16
    left = 20 * mm
    report.text("Profile Report", left, 20 * mm, size=size, color=black)

    # JSON indentation is kept by shifting each line right.
    space_width = report.canvas.stringWidth(" ", FONT, size)
    top = 40 * mm
    dumped = json.dumps(profile.model_dump(mode="json"), indent=2, ensure_ascii=False)
    for line in dumped.splitlines():
        stripped = line.lstrip(" ")
        x = left + (len(line) - len(stripped)) * space_width
        top = report.wrapped_text(
            _s(stripped),
            x,
            top,
            report.width - left - x,
            size=size,
            color=black,
            bottom_limit=report.height - left,
        )


def generate_yield_prediction_pdf(
    form: YieldPredictionForm,
    result: YieldPrediction,
    logo_data_url: Optional[str] = None,
    landscape: bool = False,
) -> bytes:
    buffer = io.BytesIO()
    report = ReportCanvas(buffer, landscape=landscape, title="Crop Yield Prediction Report")
    draw_yield_prediction_report(report, form, result, logo=load_logo(logo_data_url))
    report.save()
    return buffer.getvalue()


def generate_crop_recommendation_pdf(
    form: CropRecommendationForm,
    result: CropRecommendationResult,
    logo_data_url: Optional[str] = None,
    landscape: bool = False,
) -> bytes:
    buffer = io.BytesIO()
    report = ReportCanvas(buffer, landscape=landscape, title="Smart Crop Recommendation Report")
    draw_crop_recommendation_report(report, form, result, logo=load_logo(logo_data_url))
    report.save()
    return buffer.getvalue()


def generate_profile_pdf(profile: Profile) -> bytes:
    buffer = io.BytesIO()
    report = ReportCanvas(buffer, title="Profile Report")
    draw_profile_report(report, profile)
    report.save()
    return buffer.getvalue()
