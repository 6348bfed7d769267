import asyncio
import os
import re
import time
from datetime import datetime
from html import escape
from typing import Dict, Optional

import boto3

from tickerscout.models.analysis import EmailContent
from tickerscout.models.rating import AnalystRating
from tickerscout.utils.logger import logger

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DISCLAIMER = "This is not financial advice. Always do your own research before investing."
FOOTER = "Generated by TickerScout - Data from Yahoo Finance"
RULE = "-" * 40

POSITIVE_COLOR = "#00E676"
NEGATIVE_COLOR = "#FF5252"
CELL_STYLE = "padding: 12px; border-bottom: 1px solid #333;"
HEADER_STYLE = "padding: 12px; text-align: left; color: #B0B0B0; font-weight: 600;"
TABLE_STYLE = "width: 100%; border-collapse: collapse; background-color: #1A1A1A;"


def is_valid_email(address: Optional[str]) -> bool:
    return bool(address) and EMAIL_REGEX.match(address) is not None


def is_production() -> bool:
    return os.getenv("APP_ENV", "development").lower() == "production"


def format_price(price: Optional[float]) -> str:
    return "N/A" if price is None else f"${price:.2f}"


def format_upside(upside: Optional[float]) -> str:
    if upside is None:
        return "N/A"
    prefix = "+" if upside >= 0 else ""
    return f"{prefix}{upside:.1f}%"


def rating_color(rating: str) -> str:
    """Badge colour for a rating label."""
    lower = rating.lower()
    if "strong buy" in lower:
        return "#00E676"
    if "buy" in lower:
        return "#4CAF50"
    if "hold" in lower:
        return "#FFD54F"
    if "sell" in lower:
        return "#FF5252"
    return "#888888"


def upside_color(upside: Optional[float]) -> str:
    return POSITIVE_COLOR if upside is not None and upside >= 0 else NEGATIVE_COLOR


def _format_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return value


def render_subject(content: EmailContent) -> str:
    return f'TickerScout: Analysis of "{content.video_title}"'


# --- Plain text ---

def _rating_line(rating: AnalystRating) -> str:
    return (
        f"{rating.ticker}: {rating.rating} | {format_price(rating.current_price)} -> "
        f"{format_price(rating.target_price)} ({format_upside(rating.upside)})"
    )


def render_email_text(content: EmailContent) -> str:
    """Plain-text body of the results e-mail."""
    lines = [
        "TickerScout - Stock Analysis Results",
        "=" * 40,
        "",
        f"VIDEO: {content.video_title}",
        f"CHANNEL: {content.channel_name}",
        f"ANALYZED: {_format_date(content.analysis_date)}",
        f"URL: {content.video_url}",
        "",
        f"EXTRACTED TICKERS ({len(content.extracted_tickers)}):",
        ", ".join(content.extracted_tickers),
        "",
    ]

    if content.top_picks:
        lines += [f"TOP {len(content.top_picks)} PICKS", RULE]
        for rank, pick in enumerate(content.top_picks, start=1):
            lines += [
                f"#{rank} {pick.ticker} - {pick.company_name}",
                f"   Rating: {pick.rating}",
                f"   Current: {format_price(pick.current_price)} | Target: {format_price(pick.target_price)}",
                f"   Upside: {format_upside(pick.upside)}",
            ]
        lines.append("")

    lines += ["ALL ANALYST RATINGS", RULE]
    lines += [_rating_line(rating) for rating in content.all_ratings]
    lines += ["", RULE, FOOTER, DISCLAIMER]
    return "\n".join(lines) + "\n"


# --- HTML ---

def _rating_row(rating: AnalystRating, rank: Optional[int] = None) -> str:
    rank_cell = f'<td style="{CELL_STYLE}">#{rank}</td>' if rank is not None else ""
    badge = (
        f'<span style="background-color: {rating_color(rating.rating)}; color: #000; '
        f'padding: 4px 8px; border-radius: 4px; font-size: 12px; font-weight: bold;">'
        f"{escape(rating.rating)}</span>"
    )
    return (
        f"<tr>{rank_cell}"
        f'<td style="{CELL_STYLE} font-weight: bold;">{escape(rating.ticker)}</td>'
        f'<td style="{CELL_STYLE}">{escape(rating.company_name)}</td>'
        f'<td style="{CELL_STYLE}">{badge}</td>'
        f'<td style="{CELL_STYLE}">{format_price(rating.current_price)}</td>'
        f'<td style="{CELL_STYLE}">{format_price(rating.target_price)}</td>'
        f'<td style="{CELL_STYLE} color: {upside_color(rating.upside)};">{format_upside(rating.upside)}</td>'
        "</tr>\n"
    )


def _ratings_table(ratings, ranked: bool) -> str:
    headers = (["Rank"] if ranked else []) + ["Ticker", "Company", "Rating", "Current", "Target", "Upside"]
    head = "".join(f'<th style="{HEADER_STYLE}">{h}</th>' for h in headers)
    if ranked:
        rows = "".join(_rating_row(r, rank) for rank, r in enumerate(ratings, start=1))
    else:
        rows = "".join(_rating_row(r) for r in ratings)
    return (
        f'<table style="{TABLE_STYLE}">\n'
        f'<thead><tr style="background-color: #2A2A2A;">{head}</tr></thead>\n'
        f"<tbody>\n{rows}</tbody>\n</table>\n"
    )


def render_email_html(content: EmailContent) -> str:
    """HTML body of the results e-mail: video details, ranked top picks and every rating."""
    tickers = " ".join(
        f'<span style="border: 1px solid #333; border-radius: 4px; padding: 6px 10px;">{escape(t)}</span>'
        for t in content.extracted_tickers
    )

    html = f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>TickerScout Analysis Results</title></head>
<body style="font-family: Helvetica, Arial, sans-serif; background-color: #000; color: #fff; padding: 20px;">
<div style="max-width: 800px; margin: 0 auto; background-color: #121212; border-radius: 12px; padding: 24px;">
    <h1 style="color: #00D4AA; text-align: center;">TickerScout</h1>
    <h2>{escape(content.video_title)}</h2>
    <p style="color: #00D4AA;">{escape(content.channel_name)}</p>
    <p style="color: #666;">Analyzed on {_format_date(content.analysis_date)}</p>
    <a href="{escape(content.video_url)}" style="color: #40C4FF;">View Video</a>

    <h3>Extracted Tickers ({len(content.extracted_tickers)})</h3>
    <div>{tickers}</div>
"""
    if content.top_picks:
        html += f"""
    <h3>Top {len(content.top_picks)} Picks</h3>
    <p style="color: #B0B0B0;">Based on analyst ratings and upside potential</p>
    {_ratings_table(content.top_picks, ranked=True)}"""

    html += f"""
    <h3>All Analyst Ratings</h3>
    {_ratings_table(content.all_ratings, ranked=False)}
    <p style="color: #666; font-size: 12px; text-align: center;">{FOOTER}<br>{DISCLAIMER}</p>
</div>
</body>
</html>
"""
    return html


# --- Delivery ---

def _send_ses(to_address: str, subject: str, html_body: str, text_body: str) -> Dict:
    ses = boto3.client("ses", region_name=os.getenv("AWS_REGION", "us-east-1"))
    return ses.send_email(
        Source=os.getenv("SES_FROM_EMAIL", "noreply@tickerscout.app"),
        Destination={"ToAddresses": [to_address]},
        Message={
            "Subject": {"Data": subject, "Charset": "UTF-8"},
            "Body": {
                "Html": {"Data": html_body, "Charset": "UTF-8"},
                "Text": {"Data": text_body, "Charset": "UTF-8"},
            },
        },
    )


async def send_results_email(to_address: str, content: EmailContent) -> Dict[str, str]:
    """
    Deliver the analysis to to_address.

    Outside production the message is only logged. In production it goes out
    through Amazon SES. Returns the response body for the email endpoints:
    {"message", "messageId"}.
    """
    if not is_production():
        logger.info(f"[DEV] Would send email to: {to_address}")
        logger.debug(f"[DEV] Email body:\n{render_email_text(content)}")
        return {
            "message": "Email sent successfully (development mode)",
            "messageId": f"dev_{int(time.time() * 1000)}",
        }

    response = await asyncio.to_thread(
        _send_ses,
        to_address,
        render_subject(content),
        render_email_html(content),
        render_email_text(content),
    )
    logger.info(f"✅ Results email sent to {to_address}")
    return {"message": "Email sent successfully", "messageId": response["MessageId"]}
