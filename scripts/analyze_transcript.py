#!/usr/bin/env python
"""
Run the ticker pipeline on a transcript from the command line.

    python scripts/analyze_transcript.py transcript.txt
    cat transcript.txt | python scripts/analyze_transcript.py - --ratings --top 3
"""
import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from tickerscout.services.analysis_service import analyze_transcript
from tickerscout.services.email_service import format_price, format_upside
from tickerscout.services.ticker_extractor import extract_tickers
from tickerscout.utils.config import build_pipeline_settings, load_config

load_dotenv()


def read_transcript(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main():
    parser = argparse.ArgumentParser(description="Extract stock tickers from a video transcript.")
    parser.add_argument("transcript", help="Path to a transcript text file, or - for stdin")
    parser.add_argument("--ratings", action="store_true", help="Fetch Yahoo Finance ratings and rank top picks")
    parser.add_argument("--top", type=int, default=None, help="Number of top picks to show")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    text = read_transcript(args.transcript)

    if not args.ratings:
        tickers = extract_tickers(text)
        print(", ".join(tickers) if tickers else "No stock tickers found.")
        return

    settings = build_pipeline_settings(load_config(args.config))
    if args.top is not None:
        settings.top_picks_count = args.top

    analysis = asyncio.run(analyze_transcript(text, settings))
    if not analysis.tickers:
        print("No stock tickers found.")
        return

    print(f"Extracted tickers ({len(analysis.tickers)}): {', '.join(analysis.tickers)}")
    if not analysis.top_picks:
        print("No analyst ratings available for these tickers.")
        return

    print("\nTop picks:")
    for rank, pick in enumerate(analysis.top_picks, start=1):
        print(
            f"#{rank} {pick.ticker:<6} {pick.rating:<12} "
            f"{format_price(pick.current_price)} -> {format_price(pick.target_price)} "
            f"({format_upside(pick.upside)}), {pick.number_of_analysts} analysts"
        )


if __name__ == '__main__':
    main()
