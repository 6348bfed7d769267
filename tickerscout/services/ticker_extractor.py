import re
from typing import List

# Runs of 1-5 uppercase ASCII letters standing alone as a word.
# re.ASCII keeps \b from treating accented letters as word characters.
TICKER_REGEX = re.compile(r"\b[A-Z]{1,5}\b", re.ASCII)
TICKER_FORMAT = re.compile(r"[A-Z]{1,5}", re.ASCII)

# Uppercase tokens that look like tickers but almost never are.
EXCLUDED_WORDS = frozenset({
    # Common English words
    "THE", "AND", "FOR", "ARE", "BUT", "NOT", "YOU", "ALL", "CAN", "HAD",
    "HER", "WAS", "ONE", "OUR", "OUT", "HAS", "HIS", "HOW", "ITS", "LET",
    "MAY", "NEW", "NOW", "OLD", "SEE", "WAY", "WHO", "BOY", "DID", "GET",
    "HIM", "HOT", "LOW", "OWN", "SAY", "SHE", "TOO", "USE", "TOP", "HIGH",
    "JUST", "LIKE", "MAKE", "OVER", "SUCH", "TAKE", "INTO", "YEAR", "YOUR",
    "GOOD", "SOME", "THEM", "TIME", "VERY", "WHEN", "COME", "MADE", "FIND",
    "MORE", "LONG", "HERE", "MANY", "THAN", "MOST", "NEXT", "ONLY", "WHAT",
    "WILL", "WITH", "HAVE", "THIS", "THAT", "FROM", "THEY", "BEEN", "CALL",
    "EACH", "LIVE", "MUCH", "NEED", "PART", "SURE", "TELL", "WELL", "BACK",
    "BEST", "BOTH", "DOWN", "EVEN", "GIVE", "LAST", "LOOK", "WANT", "WORK",
    # Single letters that are words, not tickers
    "A", "I",
    # Common five-letter words
    "ABOUT", "AFTER", "AGAIN", "BELOW", "COULD", "EVERY", "FIRST", "FOUND",
    "GREAT", "HOUSE", "LARGE", "LEARN", "NEVER", "OTHER", "PLACE", "PLANT",
    "POINT", "RIGHT", "SMALL", "SOUND", "SPELL", "STILL", "STUDY", "THEIR",
    "THERE", "THESE", "THING", "THINK", "THREE", "WATER", "WHERE", "WHICH",
    "WHILE", "WORLD", "WOULD", "WRITE", "BEING", "UNDER", "STOCK", "MONEY",
    "PRICE", "SHARE", "VALUE", "TRADE", "MAYBE", "GOING", "TODAY", "VIDEO",
    # Financial jargon
    "ETF", "IPO", "CEO", "CFO", "COO", "CTO", "GDP", "YTD", "QOQ", "MOM",
    "ROI", "YOY", "EPS", "PE", "PB", "PS", "NAV", "AUM", "EBIT",
    "SEC", "NYSE", "AMEX", "OTC", "ADR", "REIT", "FED", "ROE", "EV",
    # Currency codes
    "USD", "EUR", "GBP", "JPY", "CAD", "AUD", "CHF", "CNY", "HKD", "SGD",
    # YouTube filler
    "GUYS", "OKAY", "LETS", "LINK", "CHECK", "HELLO",
})

# Curated tickers that are always accepted, even single letters (V, C) and
# symbols that collide with EXCLUDED_WORDS (LOW).
KNOWN_TICKERS = frozenset({
    # Major tech
    "AAPL", "MSFT", "GOOG", "GOOGL", "AMZN", "META", "NVDA", "TSLA", "AMD", "INTC",
    # Finance
    "JPM", "BAC", "WFC", "GS", "MS", "C", "BRK", "BRKB", "V", "MA",
    # Healthcare
    "JNJ", "UNH", "PFE", "MRK", "ABBV", "TMO", "ABT", "LLY", "BMY", "AMGN",
    # Consumer
    "WMT", "HD", "MCD", "NKE", "SBUX", "TGT", "COST", "LOW", "TJX", "DG",
    # Others
    "DIS", "NFLX", "CRM", "PYPL", "SQ", "SHOP", "UBER", "LYFT", "SNAP", "TWTR",
    "PLTR", "COIN", "RIVN", "LCID", "NIO", "XPEV", "LI", "BABA", "JD", "PDD",
})


def _accept(candidate: str) -> bool:
    """Dictionary rules for a token already known to match the ticker shape."""
    if candidate in KNOWN_TICKERS:
        return True
    if len(candidate) < 2:
        return False
    return candidate not in EXCLUDED_WORDS


def extract_tickers(text: str) -> List[str]:
    """
    Extract probable stock tickers from free text.

    Known tickers always pass; excluded words and unknown single letters are
    dropped. Returns unique symbols sorted ascending.
    """
    if not text:
        return []
    tickers = {match for match in TICKER_REGEX.findall(text) if _accept(match)}
    return sorted(tickers)


def is_valid_ticker(symbol: str) -> bool:
    """Check a single candidate against the same rules extract_tickers applies."""
    if not isinstance(symbol, str) or not TICKER_FORMAT.fullmatch(symbol):
        return False
    return _accept(symbol)
