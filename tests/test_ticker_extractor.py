import re

from tickerscout.services.ticker_extractor import (
    EXCLUDED_WORDS,
    KNOWN_TICKERS,
    extract_tickers,
    is_valid_ticker,
)


def test_extracts_simple_tickers():
    tickers = extract_tickers("I recommend buying AAPL and MSFT stocks today.")
    assert "AAPL" in tickers
    assert "MSFT" in tickers


def test_known_tickers_already_sorted():
    assert extract_tickers("AAPL MSFT NVDA TSLA") == ["AAPL", "MSFT", "NVDA", "TSLA"]


def test_output_is_sorted_and_unique():
    tickers = extract_tickers("TSLA AAPL TSLA NVDA AAPL TSLA NVDA MSFT")
    assert tickers == ["AAPL", "MSFT", "NVDA", "TSLA"]


def test_deduplicates_repeated_mentions():
    assert extract_tickers("I love AAPL and AAPL is great. AAPL will grow.") == ["AAPL"]


def test_empty_and_stopword_inputs():
    assert extract_tickers("") == []
    assert extract_tickers("the and for are") == []
    assert extract_tickers("THE AND FOR ARE BUT NOT YOU ALL CAN HAD") == []
    assert extract_tickers("this is a lowercase sentence with no tickers") == []
    assert extract_tickers("12345 67890 123") == []


def test_excludes_jargon_and_currencies():
    text = "The CEO discussed EPS GDP and ETF performance with the FED watching. Trading USD EUR GBP JPY."
    assert extract_tickers(text) == []


def test_single_letters_only_when_known():
    tickers = extract_tickers("A B C D E single letters, plus V.")
    assert tickers == ["C", "V"]


def test_known_tickers_override_exclusions():
    # LOW is both an excluded word and Lowe's ticker
    assert "LOW" in EXCLUDED_WORDS and "LOW" in KNOWN_TICKERS
    assert extract_tickers("Looking at META, COST and LOW today.") == ["COST", "LOW", "META"]


def test_unknown_uppercase_runs_are_accepted():
    assert extract_tickers("Small caps like SOFI and HOOD are moving") == ["HOOD", "SOFI"]


def test_ignores_mixed_case_and_long_words():
    text = "Tesla TSLA Microsoft MSFT Amazon Amzn TOOLONG VERYLONGTICKER"
    assert extract_tickers(text) == ["MSFT", "TSLA"]


def test_no_partial_word_matches():
    assert extract_tickers("AAPLx xMSFT NVDA2 A1B") == []


def test_punctuation_and_parentheses():
    tickers = extract_tickers("Apple (AAPL) and Microsoft (MSFT). Top picks: NVDA! TSLA? GOOGL, AMZN")
    assert tickers == ["AAPL", "AMZN", "GOOGL", "MSFT", "NVDA", "TSLA"]


def test_realistic_transcript():
    transcript = """
        Hey everyone, welcome back to the channel. Today we're going to look at
        some great stock picks for 2024. First up is AAPL, Apple is showing strong
        growth. Next we have NVDA, Nvidia is dominating the AI chip market.
        I'm also bullish on MSFT because of their cloud business. Don't forget
        about GOOGL and their advertising revenue. Finally, META looks like a
        great value play right now. These are my TOP picks for the year.
    """
    tickers = extract_tickers(transcript)
    assert tickers == ["AAPL", "AI", "GOOGL", "META", "MSFT", "NVDA"]
    assert "TOP" not in tickers


def test_is_valid_ticker():
    assert is_valid_ticker("AAPL")
    assert is_valid_ticker("XYZ")
    assert is_valid_ticker("V")
    assert is_valid_ticker("C")
    assert is_valid_ticker("LOW")
    assert not is_valid_ticker("B")
    assert not is_valid_ticker("A")
    assert not is_valid_ticker("TOOLONG")
    assert not is_valid_ticker("aapl")
    assert not is_valid_ticker("Aapl")
    assert not is_valid_ticker("AA1")
    assert not is_valid_ticker("THE")
    assert not is_valid_ticker("CEO")
    assert not is_valid_ticker("")
    assert not is_valid_ticker("AAPL\n")


def test_extract_agrees_with_is_valid_ticker():
    text = (
        "A I V C B X LOW THE META COST USD XYZ ABCD Apple AAPL MSFT, OK? "
        "GOOD BUY SELL HOLD PE GS MS ETF IPO QQQ SPY TOOLONG"
    )
    runs = set(re.findall(r"\b[A-Z]{1,5}\b", text))
    assert extract_tickers(text) == sorted(r for r in runs if is_valid_ticker(r))
