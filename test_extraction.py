import unittest

from bs4 import BeautifulSoup

from quote_stats_scraper.cash_flow import (
    InsufficientDataError,
    analyze_free_cash_flow,
    cash_flow_series,
    format_percent,
)
from quote_stats_scraper.growth_estimates import (
    CaptionTableSelector,
    PositionalTableSelector,
    extract_growth_estimates,
)
from quote_stats_scraper.insider import count_insider_buys, find_results_summary
from quote_stats_scraper.models import Magnitude, RawText
from quote_stats_scraper.numeric_text import (
    NumericParseError,
    has_magnitude_marker,
    normalize_number,
    parse_number,
)
from quote_stats_scraper.table_processor import (
    extract_key_values,
    extract_statistics,
    normalize_text,
    table_rows,
)


def soup_of(html):
    return BeautifulSoup(html, 'html.parser')


def simple_table(rows, header=None, tbody=True):
    head = f"<thead><tr><th>{header}</th><th>Value</th></tr></thead>" if header else ""
    body = "".join(
        "<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>" for row in rows
    )
    if tbody:
        body = f"<tbody>{body}</tbody>"
    return f"<table>{head}{body}</table>"


class TestNormalizeNumber(unittest.TestCase):

    def test_plain_numbers_parse_exactly(self):
        self.assertEqual(normalize_number("100"), 100.0)
        self.assertEqual(normalize_number("0.95"), 0.95)
        self.assertEqual(normalize_number("-12.5"), -12.5)
        self.assertEqual(normalize_number("1,234,567.89"), 1234567.89)

    def test_magnitude_suffixes(self):
        self.assertEqual(normalize_number("2.5B"), 2_500_000_000)
        self.assertEqual(normalize_number("750M"), 750_000_000)
        self.assertEqual(normalize_number("1,500M"), 1_500_000_000)
        self.assertEqual(normalize_number("-3M"), -3_000_000)
        self.assertEqual(normalize_number("2.5T"), 2_500_000_000_000)
        self.assertEqual(normalize_number("512k"), 512_000)

    def test_unparseable_text_is_none(self):
        for text in ["", "   ", "N/A", "--", "Aug 30, 2020", "12.5%", "B", "abcM", None]:
            with self.subTest(text=text):
                self.assertIsNone(normalize_number(text))

    def test_minus_one_is_a_legitimate_value(self):
        self.assertEqual(normalize_number("-1"), -1.0)
        self.assertIsNotNone(normalize_number("-1"))

    def test_parse_number_raises(self):
        self.assertEqual(parse_number("42"), 42.0)
        with self.assertRaises(NumericParseError):
            parse_number("N/A")

    def test_has_magnitude_marker(self):
        self.assertTrue(has_magnitude_marker("1.2B"))
        self.assertTrue(has_magnitude_marker(" 750M "))
        self.assertFalse(has_magnitude_marker("0.95"))
        self.assertFalse(has_magnitude_marker("Mar 30, 2023"))
        self.assertFalse(has_magnitude_marker(""))


class TestKeyValueExtraction(unittest.TestCase):

    def test_two_cell_rows_only(self):
        rows = [
            ("Total Cash (mrq)", "1.2B"),
            ("Beta", "0.95"),
            ("", ""),
            ("x", "y", "z"),
        ]
        result = extract_key_values(rows)

        self.assertEqual(list(result), ["Total Cash (mrq)", "Beta"])
        self.assertIsInstance(result["Total Cash (mrq)"], Magnitude)
        self.assertAlmostEqual(result["Total Cash (mrq)"].value, 1_200_000_000)
        self.assertEqual(result["Beta"], RawText("0.95"))

    def test_empty_label_or_value_skipped(self):
        result = extract_key_values([("Label", "  "), ("  ", "1.0M"), ("Ok", "1")])
        self.assertEqual(result, {"Ok": RawText("1")})

    def test_marker_without_number_stays_raw(self):
        result = extract_key_values([("Fiscal Year Ends", "Sep 30 M")])
        self.assertEqual(result["Fiscal Year Ends"], RawText("Sep 30 M"))

    def test_tables_merge_in_order_with_overwrite(self):
        html = (
            simple_table([("Market Cap", "2.5T"), ("Beta", "1.25")])
            + simple_table([("Beta", "1.30"), ("Shares Outstanding <sup>5</sup>", "750M")], tbody=False)
        )
        tables = soup_of(html).find_all('table')
        result = extract_statistics(tables)

        self.assertEqual(list(result), ["Market Cap", "Beta", "Shares Outstanding 5"])
        self.assertEqual(result["Beta"], RawText("1.30"))
        self.assertEqual(result["Market Cap"], Magnitude(2_500_000_000_000))
        self.assertEqual(result["Shares Outstanding 5"], Magnitude(750_000_000))

    def test_table_rows_ignores_header_cells(self):
        table = soup_of(simple_table([("A", "1")], header="Valuation")).table
        self.assertEqual(table_rows(table), [[], ["A", "1"]])

    def test_hidden_cell_content_dropped(self):
        html = '<table><tr><td>Beta<span style="visibility: hidden">x</span></td><td>1.1</td></tr></table>'
        result = extract_statistics(soup_of(html).find_all('table'))
        self.assertEqual(result, {"Beta": RawText("1.1")})

    def test_normalize_text(self):
        self.assertEqual(normalize_text("  Total\u200b  Cash\n(mrq) "), "Total Cash (mrq)")
        self.assertEqual(normalize_text(None), "")


class TestFreeCashFlow(unittest.TestCase):

    def test_average_and_growth(self):
        result = analyze_free_cash_flow(["TTM", "100", "90", "80", "70"])

        self.assertEqual(result.average, 90_000)
        self.assertEqual(result.components, [100_000, 90_000, 80_000])
        self.assertEqual(result.growth_rate, "43%")

    def test_growth_uses_last_period_not_third(self):
        result = analyze_free_cash_flow(["999", "200", "150", "125", "100"])
        self.assertEqual(result.growth_rate, "100%")
        self.assertAlmostEqual(result.average, 158_333.3333, places=3)

    def test_exactly_three_periods(self):
        result = analyze_free_cash_flow(["TTM", "1,200", "1,000", "800"])
        self.assertEqual(result.average, 1_000_000)
        self.assertEqual(result.growth_rate, "50%")

    def test_negative_growth(self):
        result = analyze_free_cash_flow(["TTM", "50", "80", "100"])
        self.assertEqual(result.growth_rate, "-50%")

    def test_insufficient_periods(self):
        for series in [[], ["TTM"], ["TTM", "100", "90"]]:
            with self.subTest(series=series):
                with self.assertRaises(InsufficientDataError):
                    analyze_free_cash_flow(series)

    def test_unparseable_component(self):
        with self.assertRaises(InsufficientDataError):
            analyze_free_cash_flow(["TTM", "100", "-", "80"])

    def test_zero_starting_value(self):
        with self.assertRaises(InsufficientDataError):
            analyze_free_cash_flow(["TTM", "100", "90", "0"])

    def test_format_percent_rounds_half_up(self):
        self.assertEqual(format_percent(0.125), "13%")
        self.assertEqual(format_percent(-0.375), "-37%")
        self.assertEqual(format_percent(0.0), "0%")

    def test_series_from_last_statement_row(self):
        html = """
        <div data-test="fin-row"><div data-test="fin-col">1</div><div data-test="fin-col">2</div></div>
        <div data-test="fin-row">
            <div data-test="fin-col">110,000</div>
            <div data-test="fin-col">100,000</div>
            <div data-test="fin-col">90,000</div>
        </div>
        """
        self.assertEqual(cash_flow_series(soup_of(html)), ["110,000", "100,000", "90,000"])

    def test_series_missing_rows(self):
        self.assertEqual(cash_flow_series(soup_of("<div>No data</div>")), [])


class TestGrowthEstimates(unittest.TestCase):

    def filler_tables(self, count):
        return "".join(simple_table([("Filler", str(i))]) for i in range(count))

    def test_fewer_than_six_tables_is_absent(self):
        tables = soup_of(self.filler_tables(5)).find_all('table')
        self.assertIsNone(extract_growth_estimates(tables))
        self.assertIsNone(extract_growth_estimates([]))

    def test_sixth_table_rows(self):
        growth = simple_table(
            [("Current Qtr.", "5.10%"), ("Next 5 Years (per annum)", "8.12%"), ("", "1%"), ("Only",)],
            header="Growth Estimates"
        )
        tables = soup_of(self.filler_tables(5) + growth + self.filler_tables(1)).find_all('table')
        result = extract_growth_estimates(tables)

        self.assertEqual(result, {"Current Qtr.": "5.10%", "Next 5 Years (per annum)": "8.12%"})

    def test_table_without_body_is_empty(self):
        growth = simple_table([("Next 5 Years (per annum)", "8.12%")], tbody=False)
        tables = soup_of(self.filler_tables(5) + growth).find_all('table')
        self.assertEqual(extract_growth_estimates(tables), {})

    def test_values_are_not_normalized(self):
        growth = simple_table([("Past 5 Years (per annum)", "1.2B")])
        tables = soup_of(self.filler_tables(5) + growth).find_all('table')
        self.assertEqual(extract_growth_estimates(tables), {"Past 5 Years (per annum)": "1.2B"})

    def test_positional_selector_other_index(self):
        tables = soup_of(simple_table([("A", "1")]) + simple_table([("B", "2")])).find_all('table')
        result = extract_growth_estimates(tables, PositionalTableSelector(1))
        self.assertEqual(result, {"B": "2"})

    def test_caption_selector(self):
        growth = simple_table([("Next Year", "9.5%")], header="Growth Estimates")
        tables = soup_of(self.filler_tables(2) + growth).find_all('table')

        self.assertEqual(extract_growth_estimates(tables, CaptionTableSelector()), {"Next Year": "9.5%"})
        self.assertIsNone(extract_growth_estimates(tables[:2], CaptionTableSelector()))


class TestInsiderCount(unittest.TestCase):

    def test_empty_or_missing(self):
        self.assertEqual(count_insider_buys(""), 0)
        self.assertEqual(count_insider_buys(None), 0)

    def test_leading_count(self):
        self.assertEqual(count_insider_buys("7 results."), 7)
        self.assertEqual(count_insider_buys("1 result"), 1)
        self.assertEqual(count_insider_buys("1,204 results."), 1204)

    def test_unparseable_defaults_to_zero(self):
        with self.assertLogs("quote_stats_scraper.insider", level="WARNING"):
            self.assertEqual(count_insider_buys("no results."), 0)

    def test_find_results_summary(self):
        html = "<div><p>Search results</p><div id='results'><h3>7 results.</h3></div></div>"
        self.assertEqual(find_results_summary(soup_of(html)), "7 results.")
        self.assertIsNone(find_results_summary(soup_of("<p>Nothing here</p>")))


if __name__ == "__main__":
    unittest.main()
