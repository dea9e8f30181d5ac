import tempfile
import unittest
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "dailyinfo" / "src"
sys.path.insert(0, str(SRC))

from dailyinfo.errors import ValidationError
from dailyinfo.keywords import KeywordMatcher
from dailyinfo.models.news import Article
from dailyinfo.reference import get_reference, load_reference


class TestExtractLocations(unittest.TestCase):
    def setUp(self):
        self.matcher = KeywordMatcher()

    def test_extracts_locations_ranked_by_article_count(self):
        articles = [
            {"headline": "Breaking news in New York today", "description": "Something happened in New York."},
            {"headline": "London markets surge", "description": "Stock markets in London are up."},
            {"headline": "New York weather alert", "description": "Heavy rain expected in New York."},
        ]

        self.assertEqual(self.matcher.extract_locations(articles), ["New York", "London"])

    def test_returns_default_location_when_none_found(self):
        articles = [{"headline": "Generic news headline", "description": "Generic description"}]

        self.assertEqual(self.matcher.extract_locations(articles), ["New York"])
        self.assertEqual(self.matcher.extract_locations([]), ["New York"])

    def test_caps_at_three_locations(self):
        articles = [
            {"headline": "Tokyo and Paris", "description": "Berlin, Sydney and Toronto too"},
            {"headline": "Paris again", "description": None},
        ]

        locations = self.matcher.extract_locations(articles)

        self.assertEqual(len(locations), 3)
        self.assertEqual(locations[0], "Paris")

    def test_ties_keep_first_seen_order(self):
        articles = [
            {"headline": "London calling"},
            {"headline": "Tokyo drift"},
            {"headline": "Boston tea"},
        ]

        self.assertEqual(self.matcher.extract_locations(articles), ["London", "Tokyo", "Boston"])

    def test_matching_is_case_insensitive_and_once_per_article(self):
        articles = [
            {"headline": "SEATTLE seattle Seattle", "description": "still seattle"},
            {"headline": "Denver", "description": None},
            {"headline": "denver again", "description": ""},
        ]

        self.assertEqual(self.matcher.extract_locations(articles), ["Denver", "Seattle"])

    def test_accepts_article_models(self):
        articles = [Article(headline="Rally in Chicago", description=None)]

        self.assertEqual(self.matcher.extract_locations(articles), ["Chicago"])


class TestExtractCompanies(unittest.TestCase):
    def setUp(self):
        self.matcher = KeywordMatcher()

    def test_extracts_companies_as_ticker_counts(self):
        articles = [
            {"headline": "Apple announces new product", "description": "Apple unveiled today..."},
            {"headline": "Microsoft and Google partnership", "description": "Microsoft teams up with Google."},
            {"headline": "Apple stock rises", "description": "Apple shares increased."},
        ]

        companies = self.matcher.extract_companies(articles)

        self.assertEqual(companies, {"AAPL": 2, "MSFT": 1, "GOOGL": 1})
        self.assertEqual(list(companies), ["AAPL", "MSFT", "GOOGL"])

    def test_returns_default_ticker_when_no_companies_found(self):
        articles = [{"headline": "Generic news headline", "description": "Generic description"}]

        self.assertEqual(self.matcher.extract_companies(articles), {"SPY": 1})

    def test_aliases_merge_into_one_ticker(self):
        articles = [
            {"headline": "Facebook parent Meta posts earnings", "description": None},
            {"headline": "Meta shares climb", "description": None},
        ]

        companies = self.matcher.extract_companies(articles)

        self.assertEqual(list(companies), ["META"])
        self.assertEqual(companies["META"], 3)

    def test_caps_at_five_tickers(self):
        articles = [
            {"headline": "Tesla, Netflix, Boeing, Pfizer, Walmart and Starbucks report", "description": None},
            {"headline": "Starbucks extends gains", "description": None},
        ]

        companies = self.matcher.extract_companies(articles)

        self.assertEqual(len(companies), 5)
        self.assertEqual(list(companies)[0], "SBUX")
        self.assertEqual(companies["SBUX"], 2)

    def test_case_insensitive_company_match(self):
        articles = [{"headline": "nvidia tops estimates", "description": "APPLE lags"}]

        self.assertEqual(self.matcher.extract_companies(articles), {"NVDA": 1, "AAPL": 1})

    def test_output_is_deterministic(self):
        articles = [
            {"headline": "Amazon opens Dallas hub", "description": "Tesla and Apple watch Dallas"},
            {"headline": "Oracle in Austin", "description": "Adobe too"},
        ]

        first = (self.matcher.extract_locations(articles), list(self.matcher.extract_companies(articles).items()))
        for _ in range(5):
            again = (
                KeywordMatcher().extract_locations(articles),
                list(KeywordMatcher().extract_companies(articles).items()),
            )
            self.assertEqual(again, first)


class TestReferenceData(unittest.TestCase):
    def test_bundled_tables(self):
        ref = get_reference()

        self.assertIn("New York", ref.cities)
        self.assertEqual(ref.companies["Facebook"], "META")
        self.assertEqual(ref.companies["AT&T"], "T")
        self.assertEqual(ref.company_name("AAPL"), "Apple Inc.")
        self.assertEqual(ref.company_name("XYZ"), "XYZ")
        with self.assertRaises(TypeError):
            ref.companies["Foo"] = "FOO"

    def test_custom_reference_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "ref.yaml"
            path.write_text(
                "cities: [Lisbon, Porto]\n"
                "default_location: Lisbon\n"
                "companies: {Galp: galp.ls}\n"
                "default_ticker: psi\n"
            )
            matcher = KeywordMatcher(load_reference(str(path)))

            self.assertEqual(matcher.extract_locations([{"headline": "Porto rain"}]), ["Porto"])
            self.assertEqual(matcher.extract_locations([{"headline": "nothing"}]), ["Lisbon"])
            self.assertEqual(matcher.extract_companies([{"headline": "Galp profits"}]), {"GALP.LS": 1})
            self.assertEqual(matcher.extract_companies([{"headline": "nothing"}]), {"PSI": 1})

    def test_invalid_reference_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "ref.yaml"
            path.write_text("cities: []\ncompanies: {Apple: AAPL}\n")
            with self.assertRaises(ValidationError):
                load_reference(str(path))

            with self.assertRaises(ValidationError):
                load_reference(str(Path(tmpdir) / "missing.yaml"))


if __name__ == "__main__":
    unittest.main()
