import unittest

from markermatch.refmarkers.analysis.match.matcher import ReferenceMarkerMatcher, post_filter
from markermatch.refmarkers.analysis.match.types import IndexBuildError
from markermatch.refmarkers.analysis.parse.bib_records import BibRecord
from markermatch.refmarkers.core.counters import CntManager, Counters
from markermatch.refmarkers.layout.tokens import tokenize_text


def _rec(record_id: str, raw: str, authors: str, year=None, label=None) -> BibRecord:
    return BibRecord(raw=raw, label=label, authors=authors, year=year, record_id=record_id)


RECORDS = [
    _rec("r1", "Smith, J. (1990). Protein folding.", "Smith", 1990, "1"),
    _rec("r2", "Jones, A., Smith, J. (1990). Other work.", "Jones Smith", 1990, "2"),
    _rec("r3", "Creighton, T. (1990). Proteins.", "Creighton", 1990, "3"),
    _rec("r4", "Kuwajima, K., Nitta, K. (1985). Folding.", "Kuwajima Nitta", 1985, "4"),
    _rec("r5", "Khechinashvili, N. et al. (1973). Heat.", "Khechinashvili", 1973, "5"),
    _rec("r6", "Privalov, P. (1979). Stability.", "Privalov", 1979, "6"),
]


class ReferenceMarkerMatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.counters = CntManager()
        self.matcher = ReferenceMarkerMatcher(RECORDS, self.counters)

    def _ids(self, results) -> list:
        return [r.record.record_id if r.record else None for r in results]

    def test_author_year_list(self) -> None:
        results = self.matcher.match_text("Kuwajima et al., 1985; Creighton, 1990")
        self.assertEqual([r.text for r in results], ["Kuwajima et al., 1985", "Creighton, 1990"])
        self.assertEqual(self._ids(results), ["r4", "r3"])
        self.assertEqual(self.counters.get(Counters.STYLE_AUTHORS), 1)
        self.assertEqual(self.counters.get(Counters.MATCHED_REF_MARKERS), 2)

    def test_author_pair_joined_by_and(self) -> None:
        results = self.matcher.match_text("Khechinashvili et al. (1973) and Privalov (1979)")
        self.assertEqual(self._ids(results), ["r5", "r6"])
        self.assertEqual([t.text for t in results[1].tokens], ["Privalov", " ", "(", "1979", ")"])

    def test_ambiguous_author_resolved_by_post_filter(self) -> None:
        results = self.matcher.match_text("Smith, 1990")
        self.assertEqual(len(results), 1)
        self.assertEqual(self._ids(results), ["r1"])
        self.assertEqual(self.counters.get(Counters.MANY_CANDIDATES), 1)
        self.assertEqual(self.counters.get(Counters.MATCHED_REF_MARKERS_AFTER_POST_FILTERING), 1)
        self.assertEqual(self.counters.get(Counters.MATCHED_REF_MARKERS), 1)
        self.assertEqual(self.counters.get(Counters.UNMATCHED_REF_MARKERS), 0)

    def test_post_filter_can_drop_every_candidate(self) -> None:
        results = self.matcher.match_text("The Smith 1990")
        self.assertEqual(self._ids(results), [None])
        self.assertEqual(self.counters.get(Counters.NO_CANDIDATES_AFTER_POST_FILTERING), 1)
        self.assertEqual(self.counters.get(Counters.UNMATCHED_REF_MARKERS), 1)

    def test_post_filter_can_leave_many(self) -> None:
        records = [
            _rec("a", "Smith, J. (1990). One.", "Smith", 1990),
            _rec("b", "Smith, K. (1990). Two.", "Smith", 1990),
        ]
        counters = CntManager()
        with self.assertLogs("markermatch.refmarkers.analysis.match.matcher", level="INFO"):
            results = ReferenceMarkerMatcher(records, counters).match_text("Smith, 1990")
        self.assertEqual(self._ids(results), [None])
        self.assertEqual(counters.get(Counters.MANY_CANDIDATES_AFTER_POST_FILTERING), 1)

    def test_author_without_candidates(self) -> None:
        results = self.matcher.match_text("Brown, 2001")
        self.assertEqual([r.text for r in results], ["Brown, 2001"])
        self.assertEqual(self._ids(results), [None])
        self.assertEqual(self.counters.get(Counters.NO_CANDIDATES), 1)

    def test_dehyphenized_mention(self) -> None:
        results = self.matcher.match_text("Kuwa-\njima et al., 1985")
        self.assertEqual(results[0].text, "Kuwajima et al., 1985")
        self.assertEqual(self._ids(results), ["r4"])

    def test_dehyphenized_mention_with_windows_line_ending(self) -> None:
        results = self.matcher.match_text("Kuwa-\r\njima et al., 1985")
        self.assertEqual(results[0].text, "Kuwajima et al., 1985")
        self.assertEqual(self._ids(results), ["r4"])

    def test_numbered_with_range(self) -> None:
        results = self.matcher.match_text("[1, 3-5]")
        self.assertEqual([r.text for r in results], ["1", "3", "4", "5"])
        self.assertEqual(self._ids(results), ["r1", "r3", "r4", "r5"])
        self.assertEqual([t.text for t in results[2].tokens], ["-"])
        self.assertEqual(self.counters.get(Counters.STYLE_NUMBERED), 1)

    def test_numbered_unknown_label(self) -> None:
        results = self.matcher.match_text("[9]")
        self.assertEqual([r.text for r in results], ["9"])
        self.assertEqual(self._ids(results), [None])
        self.assertEqual(self.counters.get(Counters.NO_CANDIDATES), 1)
        self.assertEqual(self.counters.get(Counters.UNMATCHED_REF_MARKERS), 1)

    def test_numbered_duplicate_labels_stay_unmatched(self) -> None:
        records = [
            _rec("a", "Smith, J. (1990). One.", "Smith", 1990, "7"),
            _rec("b", "Smith, K. (1991). Two.", "Smith", 1991, "7"),
        ]
        counters = CntManager()
        results = ReferenceMarkerMatcher(records, counters).match_text("[7]")
        self.assertEqual(self._ids(results), [None])
        self.assertEqual(counters.get(Counters.MANY_CANDIDATES), 1)
        self.assertEqual(counters.get(Counters.MATCHED_REF_MARKERS_AFTER_POST_FILTERING), 0)

    def test_guarded_range_yields_nothing(self) -> None:
        self.assertEqual(self.matcher.match_text("20-1"), [])
        self.assertEqual(self.matcher.match_text("[1-25]"), [])

    def test_other_style_passthrough(self) -> None:
        tokens = tokenize_text("see above")
        results = self.matcher.match(tokens)
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].text, "see above")
        self.assertEqual(results[0].tokens, tokens)
        self.assertIsNone(results[0].record)
        self.assertEqual(self.counters.get(Counters.STYLE_OTHER), 1)

    def test_matching_is_repeatable(self) -> None:
        tokens = tokenize_text("(Smith, 1990; Privalov, 1979) [2-4]")
        self.assertEqual(self.matcher.match(tokens), self.matcher.match(tokens))
        numbered = tokenize_text("[1, 3-5]")
        self.assertEqual(self.matcher.match(numbered), self.matcher.match(numbered))

    def test_counters_are_optional(self) -> None:
        results = ReferenceMarkerMatcher(RECORDS).match_text("[2]")
        self.assertEqual(self._ids(results), ["r2"])

    def test_index_failure_propagates(self) -> None:
        with self.assertRaises(IndexBuildError):
            ReferenceMarkerMatcher([RECORDS[0], object()], CntManager())


class PostFilterTests(unittest.TestCase):
    def test_keeps_records_opening_with_lead_author(self) -> None:
        kept = post_filter("Smith et al., 1990", RECORDS)
        self.assertEqual([r.record_id for r in kept], ["r1"])

    def test_never_grows(self) -> None:
        for mention in ["Smith", "jones 1990", "", "  ", "Zed"]:
            for size in range(len(RECORDS) + 1):
                candidates = RECORDS[:size]
                with self.subTest(mention=mention, size=size):
                    self.assertLessEqual(len(post_filter(mention, candidates)), len(candidates))


if __name__ == "__main__":
    unittest.main()
