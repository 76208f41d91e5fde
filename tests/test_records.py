import json
import unittest

from sitelinks.records import Entity, SiteKey, Sitelink, iter_entities, parse_entity, split_site_key


def _line(entity_id, sitelinks, **extra):
    record = {"type": "item", "id": entity_id, "sitelinks": sitelinks}
    record.update(extra)
    return json.dumps(record, ensure_ascii=False)


class SplitSiteKeyTests(unittest.TestCase):
    def test_main_project(self) -> None:
        self.assertEqual(split_site_key("enwiki"), SiteKey(lang="en", site=""))

    def test_sister_project(self) -> None:
        self.assertEqual(split_site_key("enwikisource"), SiteKey(lang="en", site="source"))
        self.assertEqual(split_site_key("dewikivoyage"), SiteKey(lang="de", site="voyage"))

    def test_languageless_projects_swap(self) -> None:
        self.assertEqual(split_site_key("commonswiki"), SiteKey(lang="und", site="commons"))
        self.assertEqual(split_site_key("specieswiki"), SiteKey(lang="und", site="species"))

    def test_empty_lang_is_undetermined(self) -> None:
        self.assertEqual(split_site_key("wikidatawiki"), SiteKey(lang="und", site="data"))

    def test_only_second_segment_is_site(self) -> None:
        self.assertEqual(split_site_key("enwikiwiki"), SiteKey(lang="en", site=""))

    def test_missing_marker_drops_sitelink(self) -> None:
        self.assertIsNone(split_site_key("foo"))
        self.assertIsNone(split_site_key(""))

    def test_other_languages_are_not_swapped(self) -> None:
        self.assertEqual(split_site_key("metawiki"), SiteKey(lang="meta", site=""))


class ParseEntityTests(unittest.TestCase):
    def test_parses_id_and_titles(self) -> None:
        line = _line(
            "Q76",
            {"enwiki": {"site": "enwiki", "title": "Barack Obama", "badges": []}},
            labels={"en": {"language": "en", "value": "Barack Obama"}},
        )
        entity = parse_entity(line)
        self.assertEqual(entity, Entity(id="Q76", sitelinks={"enwiki": Sitelink(title="Barack Obama")}))

    def test_malformed_json_is_skipped(self) -> None:
        self.assertIsNone(parse_entity('{"id": "Q1", "sitelinks": {'))
        self.assertIsNone(parse_entity("not json at all"))

    def test_empty_sitelinks_is_skipped(self) -> None:
        self.assertIsNone(parse_entity(_line("Q2", {})))

    def test_missing_fields_are_skipped(self) -> None:
        self.assertIsNone(parse_entity(json.dumps({"id": "Q3"})))
        self.assertIsNone(parse_entity(json.dumps({"sitelinks": {"enwiki": {"title": "X"}}})))
        self.assertIsNone(parse_entity(json.dumps(["Q4"])))

    def test_wrong_types_are_skipped(self) -> None:
        self.assertIsNone(parse_entity(json.dumps({"id": 5, "sitelinks": {"enwiki": {"title": "X"}}})))
        self.assertIsNone(parse_entity(_line("Q6", {"enwiki": "X"})))
        self.assertIsNone(parse_entity(_line("Q7", {"enwiki": {"title": 7}})))
        self.assertIsNone(parse_entity(_line("Q8", {"enwiki": {"site": "enwiki"}})))
        self.assertIsNone(parse_entity(_line("Q9", ["enwiki"])))

    def test_lone_surrogate_title_is_skipped(self) -> None:
        self.assertIsNone(parse_entity('{"id": "Q10", "sitelinks": {"enwiki": {"title": "\\ud800"}}}'))

    def test_iter_entities_filters_failures(self) -> None:
        lines = [
            _line("Q1", {"enwiki": {"title": "A"}}),
            "{broken",
            _line("Q2", {}),
            _line("Q3", {"frwiki": {"title": "B"}}),
        ]
        self.assertEqual([entity.id for entity in iter_entities(lines)], ["Q1", "Q3"])

    def test_iter_entities_is_lazy(self) -> None:
        def lines():
            yield _line("Q1", {"enwiki": {"title": "A"}})
            raise AssertionError("read past the first entity")

        entities = iter_entities(lines())
        self.assertEqual(next(entities).id, "Q1")


if __name__ == "__main__":
    unittest.main()
